"""
City Pro Drivers — FastAPI Backend
Marketing site content, booking / auth wizards and the role dashboards.
"""

import logging
from contextlib import asynccontextmanager

from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cityprodrivers import __version__
from cityprodrivers.config import settings
from cityprodrivers.exceptions import PortalError
from cityprodrivers.routers import admin, auth, booking, dashboard, locations, pages, verification
from cityprodrivers.services import maps
from cityprodrivers.services.gateway import RemoteGateway, SupabaseGateway
from cityprodrivers.services.registry import SessionRegistry

logger = logging.getLogger(__name__)


def _make_storage() -> BaseStorage:
    if settings.FSM_STORAGE == "redis":
        return RedisStorage.from_url(settings.REDIS_URL)
    return MemoryStorage()


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Every PortalError becomes a destructive toast for the front-end."""
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"title": exc.title, "message": exc.message, "variant": "destructive"},
    )


def create_app(gateway: RemoteGateway | None = None, fsm_storage: BaseStorage | None = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        app.state.gateway = gateway or SupabaseGateway(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        app.state.fsm_storage = fsm_storage or _make_storage()
        app.state.registry = SessionRegistry(app.state.gateway, app.state.fsm_storage)
        logger.info("City Pro Drivers API starting (fsm storage: %s)", type(app.state.fsm_storage).__name__)
        yield
        app.state.registry.close()
        await app.state.fsm_storage.close()
        await app.state.gateway.close()
        await maps.close()
        logger.info("City Pro Drivers API shut down")

    app = FastAPI(
        title="City Pro Drivers API",
        description="Driver hire booking and portal backend",
        version=__version__,
        lifespan=lifespan,
    )

    # ── CORS ───────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)

    # ── Routers ────────────────────────────────────────────────
    app.include_router(pages.router, prefix="/api/pages", tags=["Site"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(booking.router, prefix="/api/booking", tags=["Booking"])
    app.include_router(verification.router, prefix="/api/verification", tags=["Verification"])
    app.include_router(dashboard.router, prefix="/api", tags=["Dashboards"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin Dashboard"])
    app.include_router(locations.router, prefix="/api/locations", tags=["Locations"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": f"City Pro Drivers API v{__version__}"}

    return app


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cityprodrivers.main:app", host="0.0.0.0", port=8000, reload=True)
