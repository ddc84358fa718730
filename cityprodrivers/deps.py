"""FastAPI dependencies: portal session cookie, wizards, role guards."""

from fastapi import Depends, Request, Response

from cityprodrivers.config import settings
from cityprodrivers.exceptions import AuthError
from cityprodrivers.models.identity import Identity, UserRole
from cityprodrivers.services.auth_flow import AuthWizard
from cityprodrivers.services.booking import BookingWizard
from cityprodrivers.services.gateway import RemoteGateway
from cityprodrivers.services.password_reset import PasswordResetWizard
from cityprodrivers.services.registry import PortalSession, SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_gateway(request: Request) -> RemoteGateway:
    return request.app.state.gateway


async def find_portal(
    request: Request,
    registry: SessionRegistry = Depends(get_registry),
) -> PortalSession | None:
    """Portal session for the caller's cookie, or None. Never creates one."""
    await registry.sweep()
    return registry.get(request.cookies.get(settings.SESSION_COOKIE))


def get_portal(
    response: Response,
    portal: PortalSession | None = Depends(find_portal),
    registry: SessionRegistry = Depends(get_registry),
) -> PortalSession:
    """Portal session for the caller's cookie; a new one is issued if unknown."""
    if portal is None:
        portal = registry.create()
        response.set_cookie(settings.SESSION_COOKIE, portal.id, httponly=True, samesite="lax")
    return portal


def signed_in_portal(portal: PortalSession | None = Depends(find_portal)) -> PortalSession:
    if portal is None or portal.auth.identity is None:
        raise AuthError("Please sign in to continue.", title="Not signed in")
    return portal


def get_booking_wizard(portal: PortalSession = Depends(get_portal)) -> BookingWizard:
    return BookingWizard(portal.fsm("booking"), guard=portal.guard("booking"))


def get_auth_wizard(portal: PortalSession = Depends(get_portal)) -> AuthWizard:
    return AuthWizard(
        portal.fsm("auth"),
        portal.auth,
        verification=portal.verification,
        guard=portal.guard("auth"),
    )


def get_reset_wizard(portal: PortalSession = Depends(get_portal)) -> PasswordResetWizard:
    return PasswordResetWizard(
        portal.fsm("password_reset"),
        portal.auth,
        guard=portal.guard("password_reset"),
    )


def current_identity(portal: PortalSession = Depends(signed_in_portal)) -> Identity:
    return portal.auth.identity


def require_admin(identity: Identity = Depends(current_identity)) -> Identity:
    if identity.role != UserRole.ADMIN:
        raise AuthError("Admin access only.", title="Not allowed", status_code=403)
    return identity
