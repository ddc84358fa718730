"""
Per-browser-session context objects.

Each PortalSession owns its SessionState, the verification cooldown, the
in-flight guards of its controls and the FSM keys of its wizards. The
registry lives on `app.state` and is closed by the app lifespan, which
cancels any running cooldown timers.
"""

import logging
import time
import uuid
from typing import Callable

from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import BaseStorage, StorageKey

from cityprodrivers.config import settings
from cityprodrivers.models.identity import Identity
from cityprodrivers.services.gateway import RemoteGateway
from cityprodrivers.services.guards import InFlight
from cityprodrivers.services.session import SessionState
from cityprodrivers.services.verification import VerificationFlow

logger = logging.getLogger(__name__)

WIZARDS = ("booking", "auth", "password_reset")


class PortalSession:

    def __init__(self, session_id: str, gateway: RemoteGateway, storage: BaseStorage):
        self.id = session_id
        self.last_seen = 0.0
        self.gateway = gateway
        self.storage = storage
        self.auth = SessionState(gateway)
        self.verification = VerificationFlow(self.auth)
        self._guards: dict[str, InFlight] = {}
        self._unsubscribe = self.auth.subscribe(self._on_identity_change)

    def _on_identity_change(self, identity: Identity | None) -> None:
        if identity is None:
            # Cooldown does not outlive the identity it was started for
            self.verification.reset()
            logger.info("Session %s: signed out", self.id[:8])
        else:
            logger.info("Session %s: identity %s (%s)", self.id[:8], identity.id, identity.role.value)

    def guard(self, control: str) -> InFlight:
        if control not in self._guards:
            self._guards[control] = InFlight(control)
        return self._guards[control]

    def storage_key(self, destiny: str) -> StorageKey:
        numeric_id = uuid.UUID(self.id).int
        return StorageKey(bot_id=0, chat_id=numeric_id, user_id=numeric_id, destiny=destiny)

    def fsm(self, destiny: str) -> FSMContext:
        return FSMContext(storage=self.storage, key=self.storage_key(destiny))

    async def clear_wizards(self) -> None:
        for destiny in WIZARDS:
            await self.fsm(destiny).clear()

    def close(self) -> None:
        self._unsubscribe()
        self.verification.close()


class SessionRegistry:
    """
    Live portal sessions by cookie id.

    Sessions idle for longer than `idle_timeout` seconds are discarded by
    sweep(), which the request dependencies run before each lookup.
    """

    def __init__(
        self,
        gateway: RemoteGateway,
        storage: BaseStorage,
        idle_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._gateway = gateway
        self._storage = storage
        self._clock = clock
        self.idle_timeout = idle_timeout or settings.SESSION_IDLE_SECONDS
        self._sessions: dict[str, PortalSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> PortalSession | None:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_seen = self._clock()
        return session

    def create(self) -> PortalSession:
        session = PortalSession(uuid.uuid4().hex, self._gateway, self._storage)
        session.last_seen = self._clock()
        self._sessions[session.id] = session
        logger.debug("Session created: %s", session.id[:8])
        return session

    def get_or_create(self, session_id: str | None) -> PortalSession:
        return self.get(session_id) or self.create()

    async def discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        session.close()
        await session.clear_wizards()
        logger.debug("Session discarded: %s", session_id[:8])

    async def sweep(self) -> int:
        """Discard idle sessions. Returns how many were dropped."""
        cutoff = self._clock() - self.idle_timeout
        expired = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]
        for session_id in expired:
            await self.discard(session_id)
        if expired:
            logger.info("Expired %d idle session(s)", len(expired))
        return len(expired)

    def close(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
