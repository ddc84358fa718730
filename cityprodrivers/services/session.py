"""
Session State Container — who the current actor is.

One SessionState per portal session (see registry.py). Identity is only
changed through the methods below; every successful change is pushed to
subscribers so dependent views can refresh.
"""

import logging
from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from cityprodrivers.exceptions import GatewayError, StateError, ValidationError
from cityprodrivers.models.identity import Identity, UserRole
from cityprodrivers.services.gateway import RemoteGateway
from cityprodrivers.services.inputs import MIN_PASSWORD_LENGTH, digits_only, is_blank, is_email, PHONE_LENGTH

logger = logging.getLogger(__name__)

Subscriber = Callable[[Identity | None], None]

SIGNUP_ROLES = (UserRole.CUSTOMER, UserRole.DRIVER)


def _check_email(email: str) -> str:
    if not is_email(email):
        raise ValidationError("Please enter a valid email address.", title="Invalid email")
    return email.strip()


def _check_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
            title="Weak password",
        )


class SessionState:
    """Holder of the current Identity with subscriber notification."""

    def __init__(self, gateway: RemoteGateway):
        self._gateway = gateway
        self._identity: Identity | None = None
        self._subscribers: list[Subscriber] = []

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _replace(self, identity: Identity | None) -> None:
        self._identity = identity
        for callback in list(self._subscribers):
            try:
                callback(identity)
            except Exception:
                logger.exception("Identity subscriber %r failed", callback)

    def _identity_from(self, record: dict) -> Identity:
        try:
            return Identity.from_record(record)
        except (KeyError, PydanticValidationError) as e:
            logger.error("Malformed profile record from gateway: %s", e)
            raise GatewayError("Your profile could not be loaded.") from e

    # ── Sign in / up / out ─────────────────────────────────

    async def sign_in(self, email: str, password: str) -> Identity:
        email = _check_email(email)
        if not password:
            raise ValidationError("Please enter both email and password.", title="Missing fields")

        record = await self._gateway.sign_in(email, password)
        identity = self._identity_from(record)
        self._replace(identity)
        logger.info("Signed in: id=%s role=%s", identity.id, identity.role.value)
        return identity

    async def sign_up(
        self,
        email: str,
        password: str,
        role: UserRole | str,
        name: str,
        phone: str = "",
    ) -> Identity:
        email = _check_email(email)
        _check_password(password)
        if is_blank(name):
            raise ValidationError("Please enter your name.", title="Missing fields")
        try:
            role = UserRole(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role}") from None
        if role not in SIGNUP_ROLES:
            raise ValidationError("Admin accounts cannot be created here.", title="Not allowed")

        record = await self._gateway.sign_up(
            email, password, role.value, name.strip(), digits_only(phone, PHONE_LENGTH),
        )
        identity = self._identity_from({"role": role.value, **record})
        self._replace(identity)
        logger.info("Signed up: id=%s role=%s", identity.id, identity.role.value)
        return identity

    def sign_out(self) -> None:
        """Clear the identity. Safe to call when nobody is signed in."""
        if self._identity is None:
            return
        logger.info("Signed out: id=%s", self._identity.id)
        self._replace(None)

    def update_identity(self, **fields) -> Identity:
        """Merge `fields` into the identity, replacing it atomically."""
        if self._identity is None:
            raise StateError("Please sign in first.", title="Not signed in")
        role = fields.get("role", self._identity.role)
        if getattr(role, "value", role) != self._identity.role.value:
            raise StateError("Role cannot change during a session.")

        merged = {**self._identity.model_dump(), **fields}
        try:
            identity = Identity(**merged)
        except PydanticValidationError as e:
            raise ValidationError(str(e.errors()[0].get("msg", "Invalid profile value"))) from e
        self._replace(identity)
        return identity

    # ── Delegated verification / recovery ──────────────────

    async def send_verification_code(self, email: str) -> None:
        await self._gateway.send_otp(_check_email(email))

    async def verify_code(self, email: str, code: str) -> None:
        await self._gateway.verify_otp(_check_email(email), code)

    async def request_password_reset(self, email: str) -> None:
        await self._gateway.request_password_reset(_check_email(email))

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        _check_password(new_password)
        await self._gateway.reset_password(_check_email(email), code, new_password)
