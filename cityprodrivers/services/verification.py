"""
Email verification sub-flow — send / verify a one-time code.

Rules:
  - No send while the cooldown is running or another send is pending
  - Successful send → full cooldown (60 s)
  - Failed send → short cooldown (10 s) so the user can retry sooner
  - Successful verify → identity marked verified
"""

import logging

from cityprodrivers.config import settings
from cityprodrivers.exceptions import PortalError, StateError, ValidationError
from cityprodrivers.services.cooldown import CooldownTimer
from cityprodrivers.services.guards import InFlight
from cityprodrivers.services.inputs import CODE_LENGTH, digits_only, is_blank
from cityprodrivers.services.session import SessionState

logger = logging.getLogger(__name__)


class VerificationFlow:

    def __init__(
        self,
        session: SessionState,
        timer: CooldownTimer | None = None,
        success_cooldown: int | None = None,
        failure_cooldown: int | None = None,
    ):
        self.session = session
        self.timer = timer or CooldownTimer()
        self.success_cooldown = success_cooldown or settings.OTP_COOLDOWN_SECONDS
        self.failure_cooldown = failure_cooldown or settings.OTP_FAILURE_COOLDOWN_SECONDS
        self.sending = InFlight("code send")
        self.verifying = InFlight("code verification")
        self.sent_once = False

    @property
    def remaining(self) -> int:
        return self.timer.remaining

    @property
    def can_send(self) -> bool:
        return not self.timer.active and not self.sending.active

    @property
    def button_label(self) -> str:
        if self.timer.active:
            return f"Resend in {self.timer.remaining}s"
        return "Resend Code" if self.sent_once else "Send Code"

    def mark_sent(self) -> None:
        """Record a code dispatched elsewhere (e.g. by sign-up) and start the cooldown."""
        self.sent_once = True
        self.timer.start(self.success_cooldown)

    async def send(self, email: str | None) -> None:
        if is_blank(email):
            raise ValidationError("Add an email to send a verification code.", title="Email missing")
        if not self.can_send:
            raise StateError(f"Please wait {self.timer.remaining}s before requesting another code.",
                             title="Too soon")

        async with self.sending:
            try:
                await self.session.send_verification_code(email)
            except PortalError as e:
                logger.warning("Verification code send failed for %s: %s", email, e.message)
                self.timer.start(self.failure_cooldown)
                raise
        self.mark_sent()
        logger.info("Verification code sent to %s", email)

    async def verify(self, email: str | None, code: str | None):
        if is_blank(email):
            raise ValidationError("Add an email to verify.", title="Email missing")
        code = digits_only(code, CODE_LENGTH)
        if len(code) < CODE_LENGTH:
            raise ValidationError(f"Enter the {CODE_LENGTH}-digit code.", title="Invalid code")

        async with self.verifying:
            await self.session.verify_code(email, code)
        identity = self.session.update_identity(is_verified=True)
        logger.info("Email verified: id=%s", identity.id)
        return identity

    def reset(self) -> None:
        self.timer.cancel()
        self.sent_once = False

    def close(self) -> None:
        self.timer.cancel()
