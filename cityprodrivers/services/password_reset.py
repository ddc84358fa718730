"""Forgot-password sub-flow: email → code + new password."""

import logging

from aiogram.fsm.context import FSMContext

from cityprodrivers.services.guards import InFlight
from cityprodrivers.services.inputs import CODE_LENGTH, MIN_PASSWORD_LENGTH, is_email
from cityprodrivers.services.session import SessionState
from cityprodrivers.services.wizard import Wizard
from cityprodrivers.states.auth import PasswordResetFlow

logger = logging.getLogger(__name__)


class PasswordResetWizard(Wizard):
    name = "password_reset"
    submitted = PasswordResetFlow.submitted.state
    numeric_fields = {"code": CODE_LENGTH}
    secret_fields = ("new_password",)

    def __init__(self, state: FSMContext, session: SessionState, guard: InFlight | None = None):
        super().__init__(state, guard)
        self.session = session

    def steps(self, data: dict):
        return (PasswordResetFlow.email, PasswordResetFlow.code)

    def is_step_valid(self, step: str, data: dict) -> bool:
        if step == "email":
            return is_email(data.get("email"))
        if step == "code":
            return (
                len(data.get("code") or "") == CODE_LENGTH
                and len(data.get("new_password") or "") >= MIN_PASSWORD_LENGTH
            )
        return False

    def step_error(self, step: str, data: dict) -> str:
        if step == "email":
            return "Please enter a valid email address."
        return (
            f"Enter the {CODE_LENGTH}-digit code and a new password of at least "
            f"{MIN_PASSWORD_LENGTH} characters."
        )

    async def on_advance(self, step: str, data: dict) -> None:
        if step == "email":
            await self.session.request_password_reset(data["email"])
            logger.info("Password reset requested for %s", data["email"])

    async def on_submit(self, data: dict) -> dict:
        await self.session.reset_password(data["email"], data["code"], data["new_password"])
        await self.state.update_data(new_password=None)
        return {
            "title": "Password updated",
            "message": "You can now log in with your new password.",
            "variant": "default",
        }
