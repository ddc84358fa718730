"""
Auth wizard — login and signup for customers, drivers and admins.

Flow:
  login  (any role):        role → credentials → password → dashboard
  signup (customer/driver): role → credentials → password → otp → dashboard

The step list is picked once from (role, mode) when the role is chosen.
Leaving the password step on signup creates the account; the backend emails
the verification code as part of sign-up.
"""

import logging
from dataclasses import dataclass

from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State

from cityprodrivers.exceptions import AuthError, StateError, ValidationError
from cityprodrivers.models.identity import Identity, UserRole
from cityprodrivers.services.guards import InFlight
from cityprodrivers.services.inputs import (
    CODE_LENGTH, MIN_PASSWORD_LENGTH, PHONE_LENGTH, is_blank, is_email,
)
from cityprodrivers.services.session import SessionState
from cityprodrivers.services.verification import VerificationFlow
from cityprodrivers.services.wizard import Wizard
from cityprodrivers.states.auth import AuthFlow

logger = logging.getLogger(__name__)

MODES = ("login", "signup")

_LOGIN_STEPS = (AuthFlow.role, AuthFlow.credentials, AuthFlow.password)
_SIGNUP_STEPS = (AuthFlow.role, AuthFlow.credentials, AuthFlow.password, AuthFlow.otp)

AUTH_STEPS: dict[tuple[UserRole, str], tuple[State, ...]] = {
    (UserRole.CUSTOMER, "login"): _LOGIN_STEPS,
    (UserRole.DRIVER, "login"): _LOGIN_STEPS,
    (UserRole.ADMIN, "login"): _LOGIN_STEPS,
    (UserRole.CUSTOMER, "signup"): _SIGNUP_STEPS,
    (UserRole.DRIVER, "signup"): _SIGNUP_STEPS,
}


def resolve_steps(role: str | None, mode: str) -> tuple[State, ...] | None:
    """Step list for a (role, mode) branch, or None if the branch does not exist."""
    try:
        return AUTH_STEPS.get((UserRole(role), mode))
    except ValueError:
        return None


@dataclass
class AuthResult:
    identity: Identity
    redirect: str


class AuthWizard(Wizard):
    name = "auth"
    submitted = AuthFlow.submitted.state
    numeric_fields = {"phone": PHONE_LENGTH, "otp": CODE_LENGTH}
    secret_fields = ("password",)
    defaults = {"mode": "login"}

    def __init__(
        self,
        state: FSMContext,
        session: SessionState,
        verification: VerificationFlow | None = None,
        guard: InFlight | None = None,
    ):
        super().__init__(state, guard)
        self.session = session
        self.verification = verification

    def steps(self, data: dict) -> tuple[State, ...]:
        return resolve_steps(data.get("role"), data.get("mode", "login")) or (AuthFlow.role,)

    # ── Branch selection ───────────────────────────────────

    async def set_mode(self, mode: str) -> str:
        if mode not in MODES:
            raise ValidationError(f"Unknown mode: {mode}")
        if await self.current() != AuthFlow.role.state:
            raise StateError("Switch between login and signup from the first step.")
        await self.state.update_data(mode=mode)
        return mode

    async def select_branch(self, role: str) -> str:
        """Choose the role; fixes the step list and moves to credentials."""
        if await self.current() != AuthFlow.role.state:
            raise StateError("Go back to the first step to change the role.")
        data = await self.fields()
        if role not in {r.value for r in UserRole}:
            raise ValidationError("Choose customer, driver or admin.", title="Unknown role")
        if resolve_steps(role, data["mode"]) is None:
            raise ValidationError("Admin accounts cannot be created here.", title="Not allowed")

        await self.state.update_data(role=role)
        await self.state.set_state(AuthFlow.credentials)
        logger.debug("auth wizard: %s %s", data["mode"], role)
        return AuthFlow.credentials.state

    async def edit(self, **values) -> dict:
        if {"role", "mode"} & values.keys():
            raise ValidationError("Role and mode are chosen on the first step.")
        return await super().edit(**values)

    # ── Predicates ─────────────────────────────────────────

    def is_step_valid(self, step: str, data: dict) -> bool:
        signup = data.get("mode") == "signup"
        if step == "role":
            return resolve_steps(data.get("role"), data.get("mode", "login")) is not None
        if step == "credentials":
            return is_email(data.get("email")) and (not signup or not is_blank(data.get("name")))
        if step == "password":
            return len(data.get("password") or "") >= MIN_PASSWORD_LENGTH
        if step == "otp":
            return len(data.get("otp") or "") == CODE_LENGTH
        return False

    def step_error(self, step: str, data: dict) -> str:
        if step == "role":
            return "Choose whether you are a customer, driver or admin."
        if step == "credentials":
            if data.get("mode") == "signup" and is_blank(data.get("name")):
                return "Please enter your name."
            return "Please enter a valid email address."
        if step == "password":
            return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        if step == "otp":
            return f"Enter the {CODE_LENGTH}-digit code."
        return super().step_error(step, data)

    # ── Side effects ───────────────────────────────────────

    async def on_advance(self, step: str, data: dict) -> None:
        if step == "password" and data.get("mode") == "signup":
            identity = self.session.identity
            if identity is not None:
                # Back from the otp step: the account already exists
                if identity.email == data["email"]:
                    return
                raise StateError(
                    f"An account was already created for {identity.email}. Log out to start over.",
                    title="Already signed up",
                )
            await self.session.sign_up(
                data["email"], data["password"], data["role"],
                data.get("name", ""), data.get("phone", ""),
            )
            if self.verification is not None:
                self.verification.mark_sent()

    async def on_submit(self, data: dict) -> AuthResult:
        if data.get("mode") == "signup":
            await self.session.verify_code(data["email"], data["otp"])
            identity = self.session.update_identity(is_verified=True)
            if self.verification is not None:
                self.verification.reset()
        else:
            identity = await self.session.sign_in(data["email"], data["password"])
            if identity.role.value != data["role"]:
                self.session.sign_out()
                raise AuthError(
                    f"This account is registered as a {identity.role.value}.",
                    title="Wrong account type",
                    status_code=403,
                )
        # Drop the password from wizard storage once it has been used
        await self.state.update_data(password=None)
        return AuthResult(identity=identity, redirect=identity.dashboard_path)

    async def resend_code(self) -> None:
        if self.verification is None:
            raise StateError("Verification is not available.")
        if await self.current() != AuthFlow.otp.state:
            raise StateError("There is no pending verification code.")
        data = await self.fields()
        await self.verification.send(data.get("email"))
