"""FSM states for sign-in / sign-up and password recovery."""

from aiogram.fsm.state import StatesGroup, State


class AuthFlow(StatesGroup):
    """Login / signup wizard. Which steps apply depends on role and mode."""
    role = State()
    credentials = State()
    password = State()
    otp = State()
    submitted = State()  # dashboard redirect


class PasswordResetFlow(StatesGroup):
    """Forgot-password sub-flow."""
    email = State()
    code = State()
    submitted = State()
