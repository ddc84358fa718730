"""Tests for the login / signup wizard and the forgot-password flow."""

import pytest

from cityprodrivers.exceptions import AuthError, StateError, ValidationError
from cityprodrivers.services.auth_flow import AuthWizard, resolve_steps
from cityprodrivers.services.cooldown import CooldownTimer
from cityprodrivers.services.password_reset import PasswordResetWizard
from cityprodrivers.services.session import SessionState
from cityprodrivers.services.verification import VerificationFlow
from conftest import VALID_CODE, make_state


def _names(steps):
    return [s.state.split(":")[-1] for s in steps]


def test_branch_step_lists():
    assert _names(resolve_steps("driver", "signup")) == ["role", "credentials", "password", "otp"]
    assert _names(resolve_steps("admin", "login")) == ["role", "credentials", "password"]
    assert resolve_steps("admin", "signup") is None
    assert resolve_steps("pilot", "login") is None


@pytest.mark.asyncio
async def test_driver_signup_short_password_stays_on_password(gateway):
    """Signup as driver with a 5-character password is rejected locally."""
    wizard = AuthWizard(make_state(), SessionState(gateway))
    await wizard.set_mode("signup")
    await wizard.select_branch("driver")
    await wizard.edit(name="Ravi", email="ravi@example.com", phone="9876543210")
    await wizard.next()
    await wizard.edit(password="short")

    with pytest.raises(ValidationError):
        await wizard.next()

    assert (await wizard.snapshot())["step"] == "password"
    assert gateway.count("sign_up") == 0


@pytest.mark.asyncio
async def test_driver_signup_full_flow(gateway, clock):
    session = SessionState(gateway)
    verification = VerificationFlow(session, timer=CooldownTimer(sleep=clock.sleep))
    wizard = AuthWizard(make_state(), session, verification=verification)

    await wizard.set_mode("signup")
    await wizard.select_branch("driver")
    await wizard.edit(name="Ravi", email="ravi@example.com")
    await wizard.next()
    await wizard.edit(password="longenough")
    await wizard.next()

    snap = await wizard.snapshot()
    assert snap["step"] == "otp"
    assert "password" not in snap["fields"]
    assert verification.sent_once and verification.remaining == 60

    await wizard.edit(otp=VALID_CODE)
    result = await wizard.submit()

    assert result.redirect == "/driver/dashboard"
    assert result.identity.is_verified is True
    assert session.identity.is_verified is True
    assert verification.remaining == 0
    assert (await wizard.fields())["password"] is None
    verification.close()


@pytest.mark.asyncio
async def test_admin_signup_not_offered(gateway):
    wizard = AuthWizard(make_state(), SessionState(gateway))
    await wizard.set_mode("signup")
    with pytest.raises(ValidationError):
        await wizard.select_branch("admin")
    assert (await wizard.snapshot())["step"] == "role"


@pytest.mark.asyncio
async def test_login_redirects_by_role(gateway):
    gateway.add_account("admin@example.com", "adminpass1", role="admin")
    session = SessionState(gateway)
    wizard = AuthWizard(make_state(), session)

    await wizard.select_branch("admin")
    await wizard.edit(email="admin@example.com")
    await wizard.next()
    await wizard.edit(password="adminpass1")
    result = await wizard.submit()

    assert result.redirect == "/admin/dashboard"
    assert session.identity.role.value == "admin"


@pytest.mark.asyncio
async def test_login_role_mismatch_signs_out(gateway):
    """A customer account cannot log in through the driver branch."""
    gateway.add_account("asha@example.com", "secret123", role="customer")
    session = SessionState(gateway)
    wizard = AuthWizard(make_state(), session)

    await wizard.select_branch("driver")
    await wizard.edit(email="asha@example.com")
    await wizard.next()
    await wizard.edit(password="secret123")

    with pytest.raises(AuthError) as exc:
        await wizard.submit()
    assert exc.value.status_code == 403
    assert session.identity is None
    assert (await wizard.snapshot())["step"] == "password"


@pytest.mark.asyncio
async def test_wrong_password_leaves_wizard_retryable(gateway):
    gateway.add_account("asha@example.com", "secret123")
    wizard = AuthWizard(make_state(), SessionState(gateway))
    await wizard.select_branch("customer")
    await wizard.edit(email="asha@example.com")
    await wizard.next()
    await wizard.edit(password="wrongpass")

    with pytest.raises(AuthError):
        await wizard.submit()
    assert wizard.guard.active is False

    await wizard.edit(password="secret123")
    result = await wizard.submit()
    assert result.redirect == "/customer/dashboard"


@pytest.mark.asyncio
async def test_role_and_mode_only_on_first_step(gateway):
    wizard = AuthWizard(make_state(), SessionState(gateway))
    await wizard.select_branch("customer")

    with pytest.raises(StateError):
        await wizard.set_mode("signup")
    with pytest.raises(ValidationError):
        await wizard.edit(role="admin")

    await wizard.back()
    await wizard.set_mode("signup")
    assert (await wizard.fields())["mode"] == "signup"


@pytest.mark.asyncio
async def test_password_reset_flow(gateway):
    gateway.add_account("asha@example.com", "secret123")
    session = SessionState(gateway)
    wizard = PasswordResetWizard(make_state("password_reset"), session)

    await wizard.edit(email="asha@example.com")
    await wizard.next()
    assert gateway.count("request_password_reset") == 1

    await wizard.edit(code="12 34 56", new_password="brandnew1")
    notification = await wizard.submit()

    assert notification["title"] == "Password updated"
    assert gateway.accounts["asha@example.com"][0] == "brandnew1"
    assert (await wizard.fields())["new_password"] is None


@pytest.mark.asyncio
async def test_signup_back_from_otp_does_not_recreate_account(gateway, clock):
    """otp → back → next reuses the account created on the first pass."""
    session = SessionState(gateway)
    verification = VerificationFlow(session, timer=CooldownTimer(sleep=clock.sleep))
    wizard = AuthWizard(make_state(), session, verification=verification)

    await wizard.set_mode("signup")
    await wizard.select_branch("driver")
    await wizard.edit(name="Ravi", email="ravi@example.com")
    await wizard.next()
    await wizard.edit(password="longenough")
    await wizard.next()

    await wizard.back()
    assert (await wizard.snapshot())["step"] == "password"
    await wizard.next()

    assert (await wizard.snapshot())["step"] == "otp"
    assert gateway.count("sign_up") == 1

    await wizard.edit(otp=VALID_CODE)
    result = await wizard.submit()
    assert result.identity.email == "ravi@example.com"
    verification.close()


@pytest.mark.asyncio
async def test_signup_changed_email_after_account_created(gateway):
    """Changing the email after sign-up never creates a second account."""
    wizard = AuthWizard(make_state(), SessionState(gateway))
    await wizard.set_mode("signup")
    await wizard.select_branch("customer")
    await wizard.edit(name="Asha", email="asha@example.com")
    await wizard.next()
    await wizard.edit(password="secret123")
    await wizard.next()

    await wizard.back()
    await wizard.back()
    await wizard.edit(email="other@example.com")
    await wizard.next()
    with pytest.raises(StateError):
        await wizard.next()

    assert gateway.count("sign_up") == 1
    assert (await wizard.snapshot())["step"] == "password"
