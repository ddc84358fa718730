"""Session, login / signup wizard and forgot-password endpoints."""

import logging

from fastapi import APIRouter, Depends, Response

from cityprodrivers.config import settings
from cityprodrivers.deps import find_portal, get_auth_wizard, get_registry, get_reset_wizard
from cityprodrivers.schemas import (
    AuthSubmitResponse, FieldsUpdate, ModeRequest, Notification, RoleRequest,
    SessionResponse, WizardResponse,
)
from cityprodrivers.services.auth_flow import AuthWizard
from cityprodrivers.services.password_reset import PasswordResetWizard
from cityprodrivers.services.registry import PortalSession, SessionRegistry

router = APIRouter()
logger = logging.getLogger(__name__)


async def _render(wizard, notification: Notification | None = None) -> WizardResponse:
    return WizardResponse(**await wizard.snapshot(), notification=notification)


# ── Session ────────────────────────────────────────────────

@router.get("/session", response_model=SessionResponse)
async def get_session(portal: PortalSession | None = Depends(find_portal)):
    identity = portal.auth.identity if portal else None
    return SessionResponse(authenticated=identity is not None, identity=identity)


@router.post("/logout", response_model=Notification)
async def logout(
    response: Response,
    portal: PortalSession | None = Depends(find_portal),
    registry: SessionRegistry = Depends(get_registry),
):
    """Sign out and drop the portal session. Always succeeds, even without one."""
    if portal is not None:
        portal.auth.sign_out()
        await registry.discard(portal.id)
    response.delete_cookie(settings.SESSION_COOKIE)
    return Notification(title="Logged out successfully")


# ── Login / signup wizard ──────────────────────────────────

@router.get("/wizard", response_model=WizardResponse)
async def get_auth_wizard_state(wizard: AuthWizard = Depends(get_auth_wizard)):
    return await _render(wizard)


@router.post("/wizard/mode", response_model=WizardResponse)
async def set_mode(data: ModeRequest, wizard: AuthWizard = Depends(get_auth_wizard)):
    await wizard.set_mode(data.mode)
    return await _render(wizard)


@router.post("/wizard/role", response_model=WizardResponse)
async def select_role(data: RoleRequest, wizard: AuthWizard = Depends(get_auth_wizard)):
    await wizard.select_branch(data.role)
    return await _render(wizard)


@router.patch("/wizard/fields", response_model=WizardResponse)
async def edit_credentials(data: FieldsUpdate, wizard: AuthWizard = Depends(get_auth_wizard)):
    await wizard.edit(**data.fields)
    return await _render(wizard)


@router.post("/wizard/next", response_model=WizardResponse)
async def next_step(wizard: AuthWizard = Depends(get_auth_wizard)):
    previous = (await wizard.snapshot())["step"]
    await wizard.next()
    notification = None
    if previous == "password" and (await wizard.fields()).get("mode") == "signup":
        email = (await wizard.fields()).get("email")
        notification = Notification(title="Code sent", message=f"Check {email} for the verification code.")
    return await _render(wizard, notification)


@router.post("/wizard/back", response_model=WizardResponse)
async def previous_step(wizard: AuthWizard = Depends(get_auth_wizard)):
    await wizard.back()
    return await _render(wizard)


@router.post("/wizard/resend", response_model=WizardResponse)
async def resend_code(wizard: AuthWizard = Depends(get_auth_wizard)):
    await wizard.resend_code()
    email = (await wizard.fields()).get("email")
    return await _render(wizard, Notification(title="Code sent", message=f"Check {email} for the verification code."))


@router.post("/wizard/submit", response_model=AuthSubmitResponse)
async def submit_auth(wizard: AuthWizard = Depends(get_auth_wizard)):
    result = await wizard.submit()
    role = result.identity.role.value
    return AuthSubmitResponse(
        identity=result.identity,
        redirect=result.redirect,
        notification=Notification(title="Welcome!", message=f"Successfully logged in as {role}."),
    )


@router.post("/wizard/reset", response_model=WizardResponse)
async def restart_auth(wizard: AuthWizard = Depends(get_auth_wizard)):
    await wizard.reset()
    return await _render(wizard)


# ── Forgot password ────────────────────────────────────────

@router.get("/reset", response_model=WizardResponse)
async def get_reset_state(wizard: PasswordResetWizard = Depends(get_reset_wizard)):
    return await _render(wizard)


@router.patch("/reset/fields", response_model=WizardResponse)
async def edit_reset(data: FieldsUpdate, wizard: PasswordResetWizard = Depends(get_reset_wizard)):
    await wizard.edit(**data.fields)
    return await _render(wizard)


@router.post("/reset/next", response_model=WizardResponse)
async def request_reset_code(wizard: PasswordResetWizard = Depends(get_reset_wizard)):
    previous = (await wizard.snapshot())["step"]
    await wizard.next()
    notification = None
    if previous == "email":
        email = (await wizard.fields()).get("email")
        notification = Notification(title="Reset code sent", message=f"Check {email} for the reset code.")
    return await _render(wizard, notification)


@router.post("/reset/back", response_model=WizardResponse)
async def reset_back(wizard: PasswordResetWizard = Depends(get_reset_wizard)):
    await wizard.back()
    return await _render(wizard)


@router.post("/reset/submit", response_model=Notification)
async def confirm_reset(wizard: PasswordResetWizard = Depends(get_reset_wizard)):
    notification = await wizard.submit()
    await wizard.reset()
    logger.info("Password reset completed")
    return Notification(**notification)
