"""Email verification panel for signed-in users."""

from fastapi import APIRouter, Depends

from cityprodrivers.deps import signed_in_portal
from cityprodrivers.schemas import Notification, VerificationStatus, VerifyRequest
from cityprodrivers.services.registry import PortalSession

router = APIRouter()


def _status(portal: PortalSession) -> VerificationStatus:
    identity = portal.auth.identity
    flow = portal.verification
    return VerificationStatus(
        email=identity.email if identity else None,
        is_verified=bool(identity and identity.is_verified),
        remaining=flow.remaining,
        can_send=flow.can_send,
        sent_once=flow.sent_once,
        label=flow.button_label,
    )


@router.get("/", response_model=VerificationStatus)
async def verification_status(portal: PortalSession = Depends(signed_in_portal)):
    return _status(portal)


@router.post("/send", response_model=VerificationStatus)
async def send_code(portal: PortalSession = Depends(signed_in_portal)):
    """Send a code to the identity's email; starts the resend cooldown."""
    await portal.verification.send(portal.auth.identity.email)
    return _status(portal)


@router.post("/verify", response_model=Notification)
async def verify_code(data: VerifyRequest, portal: PortalSession = Depends(signed_in_portal)):
    await portal.verification.verify(portal.auth.identity.email, data.code)
    return Notification(title="Email verified", message="Your email address has been verified.")
