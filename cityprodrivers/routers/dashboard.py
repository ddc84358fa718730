"""Customer and driver dashboards plus the first-login profile form."""

from fastapi import APIRouter, Depends

from cityprodrivers.deps import get_gateway, signed_in_portal
from cityprodrivers.models.records import BookingRecord
from cityprodrivers.schemas import (
    IdentityUpdateResponse, Notification, OnlineRequest, ProfileCompleteRequest,
    ProfileResponse, ProfileUpdate,
)
from cityprodrivers.services import profile
from cityprodrivers.services.gateway import RemoteGateway
from cityprodrivers.services.registry import PortalSession

router = APIRouter()


@router.post("/profile/complete", response_model=IdentityUpdateResponse)
async def complete_profile(
    data: ProfileCompleteRequest,
    portal: PortalSession = Depends(signed_in_portal),
    gateway: RemoteGateway = Depends(get_gateway),
):
    identity = await profile.complete_profile(portal.auth, gateway, **data.model_dump())
    return IdentityUpdateResponse(
        identity=identity,
        notification=Notification(title="Profile completed!", message="Welcome aboard."),
    )


@router.patch("/profile", response_model=IdentityUpdateResponse)
async def update_profile(
    data: ProfileUpdate,
    portal: PortalSession = Depends(signed_in_portal),
    gateway: RemoteGateway = Depends(get_gateway),
):
    identity = await profile.update_profile(portal.auth, gateway, **data.model_dump())
    return IdentityUpdateResponse(
        identity=identity,
        notification=Notification(title="Profile updated"),
    )


# ── Customer ───────────────────────────────────────────────

@router.get("/customer/bookings", response_model=list[BookingRecord])
async def my_bookings(
    portal: PortalSession = Depends(signed_in_portal),
    gateway: RemoteGateway = Depends(get_gateway),
):
    return await profile.customer_bookings(portal.auth, gateway)


# ── Driver ─────────────────────────────────────────────────

@router.get("/driver/profile", response_model=ProfileResponse)
async def my_driver_profile(
    portal: PortalSession = Depends(signed_in_portal),
    gateway: RemoteGateway = Depends(get_gateway),
):
    return ProfileResponse(profile=await profile.driver_profile(portal.auth, gateway))


@router.post("/driver/status", response_model=ProfileResponse)
async def set_driver_status(
    data: OnlineRequest,
    portal: PortalSession = Depends(signed_in_portal),
    gateway: RemoteGateway = Depends(get_gateway),
):
    """Go online / offline for new trips."""
    record = await profile.set_online(portal.auth, gateway, data.online)
    title = "You're online" if data.online else "You're offline"
    return ProfileResponse(profile=record, notification=Notification(title=title))
