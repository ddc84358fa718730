"""Admin portal — dashboard KPIs, booking management, driver verification."""

from fastapi import APIRouter, Depends, Query

from cityprodrivers.deps import get_gateway, require_admin
from cityprodrivers.exceptions import ValidationError
from cityprodrivers.models.identity import Identity
from cityprodrivers.models.records import BookingRecord, ProfileRecord
from cityprodrivers.schemas import (
    AdminDashboardResponse, BookingRow, BookingStatusUpdate, BookingUpdateResponse,
    DashboardStatsResponse, DocumentReview, DriverRow, Notification, OnlineRequest, ProfileResponse,
)
from cityprodrivers.services import admin
from cityprodrivers.services.gateway import RemoteGateway

router = APIRouter()


def _row(booking: BookingRecord) -> BookingRow:
    return BookingRow(**booking.model_dump(), actions=admin.booking_actions(booking.status))


def _driver_row(driver: ProfileRecord) -> DriverRow:
    return DriverRow(**driver.model_dump(), documents=admin.driver_documents(driver))


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def dashboard(
    identity: Identity = Depends(require_admin),
    gateway: RemoteGateway = Depends(get_gateway),
):
    data = await admin.load_dashboard(gateway)
    return AdminDashboardResponse(
        stats=DashboardStatsResponse(**vars(data.stats)),
        recent_bookings=[_row(b) for b in data.recent_bookings],
        bookings=[_row(b) for b in data.bookings],
        drivers=[_driver_row(d) for d in data.drivers],
    )


@router.get("/bookings", response_model=list[BookingRow])
async def list_bookings(
    status: str = Query("all"),
    search: str = Query(""),
    identity: Identity = Depends(require_admin),
    gateway: RemoteGateway = Depends(get_gateway),
):
    if status not in admin.BOOKING_FILTERS:
        raise ValidationError(f"Unknown status filter: {status}")
    data = await admin.load_dashboard(gateway)
    return [_row(b) for b in admin.filter_bookings(data.bookings, status, search)]


@router.post("/bookings/{booking_id}/status", response_model=BookingUpdateResponse)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    identity: Identity = Depends(require_admin),
    gateway: RemoteGateway = Depends(get_gateway),
):
    booking = await admin.set_booking_status(gateway, booking_id, data.status)
    return BookingUpdateResponse(
        booking=_row(booking),
        notification=Notification(title="Booking updated", message=f"Status set to {data.status.value}."),
    )


@router.get("/drivers", response_model=list[DriverRow])
async def list_drivers(
    identity: Identity = Depends(require_admin),
    gateway: RemoteGateway = Depends(get_gateway),
):
    return [_driver_row(d) for d in (await admin.load_dashboard(gateway)).drivers]


@router.post("/drivers/{driver_id}/documents", response_model=ProfileResponse)
async def review_document(
    driver_id: str,
    data: DocumentReview,
    identity: Identity = Depends(require_admin),
    gateway: RemoteGateway = Depends(get_gateway),
):
    """Approve or reject one document; recomputes documents_verified."""
    driver = await admin.verify_document(gateway, driver_id, data.doc_type, data.approve)
    verdict = "approved" if data.approve else "rejected"
    return ProfileResponse(
        profile=driver,
        notification=Notification(title="Document updated", message=f"{data.doc_type.value} {verdict}."),
    )


@router.post("/drivers/{driver_id}/online", response_model=ProfileResponse)
async def toggle_driver(
    driver_id: str,
    data: OnlineRequest,
    identity: Identity = Depends(require_admin),
    gateway: RemoteGateway = Depends(get_gateway),
):
    driver = await admin.set_driver_online(gateway, driver_id, data.online)
    return ProfileResponse(
        profile=driver,
        notification=Notification(title="Driver updated", message="Online" if data.online else "Offline"),
    )
