"""
Admin dashboard service — KPIs, booking management, driver document review.

All writes go straight to the remote tables; the dashboard re-reads after
each change rather than patching local copies.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from cityprodrivers.exceptions import GatewayError
from cityprodrivers.models.records import (
    DOCUMENT_URL_FIELDS, BookingRecord, BookingStatus, DocumentType, ProfileRecord,
)
from cityprodrivers.services.gateway import RemoteGateway

logger = logging.getLogger(__name__)

NEW_CUSTOMER_WINDOW_DAYS = 30
RECENT_BOOKINGS = 5
BOOKING_FILTERS = ("all",) + tuple(s.value for s in BookingStatus)


@dataclass
class DashboardStats:
    total_revenue: float = 0.0
    total_bookings: int = 0
    active_drivers: int = 0
    new_customers: int = 0


@dataclass
class DashboardData:
    stats: DashboardStats
    bookings: list[BookingRecord] = field(default_factory=list)
    recent_bookings: list[BookingRecord] = field(default_factory=list)
    drivers: list[ProfileRecord] = field(default_factory=list)


# ── Pure helpers ───────────────────────────────────────────

def document_update(driver: ProfileRecord, doc_type: DocumentType, approve: bool) -> dict:
    """
    Row update for approving/rejecting one driver document.

    `documents_verified` is the AND of all four flags, with the flag being
    changed taking its new value.
    """
    all_verified = all(
        approve if doc is doc_type else driver.is_document_verified(doc)
        for doc in DocumentType
    )
    return {doc_type.flag: approve, "documents_verified": all_verified}


def driver_documents(driver: ProfileRecord) -> list[dict]:
    """Uploaded documents of a driver with their review state, for the verification panel."""
    return [
        {
            "doc_type": doc_type,
            "url": getattr(driver, url_field),
            "verified": driver.is_document_verified(doc_type),
        }
        for doc_type, url_field in DOCUMENT_URL_FIELDS.items()
    ]


def compute_stats(
    bookings: list[BookingRecord],
    drivers: list[ProfileRecord],
    new_customers: int,
) -> DashboardStats:
    return DashboardStats(
        total_revenue=sum(b.amount or 0 for b in bookings if b.status == BookingStatus.COMPLETED),
        total_bookings=len(bookings),
        active_drivers=sum(1 for d in drivers if d.is_online),
        new_customers=new_customers,
    )


def filter_bookings(
    bookings: list[BookingRecord],
    status: str = "all",
    search: str = "",
) -> list[BookingRecord]:
    """Status filter ("all" keeps everything) plus case-insensitive search."""
    needle = (search or "").strip().lower()

    def matches(booking: BookingRecord) -> bool:
        if status != "all" and booking.status.value != status:
            return False
        if not needle:
            return True
        return any(
            needle in (value or "").lower()
            for value in (booking.customer_name, booking.id, booking.customer_phone)
        )

    return [b for b in bookings if matches(b)]


def booking_actions(status: BookingStatus) -> list[str]:
    """Status transitions offered for a booking row."""
    actions = []
    if status not in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED):
        actions.append(BookingStatus.CONFIRMED.value)
    if status not in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
        actions.append(BookingStatus.COMPLETED.value)
    if status != BookingStatus.CANCELLED:
        actions.append(BookingStatus.CANCELLED.value)
    return actions


# ── Remote operations ──────────────────────────────────────

async def load_dashboard(gateway: RemoteGateway, now: datetime | None = None) -> DashboardData:
    now = now or datetime.now(timezone.utc)

    booking_rows = await gateway.select("bookings", order_by="created_at", descending=True)
    driver_rows = await gateway.select(
        "profiles", {"role": "driver"}, order_by="created_at", descending=True,
    )
    since = now - timedelta(days=NEW_CUSTOMER_WINDOW_DAYS)
    customer_rows = await gateway.select(
        "profiles", {"role": "customer", "created_at": ("gte", since.isoformat())},
    )

    bookings = [BookingRecord.model_validate(row) for row in booking_rows]
    drivers = [ProfileRecord.model_validate(row) for row in driver_rows]

    return DashboardData(
        stats=compute_stats(bookings, drivers, len(customer_rows)),
        bookings=bookings,
        recent_bookings=bookings[:RECENT_BOOKINGS],
        drivers=drivers,
    )


async def verify_document(
    gateway: RemoteGateway,
    driver_id: str,
    doc_type: DocumentType,
    approve: bool,
) -> ProfileRecord:
    row = await gateway.get("profiles", driver_id)
    if row is None:
        raise GatewayError(f"Driver {driver_id} not found.")
    driver = ProfileRecord.model_validate(row)

    updated = await gateway.update("profiles", driver_id, document_update(driver, doc_type, approve))
    logger.info(
        "Document %s %s for driver %s",
        doc_type.value, "approved" if approve else "rejected", driver_id,
    )
    return ProfileRecord.model_validate(updated)


async def set_booking_status(gateway: RemoteGateway, booking_id: str, status: BookingStatus) -> BookingRecord:
    updated = await gateway.update("bookings", booking_id, {"status": status.value})
    logger.info("Booking %s marked %s", booking_id, status.value)
    return BookingRecord.model_validate(updated)


async def set_driver_online(gateway: RemoteGateway, driver_id: str, online: bool) -> ProfileRecord:
    updated = await gateway.update("profiles", driver_id, {"is_online": online})
    logger.info("Driver %s is now %s", driver_id, "online" if online else "offline")
    return ProfileRecord.model_validate(updated)
