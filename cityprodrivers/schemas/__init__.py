"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cityprodrivers.models.identity import Identity
from cityprodrivers.models.records import BookingRecord, BookingStatus, DocumentType, ProfileRecord


# ── Notifications ──────────────────────────────────────────

class Notification(BaseModel):
    """Transient toast shown by the front-end."""
    title: str
    message: str = ""
    variant: str = "default"  # "default" | "destructive"


# ── Session ────────────────────────────────────────────────

class SessionResponse(BaseModel):
    authenticated: bool
    identity: Identity | None = None


# ── Wizards ────────────────────────────────────────────────

class WizardResponse(BaseModel):
    step: str
    index: int | None
    steps: list[str]
    fields: dict[str, Any]
    can_proceed: bool
    submitted: bool
    notification: Notification | None = None


class FieldsUpdate(BaseModel):
    fields: dict[str, Any] = Field(default_factory=dict)


class ModeRequest(BaseModel):
    mode: str = Field(..., pattern="^(login|signup)$")


class RoleRequest(BaseModel):
    role: str


class BookingOptions(BaseModel):
    service_types: list[dict]
    trip_types: list[dict]
    car_types: list[str]


class BookingWizardResponse(WizardResponse):
    options: BookingOptions | None = None


class BookingHandoffResponse(BaseModel):
    payload: dict[str, Any]
    message: str
    url: str
    notification: Notification


class AuthSubmitResponse(BaseModel):
    identity: Identity
    redirect: str
    notification: Notification


# ── Verification ───────────────────────────────────────────

class VerificationStatus(BaseModel):
    email: str | None
    is_verified: bool
    remaining: int
    can_send: bool
    sent_once: bool
    label: str


class VerifyRequest(BaseModel):
    code: str


# ── Profiles / dashboards ──────────────────────────────────

class ProfileCompleteRequest(BaseModel):
    phone: str
    address: str = ""
    city: str = ""
    pincode: str = ""
    experience: str = ""


class ProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None


class OnlineRequest(BaseModel):
    online: bool


class DocumentReview(BaseModel):
    doc_type: DocumentType
    approve: bool


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingRow(BookingRecord):
    actions: list[str] = Field(default_factory=list)


class DocumentStatus(BaseModel):
    doc_type: DocumentType
    url: str | None = None
    verified: bool = False


class DriverRow(ProfileRecord):
    documents: list[DocumentStatus] = Field(default_factory=list)


class DashboardStatsResponse(BaseModel):
    total_revenue: float
    total_bookings: int
    active_drivers: int
    new_customers: int


class AdminDashboardResponse(BaseModel):
    stats: DashboardStatsResponse
    recent_bookings: list[BookingRow]
    bookings: list[BookingRow]
    drivers: list[DriverRow]


class ProfileResponse(BaseModel):
    profile: ProfileRecord
    notification: Notification | None = None


class BookingUpdateResponse(BaseModel):
    booking: BookingRow
    notification: Notification


class IdentityUpdateResponse(BaseModel):
    identity: Identity
    notification: Notification


# ── Locations ──────────────────────────────────────────────

class LocationResult(BaseModel):
    address: str | None
    lat: float
    lng: float
