"""Shapes of the remote `profiles` and `bookings` rows read by the dashboards."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class BookingStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DocumentType(str, Enum):
    LICENSE = "license"
    AADHAAR = "aadhaar"
    PAN = "pan"
    ACCOUNT = "account"

    @property
    def flag(self) -> str:
        """Column holding the per-document verification boolean."""
        return f"{self.value}_verified"


DOCUMENT_URL_FIELDS = {
    DocumentType.LICENSE: "license_doc_url",
    DocumentType.AADHAAR: "aadhaar_doc_url",
    DocumentType.PAN: "pan_doc_url",
    DocumentType.ACCOUNT: "account_details_doc_url",
}


class ProfileRecord(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str = "customer"
    is_online: bool = False
    is_verified: bool = False
    license_verified: bool = False
    aadhaar_verified: bool = False
    pan_verified: bool = False
    account_verified: bool = False
    documents_verified: bool = False
    license_doc_url: str | None = None
    aadhaar_doc_url: str | None = None
    pan_doc_url: str | None = None
    photo_url: str | None = None
    account_details_doc_url: str | None = None
    profile_completion: int | None = None
    created_at: datetime | None = None

    class Config:
        extra = "allow"

    def is_document_verified(self, doc_type: DocumentType) -> bool:
        return bool(getattr(self, doc_type.flag))


class BookingRecord(BaseModel):
    id: str
    customer_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    service_type: str | None = None
    trip_type: str | None = None
    pickup_location: str | None = None
    destination: str | None = None
    date: str | None = None
    time: str | None = None
    car_type: str | None = None
    status: BookingStatus = BookingStatus.PENDING
    amount: float | None = None
    created_at: datetime | None = None

    class Config:
        extra = "allow"
