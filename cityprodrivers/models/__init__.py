from cityprodrivers.models.identity import Identity, UserRole, DASHBOARD_PATHS
from cityprodrivers.models.records import (
    BookingRecord, BookingStatus, DocumentType, ProfileRecord, DOCUMENT_URL_FIELDS,
)

__all__ = [
    "Identity", "UserRole", "DASHBOARD_PATHS",
    "BookingRecord", "BookingStatus", "DocumentType", "ProfileRecord",
    "DOCUMENT_URL_FIELDS",
]
