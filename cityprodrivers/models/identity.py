"""Identity of the current portal actor."""

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    CUSTOMER = "customer"
    DRIVER = "driver"
    ADMIN = "admin"


DASHBOARD_PATHS = {
    UserRole.CUSTOMER: "/customer/dashboard",
    UserRole.DRIVER: "/driver/dashboard",
    UserRole.ADMIN: "/admin/dashboard",
}


class Identity(BaseModel):
    """
    Signed-in actor as held by the session container.

    Instances are frozen: every update builds a new, re-validated Identity
    so readers never observe a half-applied change.
    """
    id: str
    name: str = ""
    email: str | None = None
    phone: str = ""
    role: UserRole
    is_verified: bool = False
    # Display value only, never used for access control
    profile_completion: int = Field(0, ge=0, le=100)

    class Config:
        frozen = True

    @classmethod
    def from_record(cls, record: dict) -> "Identity":
        """Build an identity from a `profiles` row returned by the gateway."""
        return cls(
            id=str(record["id"]),
            name=record.get("name") or record.get("full_name") or "",
            email=record.get("email"),
            phone=record.get("phone") or "",
            role=record.get("role") or UserRole.CUSTOMER,
            is_verified=bool(record.get("is_verified", False)),
            profile_completion=int(record.get("profile_completion") or 0),
        )

    @property
    def dashboard_path(self) -> str:
        return DASHBOARD_PATHS[self.role]
