"""Profile editing and the customer / driver dashboard operations."""

import logging

from cityprodrivers.exceptions import AuthError, StateError, ValidationError
from cityprodrivers.models.identity import Identity, UserRole
from cityprodrivers.models.records import BookingRecord, ProfileRecord
from cityprodrivers.services.gateway import RemoteGateway
from cityprodrivers.services.inputs import PHONE_LENGTH, digits_only, is_blank, is_email
from cityprodrivers.services.session import SessionState

logger = logging.getLogger(__name__)

PINCODE_LENGTH = 6
DRIVER_PROFILE_FIELDS = ("address", "city", "pincode", "experience")


def _require_identity(session: SessionState, role: UserRole | None = None) -> Identity:
    identity = session.identity
    if identity is None:
        raise StateError("Please sign in first.", title="Not signed in")
    if role is not None and identity.role != role:
        raise AuthError(f"Only {role.value}s can do this.", title="Not allowed", status_code=403)
    return identity


def _clean_phone(phone: str | None) -> str:
    phone = digits_only(phone, PHONE_LENGTH)
    if len(phone) < PHONE_LENGTH:
        raise ValidationError("Please enter a valid 10-digit phone number.", title="Invalid Phone Number")
    return phone


async def complete_profile(
    session: SessionState,
    gateway: RemoteGateway,
    phone: str,
    address: str = "",
    city: str = "",
    pincode: str = "",
    experience: str = "",
) -> Identity:
    """First-login profile form. Drivers also give address and experience."""
    identity = _require_identity(session)
    values = {"phone": _clean_phone(phone), "profile_completion": 100}

    if identity.role == UserRole.DRIVER:
        driver_fields = {
            "address": address,
            "city": city,
            "pincode": digits_only(pincode, PINCODE_LENGTH),
            "experience": experience,
        }
        missing = [k for k, v in driver_fields.items() if is_blank(v)]
        if missing:
            raise ValidationError(f"Please fill in: {', '.join(missing)}.", title="Missing fields")
        values.update({k: v.strip() for k, v in driver_fields.items()})

    await gateway.update("profiles", identity.id, values)
    logger.info("Profile completed: id=%s role=%s", identity.id, identity.role.value)
    return session.update_identity(phone=values["phone"], profile_completion=100)


async def update_profile(
    session: SessionState,
    gateway: RemoteGateway,
    name: str | None = None,
    phone: str | None = None,
    email: str | None = None,
) -> Identity:
    identity = _require_identity(session)
    values = {}
    if name is not None:
        if is_blank(name):
            raise ValidationError("Name cannot be empty.")
        values["name"] = name.strip()
    if phone is not None:
        values["phone"] = _clean_phone(phone)
    if email is not None:
        if not is_email(email):
            raise ValidationError("Please enter a valid email address.", title="Invalid email")
        values["email"] = email.strip()
    if not values:
        return identity

    await gateway.update("profiles", identity.id, values)
    logger.info("Profile updated: id=%s fields=%s", identity.id, sorted(values))
    return session.update_identity(**values)


async def set_online(session: SessionState, gateway: RemoteGateway, online: bool) -> ProfileRecord:
    identity = _require_identity(session, UserRole.DRIVER)
    updated = await gateway.update("profiles", identity.id, {"is_online": online})
    logger.info("Driver %s went %s", identity.id, "online" if online else "offline")
    return ProfileRecord.model_validate(updated)


async def driver_profile(session: SessionState, gateway: RemoteGateway) -> ProfileRecord:
    identity = _require_identity(session, UserRole.DRIVER)
    row = await gateway.get("profiles", identity.id)
    return ProfileRecord.model_validate(row or {"id": identity.id, "role": identity.role.value})


async def customer_bookings(session: SessionState, gateway: RemoteGateway) -> list[BookingRecord]:
    identity = _require_identity(session, UserRole.CUSTOMER)
    rows = await gateway.select(
        "bookings", {"customer_id": identity.id}, order_by="created_at", descending=True,
    )
    return [BookingRecord.model_validate(row) for row in rows]
