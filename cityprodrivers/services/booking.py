"""
Booking wizard — service type → trip details → schedule → contact info,
then a WhatsApp handoff with the request pre-filled.

The handoff is fire-and-forget: the portal returns the deep link for the
browser to open, nothing is stored remotely.
"""

import logging
from dataclasses import dataclass, field
from urllib.parse import quote

from cityprodrivers.config import settings
from cityprodrivers.content import CAR_TYPES, SERVICE_TYPES, TRIP_TYPES
from cityprodrivers.services.inputs import PHONE_LENGTH, is_blank
from cityprodrivers.services.wizard import Wizard
from cityprodrivers.states.booking import BOOKING_STEPS, BookingFlow

logger = logging.getLogger(__name__)

BOOKING_FIELDS = (
    "service_type", "trip_type", "pickup_location", "destination", "date",
    "time", "duration", "car_type", "customer_name", "customer_phone",
)

STEP_ERRORS = {
    "service_selection": "Please choose a service type.",
    "trip_details": "Please enter the pickup location (and destination for outstation trips).",
    "schedule": "Please choose a date, time and car type.",
    "contact_info": "Please enter your name and a 10-digit phone number.",
}


@dataclass
class BookingHandoff:
    payload: dict
    message: str
    url: str
    notification: dict = field(default_factory=lambda: {
        "title": "Booking Submitted!",
        "message": "Redirecting to WhatsApp for confirmation...",
        "variant": "default",
    })


def is_booking_step_valid(step: str, data: dict) -> bool:
    if step == "service_selection":
        return data.get("service_type") in SERVICE_TYPES
    if step == "trip_details":
        return not is_blank(data.get("pickup_location")) and (
            data.get("trip_type", "inside-city") == "inside-city"
            or not is_blank(data.get("destination"))
        )
    if step == "schedule":
        return all(not is_blank(data.get(key)) for key in ("date", "time", "car_type"))
    if step == "contact_info":
        return (
            not is_blank(data.get("customer_name"))
            and len(data.get("customer_phone") or "") >= PHONE_LENGTH
        )
    return False


def build_booking_message(data: dict) -> str:
    """Pre-filled WhatsApp text for a booking request."""
    service = SERVICE_TYPES.get(data.get("service_type"), {}).get("label", data.get("service_type"))
    trip = TRIP_TYPES.get(data.get("trip_type"), data.get("trip_type"))

    lines = [
        "*New Booking Request*",
        "",
        f"Service: {service}",
        f"Trip Type: {trip}",
        f"Pickup: {data.get('pickup_location')}",
    ]
    if data.get("destination"):
        lines.append(f"Destination: {data['destination']}")
    lines += [
        f"Date: {data.get('date')}",
        f"Time: {data.get('time')}",
    ]
    if data.get("duration"):
        lines.append(f"Duration: {data['duration']}")
    lines += [
        f"Car Type: {data.get('car_type')}",
        f"Name: {data.get('customer_name')}",
        f"Phone: {data.get('customer_phone')}",
    ]
    return "\n".join(lines)


def whatsapp_url(message: str, number: str | None = None) -> str:
    return f"https://wa.me/{number or settings.WHATSAPP_NUMBER}?text={quote(message, safe='')}"


class BookingWizard(Wizard):
    name = "booking"
    submitted = BookingFlow.submitted.state
    numeric_fields = {"customer_phone": PHONE_LENGTH}
    defaults = {"trip_type": "inside-city"}

    def __init__(self, state, guard=None, whatsapp_number: str | None = None):
        super().__init__(state, guard)
        self.whatsapp_number = whatsapp_number

    def steps(self, data: dict):
        return BOOKING_STEPS

    def is_step_valid(self, step: str, data: dict) -> bool:
        return is_booking_step_valid(step, data)

    def step_error(self, step: str, data: dict) -> str:
        return STEP_ERRORS.get(step, super().step_error(step, data))

    async def on_submit(self, data: dict) -> BookingHandoff:
        payload = {key: data.get(key, "") for key in BOOKING_FIELDS}
        message = build_booking_message(payload)
        handoff = BookingHandoff(
            payload=payload,
            message=message,
            url=whatsapp_url(message, self.whatsapp_number),
        )
        logger.info(
            "Booking handoff: service=%s trip=%s car=%s",
            payload["service_type"], payload["trip_type"], payload["car_type"],
        )
        return handoff


def booking_options() -> dict:
    return {
        "service_types": [{"value": k, **v} for k, v in SERVICE_TYPES.items()],
        "trip_types": [{"value": k, "label": v} for k, v in TRIP_TYPES.items()],
        "car_types": CAR_TYPES,
    }
