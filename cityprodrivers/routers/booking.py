"""Booking wizard endpoints — one wizard per portal session."""

from fastapi import APIRouter, Depends

from cityprodrivers.schemas import (
    BookingHandoffResponse, BookingOptions, BookingWizardResponse, FieldsUpdate, Notification,
)
from cityprodrivers.deps import get_booking_wizard
from cityprodrivers.services.booking import BookingWizard, booking_options

router = APIRouter()


async def _render(wizard: BookingWizard, notification: Notification | None = None) -> BookingWizardResponse:
    return BookingWizardResponse(
        **await wizard.snapshot(),
        options=BookingOptions(**booking_options()),
        notification=notification,
    )


@router.get("/", response_model=BookingWizardResponse)
async def get_booking(wizard: BookingWizard = Depends(get_booking_wizard)):
    return await _render(wizard)


@router.patch("/fields", response_model=BookingWizardResponse)
async def edit_booking(data: FieldsUpdate, wizard: BookingWizard = Depends(get_booking_wizard)):
    await wizard.edit(**data.fields)
    return await _render(wizard)


@router.post("/next", response_model=BookingWizardResponse)
async def next_step(wizard: BookingWizard = Depends(get_booking_wizard)):
    await wizard.next()
    return await _render(wizard)


@router.post("/back", response_model=BookingWizardResponse)
async def previous_step(wizard: BookingWizard = Depends(get_booking_wizard)):
    await wizard.back()
    return await _render(wizard)


@router.post("/submit", response_model=BookingHandoffResponse)
async def submit_booking(wizard: BookingWizard = Depends(get_booking_wizard)):
    """Finish the booking; the browser opens `url` to hand off to WhatsApp."""
    handoff = await wizard.submit()
    return BookingHandoffResponse(
        payload=handoff.payload,
        message=handoff.message,
        url=handoff.url,
        notification=Notification(**handoff.notification),
    )


@router.post("/reset", response_model=BookingWizardResponse)
async def book_another(wizard: BookingWizard = Depends(get_booking_wizard)):
    await wizard.reset()
    return await _render(wizard)
