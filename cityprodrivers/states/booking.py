"""FSM states for the driver booking wizard."""

from aiogram.fsm.state import StatesGroup, State


class BookingFlow(StatesGroup):
    """Booking form: 4 steps, then the WhatsApp handoff screen."""
    service_selection = State()
    trip_details = State()
    schedule = State()
    contact_info = State()
    submitted = State()


BOOKING_STEPS = (
    BookingFlow.service_selection,
    BookingFlow.trip_details,
    BookingFlow.schedule,
    BookingFlow.contact_info,
)
