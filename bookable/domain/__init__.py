"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import (
    compute_available_dates,
    compute_available_slots,
    day_has_free_slot,
    merge_windows,
)
from .booking_status import filter_active_bookings, to_calendar_events
from .conflicts import has_conflict
from .models import (
    AttendeeStatus,
    AvailabilitySnapshot,
    AvailabilityWindow,
    Booking,
    BookingStatus,
    BusyInterval,
    CalendarEvent,
    CalendarEventKind,
    FreeSlot,
    TimeRange,
)
from .slot_generator import generate_slot_starts

__all__ = [
    "AttendeeStatus",
    "AvailabilitySnapshot",
    "AvailabilityWindow",
    "Booking",
    "BookingStatus",
    "BusyInterval",
    "CalendarEvent",
    "CalendarEventKind",
    "FreeSlot",
    "TimeRange",
    "compute_available_dates",
    "compute_available_slots",
    "day_has_free_slot",
    "filter_active_bookings",
    "generate_slot_starts",
    "has_conflict",
    "merge_windows",
    "to_calendar_events",
]
