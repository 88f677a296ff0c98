"""
Booking status handling shared by the availability and bookings views.

Bookings mirrored to an external calendar can be cancelled there. Those
must not block availability, so they are dropped before the slot
computation sees them.
"""

from dataclasses import replace
from typing import Iterable, List, Mapping

from .models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    BusyInterval,
    CalendarEvent,
    availability_event,
    booked_event,
    busy_event,
)


def filter_active_bookings(
    bookings: Iterable[Booking],
    statuses: Mapping[str, BookingStatus],
) -> List[Booking]:
    """
    Filter out cancelled bookings and attach the guest status to the rest.

    A booking without a calendar event is always active. Bookings missing
    from ``statuses`` are treated as not cancelled.

    Args:
        bookings: Raw bookings
        statuses: Mapping of booking id -> BookingStatus

    Returns:
        Active bookings, in input order
    """
    active: List[Booking] = []

    for booking in bookings:
        status = statuses.get(booking.id)

        if booking.google_event_id and status is not None and status.is_cancelled:
            continue

        guest_status = status.guest_status if status is not None else None
        active.append(replace(booking, guest_status=guest_status))

    return active


def to_calendar_events(
    availability: Iterable[AvailabilityWindow],
    bookings: Iterable[Booking],
    busy_intervals: Iterable[BusyInterval],
) -> List[CalendarEvent]:
    """Build the combined, start-ordered event list for a calendar view."""
    events: List[CalendarEvent] = [availability_event(window) for window in availability]
    events.extend(booked_event(booking) for booking in bookings)
    events.extend(busy_event(busy, index) for index, busy in enumerate(busy_intervals))

    return sorted(events, key=lambda event: event.start)
