"""
Conflict detection between a candidate slot and blocked time.

Intervals are half-open: a slot ending exactly when a booking starts (or
starting exactly when one ends) is not in conflict.
"""

from typing import Iterable

from pendulum import DateTime

from .models import Booking, BusyInterval


def intervals_overlap(
    a_start: DateTime,
    a_end: DateTime,
    b_start: DateTime,
    b_end: DateTime,
) -> bool:
    """Return True if [a_start, a_end) and [b_start, b_end) share more than a boundary."""
    return a_start < b_end and a_end > b_start


def has_conflict(
    candidate_start: DateTime,
    candidate_end: DateTime,
    bookings: Iterable[Booking],
    busy_intervals: Iterable[BusyInterval],
) -> bool:
    """Check whether a candidate slot collides with any booking or busy interval."""
    booking_conflict = any(
        intervals_overlap(candidate_start, candidate_end, booking.start, booking.end)
        for booking in bookings
    )
    if booking_conflict:
        return True

    return any(
        intervals_overlap(candidate_start, candidate_end, busy.start, busy.end)
        for busy in busy_intervals
    )
