"""
Core availability computation - which dates and slots can still be booked.

Pure functions over already-fetched snapshots: no API calls, no database,
no wall clock. The current instant is always passed in as ``now``.

Algorithm:
1. Pick the availability windows touching the requested day
2. Clip each window to the day boundaries
3. Split the clipped range into fixed-length candidate slots
4. Drop candidates that lie in the past or collide with a booking or
   busy interval
"""

import math
from datetime import date as date_type
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

import pendulum
from pendulum import DateTime

from .conflicts import has_conflict
from .models import AvailabilityWindow, Booking, BusyInterval, FreeSlot
from .slot_generator import generate_slot_starts, slot_end

DEFAULT_SLOT_DURATION_MINUTES = 30

SECONDS_PER_DAY = 24 * 60 * 60


def day_bounds(day: DateTime) -> Tuple[DateTime, DateTime]:
    """Return the first and last instant of the calendar day containing ``day``."""
    return day.start_of("day"), day.end_of("day")


def window_intersects_day(
    window: AvailabilityWindow,
    day_start: DateTime,
    day_end: DateTime,
) -> bool:
    """
    Check whether an availability window touches the day.

    True if the window starts or ends inside [day_start, day_end] (both
    inclusive), or covers the whole day.
    """
    return (
        day_start <= window.start <= day_end
        or day_start <= window.end <= day_end
        or (window.start <= day_start and window.end >= day_end)
    )


def clip_to_day(
    window: AvailabilityWindow,
    day_start: DateTime,
    day_end: DateTime,
) -> Tuple[DateTime, DateTime]:
    """Clamp a window to the day boundaries."""
    return max(window.start, day_start), min(window.end, day_end)


def windows_for_day(
    availability: Iterable[AvailabilityWindow],
    day_start: DateTime,
    day_end: DateTime,
) -> List[AvailabilityWindow]:
    """Return the windows touching the day, in input order."""
    return [
        window for window in availability
        if window_intersects_day(window, day_start, day_end)
    ]


def merge_windows(availability: Iterable[AvailabilityWindow]) -> List[AvailabilityWindow]:
    """
    Merge overlapping or adjacent availability windows.

    Never applied implicitly; callers that want de-duplicated slots from
    overlapping windows run this before computing slots. Windows whose
    start is not before their end are dropped. The merged window keeps
    the id of the earliest window it absorbed.

    Example: [09:00-10:00, 09:30-11:00] -> [09:00-11:00]
    """
    valid = sorted(
        (window for window in availability if window.start < window.end),
        key=lambda w: w.start,
    )
    if not valid:
        return []

    merged: List[AvailabilityWindow] = [valid[0]]

    for current in valid[1:]:
        last = merged[-1]

        if current.start <= last.end:
            merged[-1] = AvailabilityWindow(
                id=last.id,
                start=last.start,
                end=max(last.end, current.end),
            )
        else:
            merged.append(current)

    return merged


def day_has_free_slot(
    availability_windows: Iterable[AvailabilityWindow],
    bookings: Sequence[Booking],
    day_start: DateTime,
    day_end: DateTime,
    duration_minutes: float,
    busy_intervals: Sequence[BusyInterval] = (),
    not_before: Optional[DateTime] = None,
) -> bool:
    """
    Check if a specific day has at least one available slot.

    Stops at the first free candidate. Candidates starting before
    ``not_before`` are ignored when it is given.
    """
    for window in windows_for_day(availability_windows, day_start, day_end):
        range_start, range_end = clip_to_day(window, day_start, day_end)

        for slot_start in generate_slot_starts(range_start, range_end, duration_minutes):
            if not_before is not None and slot_start < not_before:
                continue

            candidate_end = slot_end(slot_start, duration_minutes)
            if not has_conflict(slot_start, candidate_end, bookings, busy_intervals):
                return True

    return False


def compute_available_dates(
    availability: Sequence[AvailabilityWindow],
    bookings: Sequence[Booking],
    start_date: DateTime,
    end_date: DateTime,
    duration_minutes: float = DEFAULT_SLOT_DURATION_MINUTES,
    busy_intervals: Sequence[BusyInterval] = (),
    *,
    now: DateTime,
) -> List[str]:
    """
    Compute the dates in a range that still have at least one free slot.

    Args:
        availability: Host's availability windows
        bookings: Active bookings (cancelled ones already removed)
        start_date: Range start
        end_date: Range end (days starting after it are skipped)
        duration_minutes: Duration of each slot
        busy_intervals: Busy times from the external calendar
        now: Current instant; days before its calendar day are skipped
            and, for the current day, slots already begun do not count

    Returns:
        Ascending list of date strings in YYYY-MM-DD format
    """
    start_date = _as_datetime(start_date, now)
    end_date = _as_datetime(end_date, now)

    today = now.start_of("day")
    first_day = start_date.start_of("day")
    day_count = math.ceil((end_date - start_date).total_seconds() / SECONDS_PER_DAY) + 1

    available_dates: List[str] = []

    for offset in range(max(day_count, 0)):
        current = first_day.add(days=offset)

        if current < today or current > end_date:
            continue

        day_start, day_end = day_bounds(current)

        availability_for_date = windows_for_day(availability, day_start, day_end)
        if not availability_for_date:
            continue

        if day_has_free_slot(
            availability_for_date,
            bookings,
            day_start,
            day_end,
            duration_minutes,
            busy_intervals,
            not_before=now,
        ):
            available_dates.append(current.format("YYYY-MM-DD"))

    return available_dates


def compute_available_slots(
    availability: Sequence[AvailabilityWindow],
    bookings: Sequence[Booking],
    date: DateTime,
    duration_minutes: float = DEFAULT_SLOT_DURATION_MINUTES,
    busy_intervals: Sequence[BusyInterval] = (),
    *,
    now: DateTime,
) -> List[FreeSlot]:
    """
    Compute the free slots for a single date.

    Each availability window is handled on its own, so overlapping windows
    yield overlapping (or identical) slots. Use ``merge_windows`` first if
    that is not wanted.

    Args:
        availability: Host's availability windows
        bookings: Active bookings (cancelled ones already removed)
        date: Any instant on the requested day
        duration_minutes: Duration of each slot
        busy_intervals: Busy times from the external calendar
        now: Current instant; slots starting before it are dropped

    Returns:
        List of FreeSlot objects, grouped by window in input order
    """
    day_start, day_end = day_bounds(_as_datetime(date, now))

    slots: List[FreeSlot] = []

    for window in windows_for_day(availability, day_start, day_end):
        range_start, range_end = clip_to_day(window, day_start, day_end)

        for slot_start in generate_slot_starts(range_start, range_end, duration_minutes):
            if slot_start < now:
                continue

            candidate_end = slot_end(slot_start, duration_minutes)
            if has_conflict(slot_start, candidate_end, bookings, busy_intervals):
                continue

            slots.append(FreeSlot(start=slot_start, end=candidate_end))

    return slots


def _as_datetime(value, reference: DateTime) -> DateTime:
    """Coerce plain dates and stdlib datetimes to pendulum DateTime."""
    if isinstance(value, DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value)
    if isinstance(value, date_type):
        return pendulum.datetime(value.year, value.month, value.day, tz=reference.timezone)
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")
