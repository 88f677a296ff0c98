"""
Domain models for availability windows, bookings, busy intervals and slots.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from pendulum import DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    The span a snapshot is fetched for.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    A span during which the host is nominally bookable.

    Windows are not validated: one with start >= end simply produces
    no candidate slots.
    """
    id: str
    start: DateTime
    end: DateTime


class AttendeeStatus(str, Enum):
    """Guest response status as reported by the external calendar."""
    NEEDS_ACTION = "needsAction"
    DECLINED = "declined"
    TENTATIVE = "tentative"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class BookingStatus:
    """Status of a booking's calendar event as reported by the calendar provider."""
    is_cancelled: bool = False
    guest_status: Optional[AttendeeStatus] = None


@dataclass(frozen=True)
class Booking:
    """
    A confirmed reservation that removes availability.

    Only ``start`` and ``end`` are used by the slot computation; the
    remaining fields travel along for display and status lookups.
    """
    id: str
    start: DateTime
    end: DateTime
    google_event_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_status: Optional[AttendeeStatus] = None


@dataclass(frozen=True)
class BusyInterval:
    """A block imported from an external calendar."""
    start: DateTime
    end: DateTime
    title: str = ""
    account_email: str = ""


@dataclass(frozen=True)
class FreeSlot:
    """
    A bookable slot. ``end`` is always ``start`` plus the requested duration.
    """
    start: DateTime
    end: DateTime

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:mm – HH:mm
        """
        date_str = self.start.format("dddd, YYYY-MM-DD")
        return f"{date_str} | {self.start.format('HH:mm')} – {self.end.format('HH:mm')}"


class CalendarEventKind(str, Enum):
    """Discriminator for blocks sharing one calendar surface."""
    AVAILABILITY = "availability"
    BUSY = "busy"
    BOOKED = "booked"


@dataclass(frozen=True)
class CalendarEvent:
    """
    A block on the host's calendar view.

    ``kind`` decides what the block is; callers dispatch on it rather
    than on which optional fields happen to be filled in.
    """
    kind: CalendarEventKind
    id: str
    start: DateTime
    end: DateTime
    label: str = ""
    account_email: Optional[str] = None
    guest_email: Optional[str] = None
    guest_status: Optional[AttendeeStatus] = None

    @property
    def is_editable(self) -> bool:
        """Only availability blocks may be moved or resized."""
        return self.kind is CalendarEventKind.AVAILABILITY


def availability_event(window: AvailabilityWindow) -> CalendarEvent:
    return CalendarEvent(
        kind=CalendarEventKind.AVAILABILITY,
        id=window.id,
        start=window.start,
        end=window.end,
        label="Available",
    )


def busy_event(busy: BusyInterval, index: int = 0) -> CalendarEvent:
    return CalendarEvent(
        kind=CalendarEventKind.BUSY,
        id=f"busy-{index}",
        start=busy.start,
        end=busy.end,
        label=busy.title or "Busy",
        account_email=busy.account_email or None,
    )


def booked_event(booking: Booking) -> CalendarEvent:
    return CalendarEvent(
        kind=CalendarEventKind.BOOKED,
        id=booking.id,
        start=booking.start,
        end=booking.end,
        label=booking.guest_name or "Booked",
        guest_email=booking.guest_email,
        guest_status=booking.guest_status,
    )


def is_busy_event(event: CalendarEvent) -> bool:
    return event.kind is CalendarEventKind.BUSY


def is_booked_event(event: CalendarEvent) -> bool:
    return event.kind is CalendarEventKind.BOOKED


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """
    Everything a query needs, fetched once from the data source.

    ``statuses`` maps booking id to its calendar status and is applied by
    the service before bookings reach the slot computation.
    """
    availability: Tuple[AvailabilityWindow, ...] = ()
    bookings: Tuple[Booking, ...] = ()
    busy_intervals: Tuple[BusyInterval, ...] = ()
    statuses: Mapping[str, BookingStatus] = field(default_factory=dict)
