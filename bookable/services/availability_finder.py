"""
Application services for answering availability queries.

The service fetches a snapshot through a data source adapter, drops
cancelled bookings, captures the current instant once per query and
delegates the actual computation to the pure domain functions. Keeping
the data source behind a protocol lets tests plug in a stub.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Protocol

import pendulum
from pendulum import DateTime

from ..domain.availability import (
    DEFAULT_SLOT_DURATION_MINUTES,
    compute_available_dates,
    compute_available_slots,
    merge_windows,
)
from ..domain.booking_status import filter_active_bookings
from ..domain.exceptions import ConfigurationError
from ..domain.models import AvailabilitySnapshot, FreeSlot, TimeRange

logger = logging.getLogger(__name__)


class SnapshotSourceProtocol(Protocol):
    """Protocol describing the data source behaviour needed by the service."""

    async def get_snapshot(self, time_range: TimeRange) -> AvailabilitySnapshot:
        """Return availability, bookings, busy times and booking statuses for a range."""


Clock = Callable[[str], DateTime]


class AvailabilityFinderService:
    """
    Orchestrates snapshot retrieval and availability calculation.

    ``clock`` is called exactly once per query with the configured timezone,
    so past-slot filtering within one query is consistent.
    """

    def __init__(
        self,
        snapshot_source: SnapshotSourceProtocol,
        *,
        timezone: str = "UTC",
        clock: Clock = pendulum.now,
        merge_overlapping_windows: bool = False,
    ) -> None:
        self._snapshot_source = snapshot_source
        self._timezone = timezone
        self._clock = clock
        self._merge_overlapping_windows = merge_overlapping_windows

    async def find_dates(
        self,
        *,
        start_date: DateTime,
        end_date: DateTime,
        duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES,
    ) -> List[str]:
        """Return the bookable dates (YYYY-MM-DD) between start_date and end_date."""
        self._validate_duration(duration_minutes)

        if start_date > end_date:
            logger.debug("Empty date range %s - %s", start_date, end_date)
            return []

        now = self._clock(self._timezone)
        snapshot = await self.fetch_snapshot(
            TimeRange(start=start_date.start_of("day"), end=end_date.end_of("day"))
        )

        dates = compute_available_dates(
            snapshot.availability,
            snapshot.bookings,
            start_date,
            end_date,
            duration_minutes,
            snapshot.busy_intervals,
            now=now,
        )
        logger.debug("Found %d available dates between %s and %s", len(dates), start_date, end_date)
        return dates

    async def find_slots(
        self,
        *,
        date: DateTime,
        duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES,
    ) -> List[FreeSlot]:
        """Return the free slots on the day containing ``date``."""
        self._validate_duration(duration_minutes)

        now = self._clock(self._timezone)
        snapshot = await self.fetch_snapshot(
            TimeRange(start=date.start_of("day"), end=date.end_of("day"))
        )

        slots = compute_available_slots(
            snapshot.availability,
            snapshot.bookings,
            date,
            duration_minutes,
            snapshot.busy_intervals,
            now=now,
        )
        logger.debug("Found %d free slots on %s", len(slots), date.format("YYYY-MM-DD"))
        return slots

    async def fetch_snapshot(self, time_range: TimeRange) -> AvailabilitySnapshot:
        """
        Fetch a snapshot and reduce its bookings to the active ones.

        The returned snapshot's statuses are already applied, so its
        bookings can be passed straight to the domain functions.
        """
        snapshot = await self._snapshot_source.get_snapshot(time_range)

        active_bookings = filter_active_bookings(snapshot.bookings, snapshot.statuses)
        dropped = len(snapshot.bookings) - len(active_bookings)
        if dropped:
            logger.debug("Ignoring %d cancelled booking(s)", dropped)

        availability = snapshot.availability
        if self._merge_overlapping_windows:
            availability = tuple(merge_windows(availability))

        return AvailabilitySnapshot(
            availability=tuple(availability),
            bookings=tuple(active_bookings),
            busy_intervals=tuple(snapshot.busy_intervals),
            statuses=snapshot.statuses,
        )

    @staticmethod
    def _validate_duration(duration_minutes: int) -> None:
        if duration_minutes <= 0:
            raise ConfigurationError(
                f"Slot duration must be greater than zero, got {duration_minutes}"
            )
