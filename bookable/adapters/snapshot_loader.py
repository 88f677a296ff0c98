"""
JSON snapshot source for availability, bookings and external busy times.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum

from ..domain.conflicts import intervals_overlap
from ..domain.exceptions import SnapshotError
from ..domain.models import (
    AttendeeStatus,
    AvailabilitySnapshot,
    AvailabilityWindow,
    Booking,
    BookingStatus,
    BusyInterval,
    TimeRange,
)

logger = logging.getLogger(__name__)


class JsonSnapshotSource:
    """
    Snapshot source backed by a JSON file.

    Expected layout::

        {
          "availability": [{"id": "...", "start": "...", "end": "..."}],
          "bookings": [{"id": "...", "start": "...", "end": "...",
                        "googleEventId": "...", "guestName": "...", "guestEmail": "..."}],
          "busy": [{"start": "...", "end": "...", "title": "...", "accountEmail": "..."}],
          "statuses": {"<booking id>": {"isCancelled": false, "guestStatus": "accepted"}}
        }

    Instants are parsed with pendulum in the configured timezone. Entries that
    do not overlap the requested range are left out; malformed entries are
    skipped with a warning.
    """

    def __init__(self, snapshot_path: Path, timezone: str = "UTC"):
        """
        Initialize the snapshot source.

        Args:
            snapshot_path: Path to the JSON snapshot file
            timezone: IANA timezone used for instants without an offset
        """
        self.snapshot_path = snapshot_path
        self.timezone = timezone

    def _load_raw(self) -> Dict[str, Any]:
        """Load and sanity-check the JSON document."""
        if not self.snapshot_path.exists():
            raise SnapshotError(f"Snapshot file not found: {self.snapshot_path}")

        try:
            with open(self.snapshot_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Invalid JSON in {self.snapshot_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise SnapshotError("Snapshot file must contain an object at the root level.")

        return data

    async def get_snapshot(self, time_range: TimeRange) -> AvailabilitySnapshot:
        """
        Load the snapshot entries relevant to a time range.

        Args:
            time_range: Range being queried

        Returns:
            AvailabilitySnapshot with raw (unfiltered) bookings and their statuses
        """
        data = self._load_raw()

        availability = [
            window for window in self._parse_entries(data.get("availability", []), self._parse_window)
            if intervals_overlap(window.start, window.end, time_range.start, time_range.end)
        ]
        bookings = [
            booking for booking in self._parse_entries(data.get("bookings", []), self._parse_booking)
            if intervals_overlap(booking.start, booking.end, time_range.start, time_range.end)
        ]
        busy_intervals = [
            busy for busy in self._parse_entries(data.get("busy", []), self._parse_busy)
            if intervals_overlap(busy.start, busy.end, time_range.start, time_range.end)
        ]
        statuses = self._parse_statuses(data.get("statuses", {}))

        logger.debug(
            "Loaded snapshot %s: %d windows, %d bookings, %d busy intervals",
            self.snapshot_path,
            len(availability),
            len(bookings),
            len(busy_intervals),
        )

        return AvailabilitySnapshot(
            availability=tuple(availability),
            bookings=tuple(bookings),
            busy_intervals=tuple(busy_intervals),
            statuses=statuses,
        )

    def _parse_entries(self, entries: Any, parser) -> List[Any]:
        if not isinstance(entries, list):
            logger.warning("Expected a list in snapshot %s, got %s", self.snapshot_path, type(entries).__name__)
            return []

        parsed = []
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning("Skipping invalid snapshot entry %r: not an object", entry)
                continue

            try:
                parsed.append(parser(entry))
            except (KeyError, TypeError, ValueError) as exc:
                # Skip invalid entries
                logger.warning("Skipping invalid snapshot entry %r: %s", entry, exc)
        return parsed

    def _parse_instant(self, value: str):
        parsed = pendulum.parse(value, tz=self.timezone)
        if not isinstance(parsed, pendulum.DateTime):
            raise ValueError(f"Not a date-time: {value}")
        return parsed

    def _parse_window(self, entry: Dict[str, Any]) -> AvailabilityWindow:
        return AvailabilityWindow(
            id=str(entry.get("id") or entry.get("_key") or ""),
            start=self._parse_instant(entry["start"]),
            end=self._parse_instant(entry["end"]),
        )

    def _parse_booking(self, entry: Dict[str, Any]) -> Booking:
        return Booking(
            id=str(entry["id"]),
            start=self._parse_instant(entry["start"]),
            end=self._parse_instant(entry["end"]),
            google_event_id=entry.get("googleEventId"),
            guest_name=entry.get("guestName"),
            guest_email=entry.get("guestEmail"),
        )

    def _parse_busy(self, entry: Dict[str, Any]) -> BusyInterval:
        return BusyInterval(
            start=self._parse_instant(entry["start"]),
            end=self._parse_instant(entry["end"]),
            title=entry.get("title", ""),
            account_email=entry.get("accountEmail", ""),
        )

    def _parse_statuses(self, raw: Any) -> Dict[str, BookingStatus]:
        if not isinstance(raw, dict):
            logger.warning("Expected an object for statuses in %s", self.snapshot_path)
            return {}

        statuses: Dict[str, BookingStatus] = {}
        for booking_id, entry in raw.items():
            try:
                statuses[str(booking_id)] = BookingStatus(
                    is_cancelled=bool(entry.get("isCancelled", False)),
                    guest_status=_parse_attendee_status(entry.get("guestStatus")),
                )
            except (AttributeError, ValueError) as exc:
                logger.warning("Skipping invalid status for booking %s: %s", booking_id, exc)
        return statuses


def _parse_attendee_status(value: Optional[str]) -> Optional[AttendeeStatus]:
    if value is None:
        return None
    return AttendeeStatus(value)
