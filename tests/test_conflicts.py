"""
Tests for conflict detection.
"""

import pendulum

from bookable.domain.conflicts import has_conflict, intervals_overlap
from bookable.domain.models import Booking, BusyInterval

TZ = "Europe/Berlin"


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


def _booking(start: str, end: str) -> Booking:
    return Booking(id="b1", start=_at(start), end=_at(end))


def _busy(start: str, end: str) -> BusyInterval:
    return BusyInterval(start=_at(start), end=_at(end))


class TestIntervalsOverlap:
    """Tests for the half-open overlap rule."""

    def test_partial_overlap(self):
        assert intervals_overlap(
            _at("2024-11-25 09:00"), _at("2024-11-25 10:00"),
            _at("2024-11-25 09:30"), _at("2024-11-25 11:00"),
        )

    def test_contained(self):
        assert intervals_overlap(
            _at("2024-11-25 09:00"), _at("2024-11-25 12:00"),
            _at("2024-11-25 10:00"), _at("2024-11-25 10:30"),
        )

    def test_touching_ends_do_not_overlap(self):
        """Back-to-back intervals share only a boundary."""
        assert not intervals_overlap(
            _at("2024-11-25 09:00"), _at("2024-11-25 10:00"),
            _at("2024-11-25 10:00"), _at("2024-11-25 11:00"),
        )
        assert not intervals_overlap(
            _at("2024-11-25 10:00"), _at("2024-11-25 11:00"),
            _at("2024-11-25 09:00"), _at("2024-11-25 10:00"),
        )


class TestHasConflict:
    """Tests for has_conflict."""

    def test_no_blockers(self):
        """Empty collections never conflict."""
        assert not has_conflict(_at("2024-11-25 09:00"), _at("2024-11-25 09:30"), [], [])

    def test_booking_conflict(self):
        bookings = [_booking("2024-11-25 09:15", "2024-11-25 09:45")]

        assert has_conflict(_at("2024-11-25 09:00"), _at("2024-11-25 09:30"), bookings, [])

    def test_busy_conflict(self):
        busy = [_busy("2024-11-25 09:00", "2024-11-25 10:00")]

        assert has_conflict(_at("2024-11-25 09:30"), _at("2024-11-25 10:00"), [], busy)

    def test_slot_ending_at_booking_start_is_free(self):
        bookings = [_booking("2024-11-25 10:00", "2024-11-25 10:30")]

        assert not has_conflict(_at("2024-11-25 09:30"), _at("2024-11-25 10:00"), bookings, [])

    def test_slot_starting_at_busy_end_is_free(self):
        busy = [_busy("2024-11-25 10:00", "2024-11-25 10:30")]

        assert not has_conflict(_at("2024-11-25 10:30"), _at("2024-11-25 11:00"), [], busy)

    def test_either_collection_blocks(self):
        """A conflict in only one collection is enough."""
        bookings = [_booking("2024-11-25 14:00", "2024-11-25 15:00")]
        busy = [_busy("2024-11-25 09:00", "2024-11-25 09:30")]

        assert has_conflict(_at("2024-11-25 09:00"), _at("2024-11-25 09:30"), bookings, busy)
        assert has_conflict(_at("2024-11-25 14:30"), _at("2024-11-25 15:00"), bookings, busy)
        assert not has_conflict(_at("2024-11-25 11:00"), _at("2024-11-25 11:30"), bookings, busy)
