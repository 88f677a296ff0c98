"""
Tests for candidate slot generation.
"""

import pendulum

from bookable.domain.slot_generator import generate_slot_starts, slot_end

TZ = "Europe/Berlin"


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


class TestGenerateSlotStarts:
    """Tests for generate_slot_starts."""

    def test_evenly_divisible_range(self):
        """A 2 hour range yields four 30 minute slots."""
        starts = generate_slot_starts(_at("2024-11-25 09:00"), _at("2024-11-25 11:00"), 30)

        assert starts == [
            _at("2024-11-25 09:00"),
            _at("2024-11-25 09:30"),
            _at("2024-11-25 10:00"),
            _at("2024-11-25 10:30"),
        ]

    def test_partial_trailing_slot_is_dropped(self):
        """Only slots that fit completely are produced."""
        starts = generate_slot_starts(_at("2024-11-25 09:00"), _at("2024-11-25 10:50"), 30)

        assert len(starts) == 3
        assert slot_end(starts[-1], 30) <= _at("2024-11-25 10:50")

    def test_range_shorter_than_duration(self):
        """No slot fits into a range shorter than the duration."""
        assert generate_slot_starts(_at("2024-11-25 09:00"), _at("2024-11-25 09:20"), 30) == []

    def test_inverted_range_yields_nothing(self):
        """start > end is not an error, just empty."""
        assert generate_slot_starts(_at("2024-11-25 12:00"), _at("2024-11-25 09:00"), 30) == []

    def test_empty_range_yields_nothing(self):
        """start == end has no room for a slot."""
        assert generate_slot_starts(_at("2024-11-25 09:00"), _at("2024-11-25 09:00"), 30) == []

    def test_zero_and_negative_duration_yield_nothing(self):
        """Non-positive durations must not loop forever."""
        start = _at("2024-11-25 09:00")
        end = _at("2024-11-25 17:00")

        assert generate_slot_starts(start, end, 0) == []
        assert generate_slot_starts(start, end, -15) == []

    def test_huge_duration_yields_nothing(self):
        """A duration too large for timedelta is treated as no room for a slot."""
        start = _at("2024-11-25 09:00")

        assert generate_slot_starts(start, start.add(hours=1), 2e12) == []
        assert generate_slot_starts(start, start.add(hours=1), 10**20) == []

    def test_fractional_duration_does_not_crash(self):
        """Fractional minutes are tolerated."""
        starts = generate_slot_starts(_at("2024-11-25 09:00"), _at("2024-11-25 09:01"), 0.5)

        assert len(starts) == 2

    def test_is_deterministic(self):
        """Identical inputs give identical output."""
        start = _at("2024-11-25 09:00")
        end = _at("2024-11-25 17:00")

        assert generate_slot_starts(start, end, 45) == generate_slot_starts(start, end, 45)

    def test_slot_end_adds_duration(self):
        """slot_end is start plus duration."""
        assert slot_end(_at("2024-11-25 09:00"), 45) == _at("2024-11-25 09:45")
