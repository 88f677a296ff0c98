"""
Candidate slot generation.

Splits a time range into back-to-back slots of a fixed length. Only slots
that fit completely inside the range are produced.
"""

import math
from datetime import timedelta
from typing import List

from pendulum import DateTime


def generate_slot_starts(
    range_start: DateTime,
    range_end: DateTime,
    duration_minutes: float,
) -> List[DateTime]:
    """
    Generate all slot start times within a time range.

    Args:
        range_start: First possible slot start
        range_end: Latest possible slot end
        duration_minutes: Length of each slot

    Returns:
        Ordered list of start instants, ``range_start + i * duration``.
        Empty when the range is inverted or the duration is not positive.
    """
    if not duration_minutes > 0 or math.isinf(duration_minutes):
        return []

    if range_start >= range_end:
        return []

    try:
        step = timedelta(minutes=duration_minutes)
    except OverflowError:
        return []

    if not step:
        # Sub-microsecond durations round down to nothing.
        return []

    slot_count = math.floor(
        (range_end - range_start).total_seconds() / step.total_seconds()
    )

    return [range_start + i * step for i in range(max(slot_count, 0))]


def slot_end(slot_start: DateTime, duration_minutes: float) -> DateTime:
    """Return the end of a slot starting at ``slot_start``."""
    return slot_start + timedelta(minutes=duration_minutes)
