"""Map busy intervals onto the calendar days they touch."""

from __future__ import annotations

from datetime import datetime

from .calc import day_id, days_between
from .models import BusyInterval


def normalized_end(interval: BusyInterval) -> datetime:
    """End instant used for bucketing; see :attr:`BusyInterval.bucket_end`."""
    return interval.bucket_end


def days_touched(interval: BusyInterval) -> list[str]:
    """Day identifiers covered by ``interval``, chronological and unique."""
    return [day_id(day) for day in days_between(interval.start, normalized_end(interval))]
