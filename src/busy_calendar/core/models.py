"""Domain models for Busy Calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Union
import uuid

_ONE_SECOND = timedelta(seconds=1)


def _default_interval_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class BusyInterval:
    """One scheduled event's occupancy between two instants.

    ``start == end`` is valid and marks a zero-length (all-day recurring)
    event that belongs to the single day containing ``start``.
    """

    start: datetime
    end: datetime
    interval_id: str = field(default_factory=_default_interval_id)
    title: str = ""

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("BusyInterval end must not precede start")

    @property
    def is_zero_length(self) -> bool:
        return self.start == self.end

    @property
    def bucket_end(self) -> datetime:
        """End instant used for day bucketing.

        An interval ending exactly at local midnight ends on the previous day's
        last second, so ``[N 00:00, N+1 00:00)`` only belongs to day N. Zero-length
        intervals are left untouched: some providers store recurring all-day events
        with identical start and end.
        """
        end = self.end
        if end != self.start and end.hour == 0 and end.minute == 0 and end.second == 0:
            return end - _ONE_SECOND
        return end

    def sort_key(self) -> tuple[datetime, datetime]:
        """Chronological key that also orders naive and aware intervals together."""
        return wall_clock(self.start), wall_clock(self.end)

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "interval_id": self.interval_id,
            "title": self.title,
            "start": self.start.isoformat(timespec="seconds"),
            "end": self.end.isoformat(timespec="seconds"),
        }

    @classmethod
    def from_json_dict(cls, payload: dict[str, Any]) -> "BusyInterval":
        return cls(
            start=_parse_datetime(payload["start"]),
            end=_parse_datetime(payload["end"]),
            interval_id=str(payload.get("interval_id") or _default_interval_id()),
            title=str(payload.get("title") or ""),
        )


@dataclass(frozen=True, slots=True)
class IntervalAdded:
    interval: BusyInterval


@dataclass(frozen=True, slots=True)
class IntervalRemoved:
    interval: BusyInterval


IntervalEvent = Union[IntervalAdded, IntervalRemoved]


@dataclass(frozen=True, slots=True)
class CountChange:
    """Busy count of ``day_id`` after applying ``delta``."""

    day_id: str
    count: int
    delta: int


@dataclass(frozen=True, slots=True)
class Timespan:
    """Closed range of civil days ``[start, end]`` shown by one month view."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Timespan end must not precede start")

    @property
    def start_instant(self) -> datetime:
        return datetime.combine(self.start, time.min)

    @property
    def end_instant(self) -> datetime:
        """Exclusive end: midnight after the last day."""
        return datetime.combine(self.end + timedelta(days=1), time.min)

    def days(self) -> list[date]:
        count = (self.end - self.start).days + 1
        return [self.start + timedelta(days=offset) for offset in range(count)]

    def contains_day(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlaps(self, interval: BusyInterval) -> bool:
        """True when at least one day ``interval`` touches lies in the span."""
        first = interval.start.date()
        last = interval.bucket_end.date()
        return first <= last and first <= self.end and last >= self.start


def wall_clock(value: datetime) -> datetime:
    """Drop tzinfo so an aware instant compares by its own local wall clock."""
    return value.replace(tzinfo=None)


def _parse_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
