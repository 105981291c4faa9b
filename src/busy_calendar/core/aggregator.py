"""Per-day busy counts for the intervals registered with one month view."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from .day_mapper import days_touched
from .models import BusyInterval, CountChange, IntervalAdded, IntervalEvent, IntervalRemoved

CountListener = Callable[[str, int], None]


class DayBusyAggregator:
    """Keeps ``day id -> busy count`` in step with added and removed intervals.

    Every count equals the number of intervals currently registered whose
    normalized day range includes that day. Pairing each removal with an
    earlier addition is the caller's contract: a mismatched removal is
    recorded as-is, including negative counts.
    """

    def __init__(self, on_count_changed: Optional[CountListener] = None, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("busy_calendar.aggregator")
        self._on_count_changed = on_count_changed
        self._counts: dict[str, int] = {}

    # ------------------------------------------------------------------
    def register_day(self, day_id: str) -> None:
        self._counts[day_id] = 0

    def count(self, day_id: str) -> int | None:
        """Current count, or ``None`` when the day was never rendered or touched."""
        return self._counts.get(day_id)

    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    def reset(self) -> None:
        self._counts.clear()

    def __contains__(self, day_id: object) -> bool:
        return day_id in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    # ------------------------------------------------------------------
    def apply_batch(
        self,
        added: Iterable[BusyInterval] = (),
        removed: Iterable[BusyInterval] = (),
    ) -> list[CountChange]:
        """Apply all ``added`` intervals, then all ``removed`` ones."""
        changes: list[CountChange] = []
        for interval in added:
            changes.extend(self._apply(interval, 1))
        for interval in removed:
            changes.extend(self._apply(interval, -1))
        return changes

    def apply_event(self, event: IntervalEvent) -> list[CountChange]:
        if isinstance(event, IntervalAdded):
            return self.apply_batch(added=[event.interval])
        if isinstance(event, IntervalRemoved):
            return self.apply_batch(removed=[event.interval])
        raise TypeError(f"Unsupported interval event: {event!r}")

    # ------------------------------------------------------------------
    def _apply(self, interval: BusyInterval, delta: int) -> list[CountChange]:
        changes: list[CountChange] = []
        for day_id in days_touched(interval):
            count = self._counts.get(day_id, 0) + delta
            self._counts[day_id] = count
            if count < 0:
                self._logger.warning(
                    "Busy count dropped below zero",
                    extra={
                        "event": "busy_count_negative",
                        "day_id": day_id,
                        "count": count,
                        "interval_id": interval.interval_id,
                    },
                )
            changes.append(CountChange(day_id=day_id, count=count, delta=delta))
            self._notify(day_id, count)
        return changes

    def _notify(self, day_id: str, count: int) -> None:
        if self._on_count_changed is None:
            return
        try:
            self._on_count_changed(day_id, count)
        except Exception:
            self._logger.exception(
                "Busy count listener failed",
                extra={"event": "busy_count_listener_failed", "day_id": day_id, "count": count},
            )
