"""In-process interval store acting as the month views' event source."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .models import BusyInterval, IntervalAdded, IntervalEvent, IntervalRemoved, Timespan
from .repository import IntervalsRepository

IntervalHandler = Callable[[IntervalEvent], None]


class BusyIntervalStore:
    """Holds every known busy interval and notifies per-timespan observers.

    Observers only receive events after :meth:`observe` returns, so a view
    that queries a snapshot first and subscribes second never sees the same
    interval twice.
    """

    def __init__(self, repository: Optional[IntervalsRepository] = None, logger: Optional[logging.Logger] = None) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger("busy_calendar.store")
        self._intervals: dict[str, BusyInterval] = {}
        self._observers: list[tuple[Timespan, IntervalHandler]] = []

    # ------------------------------------------------------------------
    def load(self) -> int:
        """Seed the store from the repository without notifying observers."""
        if self._repository is None:
            return 0
        intervals = self._repository.get_all()
        self._intervals = {interval.interval_id: interval for interval in intervals}
        self._logger.info("Interval store loaded", extra={"event": "store_loaded", "count": len(self._intervals)})
        return len(self._intervals)

    def get(self, interval_id: str) -> BusyInterval | None:
        return self._intervals.get(interval_id)

    def __len__(self) -> int:
        return len(self._intervals)

    def query_existing(self, timespan: Timespan) -> list[BusyInterval]:
        matches = [interval for interval in self._intervals.values() if timespan.overlaps(interval)]
        matches.sort(key=BusyInterval.sort_key)
        self._logger.debug(
            "Queried intervals for timespan",
            extra={
                "event": "store_query",
                "start": timespan.start.isoformat(),
                "end": timespan.end.isoformat(),
                "count": len(matches),
            },
        )
        return matches

    # ------------------------------------------------------------------
    def add(self, interval: BusyInterval) -> BusyInterval:
        if interval.interval_id in self._intervals:
            raise ValueError(f"Interval {interval.interval_id} is already stored")
        if self._repository is not None:
            self._repository.add(interval)
        self._intervals[interval.interval_id] = interval
        self._dispatch(IntervalAdded(interval))
        return interval

    def remove(self, interval_id: str) -> BusyInterval | None:
        interval = self._intervals.get(interval_id)
        if interval is None:
            self._logger.debug("Ignoring removal of unknown interval", extra={"event": "store_remove_unknown", "interval_id": interval_id})
            return None
        if self._repository is not None:
            self._repository.remove(interval_id)
        del self._intervals[interval_id]
        self._dispatch(IntervalRemoved(interval))
        return interval

    # ------------------------------------------------------------------
    def observe(self, timespan: Timespan, handler: IntervalHandler) -> None:
        self._observers.append((timespan, handler))
        self._logger.debug(
            "Observer registered",
            extra={"event": "store_observe", "start": timespan.start.isoformat(), "end": timespan.end.isoformat()},
        )

    def unobserve(self, timespan: Timespan, handler: IntervalHandler) -> bool:
        for index, (span, registered) in enumerate(self._observers):
            if span == timespan and registered == handler:
                del self._observers[index]
                return True
        return False

    def observer_count(self) -> int:
        return len(self._observers)

    def _dispatch(self, event: IntervalEvent) -> None:
        for timespan, handler in tuple(self._observers):
            if not timespan.overlaps(event.interval):
                continue
            try:
                handler(event)
            except Exception:
                self._logger.exception(
                    "Interval observer failed",
                    extra={"event": "store_observer_failed", "interval_id": event.interval.interval_id},
                )
