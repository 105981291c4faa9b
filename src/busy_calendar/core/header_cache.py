"""Process-wide cache for the weekday header row shared by all month views."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

LOGGER = logging.getLogger("busy_calendar.header_cache")


@dataclass(frozen=True, slots=True)
class HeaderLabel:
    l10n_key: str
    text: str


HeaderRow = tuple[HeaderLabel, ...]


class DayHeaderCache:
    """Holds a single header row until :meth:`invalidate` is called."""

    def __init__(self) -> None:
        self._row: Optional[HeaderRow] = None

    def get(self, builder: Callable[[], HeaderRow]) -> HeaderRow:
        if self._row is None:
            self._row = tuple(builder())
            LOGGER.debug("Built day header row", extra={"event": "day_headers_built", "columns": len(self._row)})
        return self._row

    def cached(self) -> Optional[HeaderRow]:
        return self._row

    def invalidate(self) -> None:
        if self._row is not None:
            LOGGER.debug("Day header row invalidated", extra={"event": "day_headers_invalidated"})
        self._row = None


DAY_HEADERS = DayHeaderCache()
