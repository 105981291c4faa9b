"""Localized strings for the month grid."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QCoreApplication, QLocale, QObject, Signal

from ..core.calc import weekday_order
from ..core.header_cache import DAY_HEADERS, HeaderLabel, HeaderRow

LOGGER = logging.getLogger("busy_calendar.ui.l10n")

_CONTEXT = "MonthView"


def busy_label(count: int) -> str:
    """Accessible label for a day with ``count`` busy intervals, e.g. ``"2 busy"``."""
    return QCoreApplication.translate(_CONTEXT, "%n busy", None, count)


def weekday_name(weekday: int, locale: Optional[QLocale] = None) -> str:
    """Narrow name for ``date.weekday()`` number ``weekday`` (Monday is 0)."""
    active = locale or QLocale()
    # QLocale numbers days Monday=1 .. Sunday=7.
    return active.dayName(weekday + 1, QLocale.FormatType.NarrowFormat)


def build_day_headers(starts_on_monday: bool = False) -> HeaderRow:
    locale = QLocale()
    return tuple(
        HeaderLabel(l10n_key=f"weekday-{weekday}-single-char", text=weekday_name(weekday, locale))
        for weekday in weekday_order(starts_on_monday)
    )


class LocaleNotifier(QObject):
    """Applies locale changes and tells interested views about them."""

    locale_changed: Signal = Signal(str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._current = QLocale().name()

    @property
    def current(self) -> str:
        return self._current

    def set_locale(self, name: str) -> None:
        locale = QLocale(name)
        if locale.name() == self._current:
            return
        LOGGER.info("Switching locale", extra={"event": "locale_change", "from": self._current, "to": locale.name()})
        QLocale.setDefault(locale)
        self._current = locale.name()
        DAY_HEADERS.invalidate()
        self.locale_changed.emit(self._current)
