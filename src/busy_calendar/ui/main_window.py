"""Main window paging between month grids."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from PySide6.QtCore import QPoint, Signal
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMenu,
    QMessageBox,
    QStackedWidget,
    QStatusBar,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ..core.calc import add_months, first_of_month
from ..core.exceptions import PersistenceError
from ..core.header_cache import DAY_HEADERS
from ..core.models import BusyInterval, Timespan
from ..core.settings import Settings
from ..core.store import BusyIntervalStore
from .icons import add_palette_listener, next_icon, plus_icon, previous_icon, remove_palette_listener, today_icon
from .interval_dialog import IntervalDialog
from .month_view import MonthView

LOGGER = logging.getLogger("busy_calendar.ui.main")


class MainWindow(QMainWindow):
    """Shows one month at a time and keeps its neighbours warm."""

    month_changed: Signal = Signal(object)

    def __init__(
        self,
        store: BusyIntervalStore,
        settings: Settings,
        parent: Optional[QWidget] = None,
        *,
        today: Optional[date] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Busy Calendar")
        self._store = store
        self._settings = settings
        self._today = today
        self._current = first_of_month(today or date.today())
        self._children: dict[date, MonthView] = {}

        self._build_ui()
        self._show_month(self._current)
        add_palette_listener(self._refresh_icons)

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        controls = QHBoxLayout()
        self._previous_button = QToolButton(central)
        self._previous_button.setToolTip("Previous month")
        self._previous_button.clicked.connect(self.show_previous_month)
        self._today_button = QToolButton(central)
        self._today_button.setToolTip("Today")
        self._today_button.clicked.connect(self.show_today)
        self._next_button = QToolButton(central)
        self._next_button.setToolTip("Next month")
        self._next_button.clicked.connect(self.show_next_month)
        self._add_button = QToolButton(central)
        self._add_button.setToolTip("Add busy interval")
        self._add_button.clicked.connect(self._open_interval_dialog)

        self._title_label = QLabel(central)
        self._title_label.setObjectName("current-month-year")

        controls.addWidget(self._previous_button)
        controls.addWidget(self._today_button)
        controls.addWidget(self._next_button)
        controls.addStretch(1)
        controls.addWidget(self._title_label)
        controls.addStretch(1)
        controls.addWidget(self._add_button)
        layout.addLayout(controls)

        self._stack = QStackedWidget(central)
        layout.addWidget(self._stack, 1)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar(self))
        self._refresh_icons()

    def _refresh_icons(self) -> None:
        self._previous_button.setIcon(previous_icon())
        self._today_button.setIcon(today_icon())
        self._next_button.setIcon(next_icon())
        self._add_button.setIcon(plus_icon())
        for child in self._children.values():
            child.refresh_indicators()

    # ------------------------------------------------------------------
    @property
    def current_month(self) -> date:
        return self._current

    def current_view(self) -> MonthView | None:
        return self._children.get(self._current)

    def month_views(self) -> dict[date, MonthView]:
        return dict(self._children)

    def show_previous_month(self) -> None:
        self._show_month(add_months(self._current, -1))

    def show_next_month(self) -> None:
        self._show_month(add_months(self._current, 1))

    def show_today(self) -> None:
        self._show_month(first_of_month(self._today or date.today()))

    def apply_settings(self, settings: Settings) -> None:
        rebuild = (
            settings.starts_on_monday != self._settings.starts_on_monday
            or settings.max_indicators != self._settings.max_indicators
        )
        self._settings = settings
        if rebuild:
            DAY_HEADERS.invalidate()
            self.rebuild()

    def rebuild(self) -> None:
        """Recreate every month grid, e.g. after the locale changed."""
        for month in list(self._children):
            self._children.pop(month).destroy_view()
        self._show_month(self._current)

    # ------------------------------------------------------------------
    def _show_month(self, month: date) -> None:
        month = first_of_month(month)
        wanted = {add_months(month, offset) for offset in (-1, 0, 1)}

        for stale in [key for key in self._children if key not in wanted]:
            self._children.pop(stale).destroy_view()

        for key in sorted(wanted):
            if key not in self._children:
                self._children[key] = self._build_child(key)

        for key, child in self._children.items():
            if key != month:
                child.deactivate()

        self._current = month
        current = self._children[month]
        self._stack.setCurrentWidget(current)
        current.activate()
        self._title_label.setText(current.title())
        LOGGER.debug("Showing month", extra={"event": "month_show", "month": month.isoformat()})
        self.month_changed.emit(month)

    def _build_child(self, month: date) -> MonthView:
        child = MonthView(
            month,
            self._store,
            self._stack,
            today=self._today,
            starts_on_monday=self._settings.starts_on_monday,
            max_indicators=self._settings.max_indicators,
        )
        child.create()
        child.month_ready.connect(self._on_month_ready)
        child.day_context_requested.connect(self._show_day_menu)
        self._stack.addWidget(child)
        return child

    def _on_month_ready(self) -> None:
        self.statusBar().showMessage(f"{len(self._store)} busy intervals", 3000)

    def _open_interval_dialog(self) -> None:
        default_start = datetime.combine(self._current, datetime.now().time())
        dialog = IntervalDialog(default_start, parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted or dialog.interval is None:
            return
        try:
            self._store.add(dialog.interval)
        except PersistenceError as exc:
            LOGGER.exception("Unable to store busy interval")
            QMessageBox.critical(self, "Unable to save", str(exc))

    # ------------------------------------------------------------------
    def intervals_on(self, day: date) -> list[BusyInterval]:
        return self._store.query_existing(Timespan(day, day))

    def build_day_menu(self, day: date) -> QMenu | None:
        """Menu with one removal action per interval touching ``day``."""
        intervals = self.intervals_on(day)
        if not intervals:
            return None
        menu = QMenu(self)
        for interval in intervals:
            label = interval.title or "busy interval"
            action = menu.addAction(
                f"Remove {label} ({interval.start:%Y-%m-%d %H:%M} - {interval.end:%Y-%m-%d %H:%M})"
            )
            action.triggered.connect(lambda _checked=False, interval_id=interval.interval_id: self.remove_interval(interval_id))
        return menu

    def _show_day_menu(self, day: date, global_pos: QPoint) -> None:
        menu = self.build_day_menu(day)
        if menu is None:
            return
        menu.exec(global_pos)
        menu.deleteLater()

    def remove_interval(self, interval_id: str) -> BusyInterval | None:
        try:
            removed = self._store.remove(interval_id)
        except PersistenceError as exc:
            LOGGER.exception("Unable to remove busy interval")
            QMessageBox.critical(self, "Unable to remove", str(exc))
            return None
        if removed is not None:
            LOGGER.info("Busy interval removed", extra={"event": "interval_removed", "interval_id": interval_id})
        return removed

    def closeEvent(self, event) -> None:  # type: ignore[override]
        remove_palette_listener(self._refresh_icons)
        for month in list(self._children):
            self._children.pop(month).destroy_view()
        super().closeEvent(event)
