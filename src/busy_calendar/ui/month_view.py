"""Single month grid that tracks busy intervals per day."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from functools import partial
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QLocale, QPoint, QTimer, Qt, Signal
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QVBoxLayout, QWidget

from ..core.aggregator import DayBusyAggregator
from ..core.calc import OTHER_MONTH, PRESENT, day_id, days_in_week, first_of_month, relative_state, span_of_month
from ..core.header_cache import DAY_HEADERS
from ..core.models import IntervalEvent
from ..core.settings import DEFAULT_MAX_INDICATORS
from ..core.store import BusyIntervalStore
from .busy_indicators import BusyIndicatorRenderer
from .localization import build_day_headers

LOGGER = logging.getLogger("busy_calendar.ui.month_view")

BUSY_CONTAINER_NAME = "busy-indicator"
GRID_OBJECT_NAME = "month-grid"

Deferrer = Callable[[Callable[[], None]], None]


def _next_turn(callback: Callable[[], None]) -> None:
    QTimer.singleShot(0, callback)


class ActivationState(Enum):
    INACTIVE = "inactive"
    ACTIVATING = "activating"
    ACTIVE = "active"
    DESTROYED = "destroyed"


class MonthView(QWidget):
    """Month grid whose day cells show how many busy intervals touch them.

    The first :meth:`activate` defers loading the month's intervals to the
    next event-loop turn, then subscribes to live changes from the store.
    Later activations only toggle the ``active`` marker.
    """

    ACTIVE = "active"

    month_ready: Signal = Signal()
    day_context_requested: Signal = Signal(object, QPoint)

    def __init__(
        self,
        month: date,
        store: BusyIntervalStore,
        parent: Optional[QWidget] = None,
        *,
        today: Optional[date] = None,
        starts_on_monday: bool = False,
        max_indicators: int = DEFAULT_MAX_INDICATORS,
        defer: Optional[Deferrer] = None,
    ) -> None:
        super().__init__(parent)
        self._month = first_of_month(month)
        self._store = store
        self._today = today
        self._starts_on_monday = starts_on_monday
        self._defer = defer or _next_turn

        self.view_id = self._month.toordinal()
        self.timespan = span_of_month(self._month, starts_on_monday)
        self.weeks = 0

        self._renderer = BusyIndicatorRenderer(self._busy_element, max_indicators=max_indicators)
        self._aggregator = DayBusyAggregator(on_count_changed=self._renderer.on_count_changed)
        self._grid: Optional[QWidget] = None
        self._is_active = False
        self._has_been_active = False
        self._loaded = False
        self._observing = False
        self._destroyed = False

        self.setObjectName(f"month-{self.view_id}")
        self.setProperty("role", "grid")
        self.setProperty("readOnly", True)
        self.setProperty(self.ACTIVE, False)

    # ------------------------------------------------------------------
    @property
    def month(self) -> date:
        return self._month

    @property
    def aggregator(self) -> DayBusyAggregator:
        return self._aggregator

    @property
    def renderer(self) -> BusyIndicatorRenderer:
        return self._renderer

    @property
    def state(self) -> ActivationState:
        if self._destroyed:
            return ActivationState.DESTROYED
        if not self._is_active:
            return ActivationState.INACTIVE
        if not self._loaded:
            return ActivationState.ACTIVATING
        return ActivationState.ACTIVE

    @property
    def is_observing(self) -> bool:
        return self._observing

    def title(self) -> str:
        locale = QLocale()
        name = locale.standaloneMonthName(self._month.month, QLocale.FormatType.LongFormat)
        return f"{name} {self._month.year}"

    def cell_name(self, value: date | str) -> str:
        key = value if isinstance(value, str) else day_id(value)
        return f"month-view-{self.view_id}-{key}"

    def day_cell(self, value: date | str) -> QFrame | None:
        if self._grid is None:
            return None
        return self._grid.findChild(QFrame, self.cell_name(value))

    def busy_count(self, value: date | str) -> int | None:
        key = value if isinstance(value, str) else day_id(value)
        return self._aggregator.count(key)

    # ------------------------------------------------------------------
    def create(self) -> QWidget:
        """Build the grid for every day of :attr:`timespan`."""
        if self._grid is not None:
            return self._grid

        grid = QWidget(self)
        grid.setObjectName(GRID_OBJECT_NAME)
        layout = QGridLayout(grid)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        for column, header in enumerate(self._render_day_headers()):
            label = QLabel(header.text, grid)
            label.setObjectName(header.l10n_key)
            label.setProperty("header", True)
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            layout.addWidget(label, 0, column)

        days = self.timespan.days()
        per_week = days_in_week()
        self.weeks = len(days) // per_week
        for week in range(self.weeks):
            self._render_week(grid, layout, week + 1, days[week * per_week:(week + 1) * per_week])

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(grid)
        self.setAccessibleName(self.title())

        self._grid = grid
        LOGGER.debug(
            "Month grid created",
            extra={"event": "month_created", "view_id": self.view_id, "weeks": self.weeks},
        )
        return grid

    def _render_day_headers(self):
        return DAY_HEADERS.get(lambda: build_day_headers(self._starts_on_monday))

    def _render_week(self, grid: QWidget, layout: QGridLayout, row: int, days: Sequence[date]) -> None:
        for column, day in enumerate(days):
            layout.addWidget(self._render_day(grid, day), row, column)

    def _render_day(self, grid: QWidget, day: date) -> QFrame:
        key = day_id(day)
        state = relative_state(day, self._month, self._today)
        self._aggregator.register_day(key)

        cell = QFrame(grid)
        cell.setObjectName(self.cell_name(key))
        cell.setProperty("dayCell", True)
        cell.setProperty("dateString", key)
        cell.setProperty("state", state)
        cell.setProperty("otherMonth", OTHER_MONTH in state)
        cell.setProperty("today", state.startswith(PRESENT))
        cell.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        cell.customContextMenuRequested.connect(partial(self._request_day_context, day, cell))

        cell_layout = QVBoxLayout(cell)
        cell_layout.setContentsMargins(4, 4, 4, 4)
        cell_layout.setSpacing(2)
        number = QLabel(str(day.day), cell)
        number.setAlignment(Qt.AlignmentFlag.AlignCenter)
        cell_layout.addWidget(number)

        busy = QWidget(cell)
        busy.setObjectName(BUSY_CONTAINER_NAME)
        busy.setMinimumHeight(8)
        cell_layout.addWidget(busy)
        return cell

    def _request_day_context(self, day: date, cell: QFrame, pos: QPoint) -> None:
        self.day_context_requested.emit(day, cell.mapToGlobal(pos))

    def refresh_indicators(self) -> None:
        self._renderer.refresh()

    def _busy_element(self, key: str) -> QWidget | None:
        cell = self.day_cell(key)
        if cell is None:
            return None
        return cell.findChild(QWidget, BUSY_CONTAINER_NAME)

    # ------------------------------------------------------------------
    def activate(self) -> None:
        if self._destroyed:
            LOGGER.warning("Ignoring activation of destroyed month", extra={"event": "month_activate_destroyed", "view_id": self.view_id})
            return
        self._set_active_marker(True)
        if self._has_been_active:
            return

        # The first activation loads the month's intervals on the next turn so
        # that the caller (usually a swipe) is not blocked.
        self._has_been_active = True
        self._defer(self._load_initial)

    def deactivate(self) -> None:
        if self._destroyed:
            return
        self._set_active_marker(False)

    def _set_active_marker(self, active: bool) -> None:
        self._is_active = active
        self.setProperty(self.ACTIVE, active)
        style = self.style()
        style.unpolish(self)
        style.polish(self)

    def _load_initial(self) -> None:
        if self._destroyed:
            LOGGER.debug("Skipping initial load for destroyed month", extra={"event": "month_load_skipped", "view_id": self.view_id})
            return
        intervals = self._store.query_existing(self.timespan)
        self._aggregator.apply_batch(added=intervals)
        self._store.observe(self.timespan, self._handle_interval_event)
        self._observing = True
        self._loaded = True
        LOGGER.info(
            "Month ready",
            extra={"event": "month_ready", "view_id": self.view_id, "intervals": len(intervals)},
        )
        self.month_ready.emit()

    def _handle_interval_event(self, event: IntervalEvent) -> None:
        if self._destroyed:
            return
        self._aggregator.apply_event(event)

    # ------------------------------------------------------------------
    def destroy_view(self) -> None:
        """Stop observing, drop all day state and detach the grid."""
        if self._destroyed:
            return
        if self._observing:
            self._store.unobserve(self.timespan, self._handle_interval_event)
            self._observing = False
        self._aggregator.reset()
        self._renderer.clear()
        self._destroyed = True
        self._is_active = False

        if self._grid is not None:
            self._grid.setParent(None)
            self._grid.deleteLater()
            self._grid = None
        if self.parentWidget() is not None:
            self.setParent(None)
        self.deleteLater()
        LOGGER.debug("Month destroyed", extra={"event": "month_destroyed", "view_id": self.view_id})
