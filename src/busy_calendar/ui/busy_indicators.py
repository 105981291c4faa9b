"""Draws per-day busy dots from aggregated busy counts."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QWidget

from ..core.settings import DEFAULT_MAX_INDICATORS
from .icons import busy_dot_pixmap
from .localization import busy_label

DOT_OBJECT_NAME = "busy-dot"
DOT_SIZE = 6

HandleResolver = Callable[[str], Optional[QWidget]]


def indicator_count(container: QWidget) -> int:
    return len(container.findChildren(QLabel, DOT_OBJECT_NAME))


class BusyIndicatorRenderer:
    """Reconciles a day's dot count with its busy count.

    Shows at most ``max_indicators`` dots; the accessible name always carries
    the true count.
    """

    def __init__(
        self,
        resolve_handle: HandleResolver,
        logger: Optional[logging.Logger] = None,
        max_indicators: int = DEFAULT_MAX_INDICATORS,
    ) -> None:
        self._resolve_handle = resolve_handle
        self._logger = logger or logging.getLogger("busy_calendar.ui.busy_indicators")
        self._max_indicators = max_indicators
        self._handles: dict[str, QWidget] = {}

    @property
    def max_indicators(self) -> int:
        return self._max_indicators

    def container_for(self, day_id: str) -> QWidget | None:
        handle = self._handles.get(day_id)
        if handle is None:
            handle = self._resolve_handle(day_id)
            if handle is not None:
                self._handles[day_id] = handle
        return handle

    def clear(self) -> None:
        self._handles.clear()

    # ------------------------------------------------------------------
    def on_count_changed(self, day_id: str, count: int) -> None:
        container = self.container_for(day_id)
        if container is None:
            self._logger.debug(
                "Could not find busy container for %s",
                day_id,
                extra={"event": "busy_container_missing", "day_id": day_id},
            )
            return

        if count > 0:
            container.setAccessibleName(busy_label(count))
        else:
            container.setAccessibleName("")

        difference = max(0, min(self._max_indicators, count)) - indicator_count(container)
        while difference > 0:
            self._add_dot(container)
            difference -= 1
        while difference < 0:
            self._remove_dot(container)
            difference += 1

    def _add_dot(self, container: QWidget) -> None:
        dot = QLabel(container)
        dot.setObjectName(DOT_OBJECT_NAME)
        dot.setFixedSize(DOT_SIZE, DOT_SIZE)
        dot.setPixmap(busy_dot_pixmap(DOT_SIZE))
        layout = container.layout()
        if layout is None:
            layout = QHBoxLayout(container)
            layout.setContentsMargins(0, 0, 0, 0)
            layout.setSpacing(2)
            layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(dot)

    def _remove_dot(self, container: QWidget) -> None:
        dots = container.findChildren(QLabel, DOT_OBJECT_NAME)
        if not dots:
            return
        dot = dots[0]
        dot.hide()
        dot.setParent(None)
        dot.deleteLater()

    def refresh(self) -> None:
        """Repaint every displayed dot with the current palette's pixmap."""
        pixmap = busy_dot_pixmap(DOT_SIZE)
        for container in self._handles.values():
            for dot in container.findChildren(QLabel, DOT_OBJECT_NAME):
                dot.setPixmap(pixmap)
