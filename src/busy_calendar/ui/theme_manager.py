"""Runtime theme management for Busy Calendar."""

from __future__ import annotations

import logging

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication

from ..core.settings import Theme
from .icons import IconColor, IconPalette, set_icon_palette

LOGGER = logging.getLogger("busy_calendar.ui.theme")

_LIGHT_QSS = """
QWidget { background-color: #f5f6f8; }
QToolButton { padding: 4px 12px; border-radius: 4px; }
QWidget#month-grid QLabel[header="true"] { color: #6b7280; font-weight: bold; }
QFrame[dayCell="true"] { border: 1px solid #e5e7eb; border-radius: 4px; background-color: #ffffff; }
QFrame[dayCell="true"][otherMonth="true"] { background-color: #f1f1f1; }
QFrame[dayCell="true"][today="true"] { border: 2px solid #2563eb; }
"""

_DARK_QSS = """
QWidget { background-color: #1e1f22; color: #f0f0f0; }
QToolButton { padding: 4px 12px; border-radius: 4px; }
QWidget#month-grid QLabel[header="true"] { color: #9ca3af; font-weight: bold; }
QFrame[dayCell="true"] { border: 1px solid #3c3f45; border-radius: 4px; background-color: #2b2d31; }
QFrame[dayCell="true"][otherMonth="true"] { background-color: #1f2023; }
QFrame[dayCell="true"][today="true"] { border: 2px solid #60a5fa; }
"""

_LIGHT_ICON_PALETTE = IconPalette(
    roles={
        "busy": IconColor(normal="#2563eb", active="#1d4ed8"),
        "control": IconColor(normal="#1f2937", active="#2563eb"),
    }
)

_DARK_ICON_PALETTE = IconPalette(
    roles={
        "busy": IconColor(normal="#60a5fa", active="#38bdf8"),
        "control": IconColor(normal="#e5e7eb", active="#60a5fa"),
    }
)


class ThemeManager:
    def __init__(self, app: QApplication) -> None:
        self._app = app
        self._current: Theme | None = None

    def apply(self, theme: Theme) -> None:
        if theme == self._current:
            return
        LOGGER.info("Applying theme", extra={"event": "ui_theme_apply", "theme": theme.value})
        if theme == Theme.DARK:
            self._apply_dark()
            self._app.setStyleSheet(_DARK_QSS)
            set_icon_palette(_DARK_ICON_PALETTE)
        else:
            self._app.setPalette(self._app.style().standardPalette())
            self._app.setStyleSheet(_LIGHT_QSS)
            set_icon_palette(_LIGHT_ICON_PALETTE)
        self._current = theme

    def current(self) -> Theme | None:
        return self._current

    def _apply_dark(self) -> None:
        palette = QPalette()
        palette.setColor(QPalette.Window, QColor("#1e1f22"))
        palette.setColor(QPalette.WindowText, QColor("#f0f0f0"))
        palette.setColor(QPalette.Base, QColor("#2b2d31"))
        palette.setColor(QPalette.AlternateBase, QColor("#1f2023"))
        palette.setColor(QPalette.Text, QColor("#f0f0f0"))
        palette.setColor(QPalette.Button, QColor("#2b2d31"))
        palette.setColor(QPalette.ButtonText, QColor("#f0f0f0"))
        palette.setColor(QPalette.Highlight, QColor("#3a506b"))
        palette.setColor(QPalette.HighlightedText, QColor("#ffffff"))
        self._app.setPalette(palette)
