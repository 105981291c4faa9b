"""Centralized Qt message handling for logging and suppression."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QtMsgType, QMessageLogContext, qInstallMessageHandler

LOGGER = logging.getLogger("busy_calendar.qt")

# Platform plugins without a window manager (offscreen, minimal) repeat these
# for every top-level widget; they carry no information about the grid.
_DEMOTED_MESSAGES: tuple[str, ...] = (
    "This plugin does not support propagateSizeHints",
    "This plugin does not support raise()",
)

_previous_handler: Optional[Callable[[QtMsgType, QMessageLogContext, str], None]] = None
_installed = False


def install_qt_message_handler() -> None:
    """Install a Qt message handler that routes logs through Python logging."""

    global _installed, _previous_handler
    if _installed:
        return
    _previous_handler = qInstallMessageHandler(_handle_qt_message)
    _installed = True


def _handle_qt_message(msg_type: QtMsgType, context: QMessageLogContext, message: str) -> None:
    text = message or ""
    extra = {"event": "qt_message", "category": getattr(context, "category", None)}

    if any(marker in text for marker in _DEMOTED_MESSAGES):
        LOGGER.debug(text, extra=extra)
        return

    if msg_type == QtMsgType.QtDebugMsg:
        LOGGER.debug(text, extra=extra)
    elif msg_type in (QtMsgType.QtInfoMsg, getattr(QtMsgType, "QtSystemMsg", QtMsgType.QtInfoMsg)):
        LOGGER.info(text, extra=extra)
    elif msg_type == QtMsgType.QtWarningMsg:
        LOGGER.warning(text, extra=extra)
    elif msg_type == QtMsgType.QtCriticalMsg:
        LOGGER.error(text, extra=extra)
    elif msg_type == QtMsgType.QtFatalMsg:
        LOGGER.critical(text, extra=extra)
    else:
        LOGGER.warning("Unhandled Qt message (%s): %s", msg_type, text, extra=extra)

    if _previous_handler is not None and msg_type == QtMsgType.QtFatalMsg:
        _previous_handler(msg_type, context, message)
