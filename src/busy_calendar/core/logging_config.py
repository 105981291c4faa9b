"""Application-wide logging configuration."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Iterable

from .paths import ensure_app_structure, log_path

_LOGGER_INITIALIZED = False

LOGGER_NAME = "busy_calendar"
LEVEL_ENV_VAR = "BUSY_CALENDAR_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
DEFAULT_LOG_LEVEL = logging.INFO


def _build_handlers() -> list[logging.Handler]:
    file_handler = RotatingFileHandler(
        log_path(), maxBytes=5_000_000, backupCount=5, encoding="utf-8", delay=True
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return [file_handler]


def resolve_level(level: int | str | None = None) -> int | str:
    """Explicit ``level`` wins, then ``BUSY_CALENDAR_LOG_LEVEL``, then INFO."""
    if level:
        return level
    configured = os.environ.get(LEVEL_ENV_VAR, "").strip().upper()
    if configured and isinstance(logging.getLevelName(configured), int):
        return configured
    return DEFAULT_LOG_LEVEL


def configure_logging(level: int | str | None = None, extra_handlers: Iterable[logging.Handler] | None = None) -> logging.Logger:
    """Configure the shared ``busy_calendar`` logger once and return it."""
    global _LOGGER_INITIALIZED
    logger = logging.getLogger(LOGGER_NAME)
    if _LOGGER_INITIALIZED:
        if level:
            logger.setLevel(level)
        return logger

    ensure_app_structure()

    resolved = resolve_level(level)
    logger.setLevel(resolved)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handlers = _build_handlers()
    if extra_handlers:
        handlers.extend(extra_handlers)

    for handler in handlers:
        logger.addHandler(handler)

    logging.captureWarnings(True)

    _LOGGER_INITIALIZED = True
    logger.info(
        "Logging initialized",
        extra={"event": "logging_configured", "level": resolved, "log_file": str(log_path())},
    )
    return logger


def reset_logging(level: int | str | None = None, *, reconfigure: bool = True) -> logging.Logger:
    """Close existing handlers and optionally rebuild logging configuration."""
    global _LOGGER_INITIALIZED
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        try:
            handler.close()
        finally:
            logger.removeHandler(handler)
    _LOGGER_INITIALIZED = False
    if reconfigure:
        return configure_logging(level)
    logger.propagate = True
    return logger
