"""Helpers for loading UI icons with theme-aware colors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Iterable, Mapping

import qtawesome as qta  # type: ignore[import]
from PySide6.QtGui import QIcon, QPixmap

from ..core.paths import app_icon_path


BUSY_DOT_ICON_NAMES: tuple[str, ...] = (
    "fa5s.circle",
    "fa6s.circle",
    "mdi.circle",
)

PREVIOUS_ICON_NAMES: tuple[str, ...] = (
    "fa5s.chevron-left",
    "fa6s.chevron-left",
    "mdi.chevron-left",
)

NEXT_ICON_NAMES: tuple[str, ...] = (
    "fa5s.chevron-right",
    "fa6s.chevron-right",
    "mdi.chevron-right",
)

TODAY_ICON_NAMES: tuple[str, ...] = (
    "fa5s.calendar-day",
    "fa6s.calendar-day",
    "mdi.calendar-today",
)

PLUS_ICON_NAMES: tuple[str, ...] = (
    "fa5s.plus",
    "fa6s.plus",
    "mdi.plus",
)


@dataclass(frozen=True)
class IconColor:
    normal: str
    active: str


@dataclass(frozen=True)
class IconPalette:
    roles: Mapping[str, IconColor] = field(default_factory=dict)

    def color_for(self, role: str) -> IconColor:
        if role in self.roles:
            return self.roles[role]
        raise KeyError(role)


_LOGGER = logging.getLogger("busy_calendar.ui.icons")

_DEFAULT_PALETTE = IconPalette(
    roles={
        "busy": IconColor(normal="#2563eb", active="#1d4ed8"),
        "control": IconColor(normal="#1f2937", active="#2563eb"),
    }
)

_current_palette = _DEFAULT_PALETTE

_palette_listeners: set[Callable[[], None]] = set()


def current_icon_palette() -> IconPalette:
    return _current_palette


def set_icon_palette(palette: IconPalette) -> None:
    """Set the active icon palette used for dynamic theming."""

    global _current_palette
    if palette == _current_palette:
        return
    _current_palette = palette
    busy_dot_pixmap.cache_clear()
    _notify_palette_changed()


def add_palette_listener(callback: Callable[[], None]) -> None:
    _palette_listeners.add(callback)


def remove_palette_listener(callback: Callable[[], None]) -> None:
    _palette_listeners.discard(callback)


def _notify_palette_changed() -> None:
    for callback in tuple(_palette_listeners):
        try:
            callback()
        except Exception:  # pragma: no cover - listeners should not break theme changes
            _LOGGER.exception("Icon palette listener failed")


@lru_cache(maxsize=1)
def app_icon() -> QIcon | None:
    """Return the global application icon if it exists."""
    icon_path = app_icon_path()
    if icon_path.exists():
        return QIcon(str(icon_path))
    return None


def _resolve_colors(role: str) -> IconColor:
    try:
        return _current_palette.color_for(role)
    except KeyError:
        _LOGGER.warning("Missing icon role '%s' in palette; falling back to control", role)
        return _DEFAULT_PALETTE.color_for("control")


def _qtawesome_icon(names: Iterable[str], size: int, role: str) -> QIcon:
    """Return the first renderable QtAwesome icon from ``names`` using themed colors."""

    colors = _resolve_colors(role)
    last_error: Exception | None = None
    for name in names:
        try:
            icon = qta.icon(name, color=colors.normal, color_active=colors.active)
        except Exception as exc:  # pragma: no cover - misnamed glyphs across font versions
            last_error = exc
            continue
        pixmap = icon.pixmap(size, size)
        if not pixmap.isNull():
            return QIcon(pixmap)

    message = f"QtAwesome icon lookup failed for {tuple(names)}"
    if last_error is not None:
        raise RuntimeError(message) from last_error
    raise RuntimeError(message)


@lru_cache(maxsize=4)
def busy_dot_pixmap(size: int = 6) -> QPixmap:
    """Pixmap for one busy indicator dot in the current palette."""

    return _qtawesome_icon(BUSY_DOT_ICON_NAMES, size, role="busy").pixmap(size, size)


def previous_icon(size: int = 18) -> QIcon:
    return _qtawesome_icon(PREVIOUS_ICON_NAMES, size, role="control")


def next_icon(size: int = 18) -> QIcon:
    return _qtawesome_icon(NEXT_ICON_NAMES, size, role="control")


def today_icon(size: int = 18) -> QIcon:
    return _qtawesome_icon(TODAY_ICON_NAMES, size, role="control")


def plus_icon(size: int = 18) -> QIcon:
    return _qtawesome_icon(PLUS_ICON_NAMES, size, role="control")
