"""Filesystem path utilities for Busy Calendar."""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path

APP_NAME = "busy-calendar"
HOME_ENV_VAR = "BUSY_CALENDAR_HOME"
INTERVALS_FILENAME = "intervals.jsonl"
SETTINGS_FILENAME = "settings.json"
LOG_FILENAME = "busy-calendar.log"
RESOURCES_DIRNAME = "resources"
APP_ICON_FILENAME = "busy-calendar.ico"

_DATA_DIR_OVERRIDE: Path | None = None


def _roaming_root() -> Path:
    """Return the user's roaming application data directory."""
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home() / ".local" / "share"


def default_app_data_dir() -> Path:
    explicit = os.environ.get(HOME_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    return _roaming_root() / APP_NAME


def current_app_data_dir() -> Path:
    return _DATA_DIR_OVERRIDE or default_app_data_dir()


def set_app_data_directory(path: Path | str | None) -> Path:
    global _DATA_DIR_OVERRIDE
    target = Path(path).expanduser() if path else None
    _DATA_DIR_OVERRIDE = target
    app_data_dir.cache_clear()
    if target is not None:
        target.mkdir(parents=True, exist_ok=True)
    return app_data_dir()


@lru_cache(maxsize=1)
def app_data_dir() -> Path:
    """Return the base application data directory, ensuring it exists."""
    base = current_app_data_dir()
    base.mkdir(parents=True, exist_ok=True)
    return base


def settings_path() -> Path:
    return app_data_dir() / SETTINGS_FILENAME


def intervals_path() -> Path:
    return app_data_dir() / INTERVALS_FILENAME


def log_path() -> Path:
    return app_data_dir() / LOG_FILENAME


def ensure_app_structure() -> None:
    """Proactively create the files the app relies on."""
    intervals_file = intervals_path()
    if not intervals_file.exists():
        intervals_file.touch()


@lru_cache(maxsize=1)
def app_icon_path() -> Path:
    """Locate the application icon within the project tree."""
    candidates = []

    bundle_root = getattr(sys, "_MEIPASS", None)
    if bundle_root:
        base = Path(bundle_root)
        candidates.extend([
            base / APP_ICON_FILENAME,
            base / RESOURCES_DIRNAME / APP_ICON_FILENAME,
        ])

    package_root = Path(__file__).resolve().parent.parent
    project_root = package_root.parent.parent

    candidates.extend([
        package_root.parent / APP_ICON_FILENAME,
        project_root / APP_ICON_FILENAME,
        project_root / RESOURCES_DIRNAME / APP_ICON_FILENAME,
    ])
    for candidate in candidates:
        if candidate.exists():
            return candidate

    return project_root / RESOURCES_DIRNAME / APP_ICON_FILENAME
