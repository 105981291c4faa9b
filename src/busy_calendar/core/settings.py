"""Settings management for Busy Calendar."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from .exceptions import SettingsError
from .paths import current_app_data_dir, settings_path


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_LOCALE = "en_US"
DEFAULT_MAX_INDICATORS = 3
_SUPPORTED_THEMES = {member.value for member in Theme}


@dataclass(slots=True)
class Settings:
    theme: Theme = Theme.LIGHT
    starts_on_monday: bool = False
    locale: str = DEFAULT_LOCALE
    max_indicators: int = DEFAULT_MAX_INDICATORS
    app_data_path: str = field(default_factory=lambda: str(current_app_data_dir()))

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["theme"] = self.theme.value
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Settings":
        theme_value = str(payload.get("theme", Theme.LIGHT.value)).lower()
        if theme_value not in _SUPPORTED_THEMES:
            raise SettingsError(f"Unsupported theme: {theme_value}")
        locale = str(payload.get("locale") or DEFAULT_LOCALE).strip()
        max_indicators = int(payload.get("max_indicators", DEFAULT_MAX_INDICATORS))
        app_data = str(payload.get("app_data_path") or current_app_data_dir()).strip()

        settings = cls(
            theme=Theme(theme_value),
            starts_on_monday=bool(payload.get("starts_on_monday", False)),
            locale=locale,
            max_indicators=max_indicators,
            app_data_path=app_data,
        )
        _validate(settings)
        return settings


class SettingsManager:
    def __init__(self, path: Path | None = None, logger: logging.Logger | None = None) -> None:
        self._path = Path(path) if path is not None else settings_path()
        self._logger = logger or logging.getLogger("busy_calendar.settings")

    def load(self) -> Settings:
        if not self._path.exists():
            self._logger.info(
                "Settings file missing; using defaults",
                extra={"event": "settings_load_default", "path": str(self._path)},
            )
            return Settings()

        try:
            with self._path.open("r", encoding="utf-8") as infile:
                payload = json.load(infile)
        except json.JSONDecodeError as exc:
            self._logger.exception(
                "Invalid JSON in settings file",
                extra={"event": "settings_load_invalid_json"},
            )
            raise SettingsError("Settings file is malformed") from exc
        except OSError as exc:
            self._logger.exception("Unexpected error loading settings")
            raise SettingsError("Unable to load settings") from exc

        if not isinstance(payload, dict):
            raise SettingsError("Settings payload is invalid")
        try:
            settings = Settings.from_dict(payload)
        except SettingsError:
            raise
        except (TypeError, ValueError) as exc:
            self._logger.exception(
                "Settings payload invalid",
                extra={"event": "settings_load_invalid_payload"},
            )
            raise SettingsError("Settings payload is invalid") from exc

        self._logger.info(
            "Settings loaded successfully",
            extra={"event": "settings_loaded", **settings.to_dict()},
        )
        return settings

    def save(self, settings: Settings) -> None:
        self._logger.info("Saving settings", extra={"event": "settings_save", **settings.to_dict()})
        _validate(settings)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as outfile:
                json.dump(settings.to_dict(), outfile, indent=2)
                outfile.flush()
                os.fsync(outfile.fileno())
            temp_path.replace(self._path)
        except OSError as exc:
            self._logger.exception("Failed to save settings")
            raise SettingsError("Unable to save settings") from exc

    def update(self, transform: Callable[[Settings], Settings]) -> Settings:
        current = self.load()
        updated = transform(current)
        self.save(updated)
        return updated


def _validate(settings: Settings) -> None:
    if settings.theme.value not in _SUPPORTED_THEMES:
        raise SettingsError(f"Unsupported theme: {settings.theme.value}")
    if not settings.locale:
        raise SettingsError("Locale must not be empty")
    if not 1 <= settings.max_indicators <= 9:
        raise SettingsError("Busy indicator cap must be between 1 and 9")
