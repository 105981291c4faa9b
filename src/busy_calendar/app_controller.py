"""Application controller wiring all services together."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox  # type: ignore[import]

from .core.exception_logging import install_global_exception_logger
from .core.exceptions import PersistenceError, SettingsError
from .core.logging_config import configure_logging
from .core.paths import ensure_app_structure, set_app_data_directory
from .core.repository import IntervalsRepository
from .core.settings import Settings, SettingsManager
from .core.store import BusyIntervalStore
from .ui.icons import app_icon
from .ui.localization import LocaleNotifier
from .ui.main_window import MainWindow
from .ui.qt_message_handler import install_qt_message_handler
from .ui.theme_manager import ThemeManager

LOGGER = logging.getLogger("busy_calendar.app")


class ApplicationController:
    def __init__(self, app: QApplication) -> None:
        self._app = app
        self._settings_manager = SettingsManager()
        try:
            self._settings = self._settings_manager.load()
        except SettingsError as exc:
            LOGGER.exception("Failed to load settings; using defaults")
            QMessageBox.warning(None, "Settings error", str(exc))
            self._settings = Settings()

        set_app_data_directory(Path(self._settings.app_data_path).expanduser())
        ensure_app_structure()
        configure_logging()
        install_global_exception_logger()
        install_qt_message_handler()
        # Rebuild manager to ensure it points at the active app data directory
        self._settings_manager = SettingsManager()

        self._theme_manager = ThemeManager(app)
        self._theme_manager.apply(self._settings.theme)

        self._locale_notifier = LocaleNotifier(app)
        self._locale_notifier.set_locale(self._settings.locale)

        self._store = BusyIntervalStore(IntervalsRepository())
        try:
            self._store.load()
        except PersistenceError as exc:
            LOGGER.exception("Unable to load busy intervals")
            QMessageBox.critical(None, "Unable to read intervals", str(exc))

        self._main_window = MainWindow(self._store, self._settings)
        self._locale_notifier.locale_changed.connect(self._on_locale_changed)
        self._apply_window_icon()
        self._main_window.show()

    @property
    def main_window(self) -> MainWindow:
        return self._main_window

    def _on_locale_changed(self, _name: str) -> None:
        self._main_window.rebuild()

    def _apply_window_icon(self) -> None:
        icon = app_icon()
        if icon is not None:
            self._app.setWindowIcon(icon)
            self._main_window.setWindowIcon(icon)


def run_app(argv: list[str] | None = None) -> int:
    qt_args = argv if argv is not None else sys.argv
    app = QApplication(qt_args)
    controller = ApplicationController(app)
    LOGGER.debug("Controller ready", extra={"event": "app_ready", "window": controller.main_window.objectName()})
    return app.exec()
