"""Shared fixtures: offscreen Qt application and an isolated app data directory."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import datetime

import pytest
from PySide6.QtCore import QLocale
from PySide6.QtWidgets import QApplication

from busy_calendar.core import paths
from busy_calendar.core.header_cache import DAY_HEADERS
from busy_calendar.core.models import BusyInterval


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    QLocale.setDefault(QLocale("en_US"))
    yield app


@pytest.fixture(autouse=True)
def isolated_app_data(tmp_path, monkeypatch):
    monkeypatch.setenv(paths.HOME_ENV_VAR, str(tmp_path / "appdata"))
    monkeypatch.setattr(paths, "_DATA_DIR_OVERRIDE", None)
    paths.app_data_dir.cache_clear()
    yield tmp_path / "appdata"
    paths.app_data_dir.cache_clear()


@pytest.fixture(autouse=True)
def fresh_header_cache():
    DAY_HEADERS.invalidate()
    yield
    DAY_HEADERS.invalidate()


@pytest.fixture
def make_interval():
    def _make(start: str, end: str, **kwargs) -> BusyInterval:
        return BusyInterval(start=datetime.fromisoformat(start), end=datetime.fromisoformat(end), **kwargs)

    return _make
