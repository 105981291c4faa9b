"""Logger setup and Qt message routing."""

import logging

import pytest
from PySide6.QtCore import QMessageLogContext, QtMsgType

from busy_calendar.core import logging_config
from busy_calendar.core.paths import log_path
from busy_calendar.ui import qt_message_handler


@pytest.fixture
def clean_logging():
    logging_config.reset_logging(reconfigure=False)
    yield
    logging_config.reset_logging(reconfigure=False)


def test_configure_logging_writes_into_app_data_dir(clean_logging, isolated_app_data):
    logger = logging_config.configure_logging()
    logger.info("grid rendered", extra={"event": "month_rendered"})
    for handler in logger.handlers:
        handler.flush()

    assert log_path().parent == isolated_app_data
    text = log_path().read_text(encoding="utf-8")
    assert "Logging initialized" in text
    assert "grid rendered" in text


def test_configure_logging_is_idempotent(clean_logging):
    first = logging_config.configure_logging()
    handler_count = len(first.handlers)

    second = logging_config.configure_logging("DEBUG")

    assert second is first
    assert len(second.handlers) == handler_count
    assert second.level == logging.DEBUG


def test_level_comes_from_environment(clean_logging, monkeypatch):
    monkeypatch.setenv(logging_config.LEVEL_ENV_VAR, "warning")

    logger = logging_config.configure_logging()

    assert logger.level == logging.WARNING


def test_unknown_environment_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv(logging_config.LEVEL_ENV_VAR, "chatty")

    assert logging_config.resolve_level() == logging.INFO
    assert logging_config.resolve_level("ERROR") == "ERROR"


def test_reset_without_reconfigure_restores_propagation(clean_logging):
    logging_config.configure_logging()

    logger = logging_config.reset_logging(reconfigure=False)

    assert logger.handlers == []
    assert logger.propagate is True


class TestQtMessageRouting:
    def test_warning_is_logged_as_warning(self, caplog):
        caplog.set_level(logging.DEBUG, logger="busy_calendar.qt")

        qt_message_handler._handle_qt_message(QtMsgType.QtWarningMsg, QMessageLogContext(), "cell layout overflow")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.event == "qt_message"

    def test_window_manager_noise_is_demoted(self, caplog):
        caplog.set_level(logging.DEBUG, logger="busy_calendar.qt")

        qt_message_handler._handle_qt_message(
            QtMsgType.QtWarningMsg,
            QMessageLogContext(),
            "This plugin does not support propagateSizeHints()",
        )

        assert [record.levelno for record in caplog.records] == [logging.DEBUG]
