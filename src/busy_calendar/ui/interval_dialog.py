"""Dialog for entering a new busy interval."""

from __future__ import annotations

from datetime import datetime, timedelta

from PySide6.QtCore import QDateTime, Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QDateTimeEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from ..core.models import BusyInterval

_DISPLAY_FORMAT = "yyyy-MM-dd HH:mm"


class IntervalDialog(QDialog):
    def __init__(self, default_start: datetime | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add busy interval")
        self.setModal(True)

        start = (default_start or datetime.now()).replace(second=0, microsecond=0)
        self._interval: BusyInterval | None = None

        self._title_edit = QLineEdit(self)
        self._title_edit.setPlaceholderText("Optional title")
        self._start_edit = QDateTimeEdit(QDateTime(start), self)
        self._start_edit.setDisplayFormat(_DISPLAY_FORMAT)
        self._start_edit.setCalendarPopup(True)
        self._end_edit = QDateTimeEdit(QDateTime(start + timedelta(hours=1)), self)
        self._end_edit.setDisplayFormat(_DISPLAY_FORMAT)
        self._end_edit.setCalendarPopup(True)
        self._all_day_check = QCheckBox("All day", self)
        self._all_day_check.toggled.connect(self._on_all_day_toggled)

        form = QFormLayout()
        form.addRow("Title", self._title_edit)
        form.addRow("Start", self._start_edit)
        form.addRow("End", self._end_edit)
        form.addRow("", self._all_day_check)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, Qt.Horizontal, self)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(buttons)

    @property
    def interval(self) -> BusyInterval | None:
        return self._interval

    def _on_all_day_toggled(self, checked: bool) -> None:
        self._end_edit.setEnabled(not checked)

    def _build_interval(self) -> BusyInterval:
        start: datetime = self._start_edit.dateTime().toPython()
        title = self._title_edit.text().strip()
        if self._all_day_check.isChecked():
            day_start = start.replace(hour=0, minute=0, second=0, microsecond=0)
            return BusyInterval(start=day_start, end=day_start + timedelta(days=1), title=title)
        end: datetime = self._end_edit.dateTime().toPython()
        return BusyInterval(start=start, end=end, title=title)

    def _on_accept(self) -> None:
        try:
            self._interval = self._build_interval()
        except ValueError as exc:
            QMessageBox.warning(self, "Invalid interval", str(exc))
            return
        self.accept()
