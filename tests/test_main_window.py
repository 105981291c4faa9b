"""Tests for month paging in the main window."""

from dataclasses import replace
from datetime import date

import pytest
from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QLabel, QWidget

from busy_calendar.core.settings import Settings
from busy_calendar.core.store import BusyIntervalStore
from busy_calendar.ui.busy_indicators import DOT_OBJECT_NAME, DOT_SIZE, indicator_count
from busy_calendar.ui.icons import IconColor, IconPalette, busy_dot_pixmap, current_icon_palette, set_icon_palette
from busy_calendar.ui.main_window import MainWindow
from busy_calendar.ui.month_view import BUSY_CONTAINER_NAME, ActivationState

TODAY = date(2024, 3, 15)


@pytest.fixture
def store():
    return BusyIntervalStore()


@pytest.fixture
def window(qapp, store):
    win = MainWindow(store, Settings(), today=TODAY)
    yield win
    win.close()
    win.deleteLater()


def _drain_events():
    for _ in range(3):
        QCoreApplication.processEvents()


def test_opens_on_current_month_with_neighbours(window):
    assert window.current_month == date(2024, 3, 1)
    assert sorted(window.month_views()) == [date(2024, 2, 1), date(2024, 3, 1), date(2024, 4, 1)]


def test_visible_month_loads_and_observes(window, store, make_interval):
    _drain_events()
    view = window.current_view()
    assert view.state is ActivationState.ACTIVE

    store.add(make_interval("2024-03-10T08:00:00", "2024-03-10T10:00:00"))

    assert view.busy_count("2024-03-10") == 1


def test_navigation_evicts_far_months(window):
    march = window.current_view()

    window.show_next_month()
    window.show_next_month()

    assert window.current_month == date(2024, 5, 1)
    assert sorted(window.month_views()) == [date(2024, 4, 1), date(2024, 5, 1), date(2024, 6, 1)]
    assert march.state is ActivationState.DESTROYED

    window.show_today()
    assert window.current_month == date(2024, 3, 1)


def test_neighbours_are_deactivated(window):
    window.show_previous_month()

    views = window.month_views()
    assert views[date(2024, 2, 1)].property("active") is True
    assert views[date(2024, 3, 1)].state is not ActivationState.ACTIVE


def test_week_start_change_rebuilds_months(window):
    before = window.current_view()

    window.apply_settings(replace(Settings(), starts_on_monday=True))

    after = window.current_view()
    assert before.state is ActivationState.DESTROYED
    assert after.timespan.start == date(2024, 2, 26)


def test_day_menu_removes_interval(window, store, make_interval):
    _drain_events()
    view = window.current_view()
    keep = store.add(make_interval("2024-03-12T08:00:00", "2024-03-12T09:00:00"))
    doomed = store.add(make_interval("2024-03-10T08:00:00", "2024-03-11T00:00:00", title="Dentist"))
    assert view.busy_count("2024-03-10") == 1

    menu = window.build_day_menu(date(2024, 3, 10))
    actions = menu.actions()
    assert len(actions) == 1
    assert "Dentist" in actions[0].text()

    actions[0].trigger()

    assert store.get(doomed.interval_id) is None
    assert store.get(keep.interval_id) is keep
    assert view.busy_count("2024-03-10") == 0
    assert indicator_count(view.day_cell("2024-03-10").findChild(QWidget, BUSY_CONTAINER_NAME)) == 0


def test_day_menu_is_empty_for_free_day(window):
    assert window.build_day_menu(date(2024, 3, 11)) is None


def test_removing_unknown_interval_is_noop(window):
    assert window.remove_interval("missing") is None


def test_palette_change_recolours_visible_dots(window, store, make_interval):
    _drain_events()
    store.add(make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00"))
    container = window.current_view().day_cell("2024-03-10").findChild(QWidget, BUSY_CONTAINER_NAME)
    original = current_icon_palette()
    try:
        set_icon_palette(IconPalette(roles={"busy": IconColor(normal="#16a34a", active="#15803d")}))

        expected = busy_dot_pixmap(DOT_SIZE).cacheKey()
        dots = container.findChildren(QLabel, DOT_OBJECT_NAME)
        assert [dot.pixmap().cacheKey() for dot in dots] == [expected]
    finally:
        set_icon_palette(original)
