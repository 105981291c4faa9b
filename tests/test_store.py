"""Tests for the interval store and its observers."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from busy_calendar.core.calc import span_of_month
from busy_calendar.core.models import BusyInterval, IntervalAdded, IntervalRemoved, Timespan
from busy_calendar.core.repository import IntervalsRepository
from busy_calendar.core.store import BusyIntervalStore

MARCH = span_of_month(date(2024, 3, 1))


@pytest.fixture
def store():
    return BusyIntervalStore()


def test_query_existing_returns_overlapping_sorted(store, make_interval):
    late = store.add(make_interval("2024-03-20T08:00:00", "2024-03-20T09:00:00"))
    early = store.add(make_interval("2024-03-02T08:00:00", "2024-03-02T09:00:00"))
    store.add(make_interval("2024-05-02T08:00:00", "2024-05-02T09:00:00"))

    assert store.query_existing(MARCH) == [early, late]


def test_observers_receive_events_for_their_span(store, make_interval):
    received = []
    store.observe(MARCH, received.append)

    inside = store.add(make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00"))
    store.add(make_interval("2024-06-10T08:00:00", "2024-06-10T09:00:00"))
    store.remove(inside.interval_id)

    assert received == [IntervalAdded(inside), IntervalRemoved(inside)]


def test_unobserve_stops_delivery(store, make_interval):
    received = []
    store.observe(MARCH, received.append)

    assert store.unobserve(MARCH, received.append) is True
    assert store.unobserve(MARCH, received.append) is False
    store.add(make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00"))

    assert received == []
    assert store.observer_count() == 0


def test_failing_observer_does_not_block_others(store, make_interval):
    received = []

    def broken(_event):
        raise RuntimeError("boom")

    store.observe(MARCH, broken)
    store.observe(MARCH, received.append)
    store.add(make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00"))

    assert len(received) == 1


def test_remove_unknown_is_silent(store):
    received = []
    store.observe(MARCH, received.append)

    assert store.remove("missing") is None
    assert received == []


def test_duplicate_add_is_rejected(store, make_interval):
    interval = store.add(make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00"))

    with pytest.raises(ValueError):
        store.add(interval)


def test_persists_through_repository(tmp_path):
    repository = IntervalsRepository(tmp_path / "intervals.jsonl")
    store = BusyIntervalStore(repository)
    kept = store.add(BusyInterval(start=datetime(2024, 3, 10, 8), end=datetime(2024, 3, 10, 9)))
    dropped = store.add(BusyInterval(start=datetime(2024, 3, 11, 8), end=datetime(2024, 3, 11, 9)))
    store.remove(dropped.interval_id)

    reloaded = BusyIntervalStore(repository)
    assert reloaded.load() == 1
    assert reloaded.get(kept.interval_id) == kept


def test_load_does_not_notify(tmp_path):
    repository = IntervalsRepository(tmp_path / "intervals.jsonl")
    repository.add(BusyInterval(start=datetime(2024, 3, 10, 8), end=datetime(2024, 3, 10, 9)))
    store = BusyIntervalStore(repository)
    received = []
    store.observe(Timespan(date(2024, 3, 1), date(2024, 3, 31)), received.append)

    store.load()

    assert received == []
    assert len(store) == 1


def test_query_orders_naive_and_aware_intervals_by_wall_clock(store):
    paris = ZoneInfo("Europe/Paris")
    aware = store.add(BusyInterval(start=datetime(2024, 3, 11, 8, tzinfo=paris), end=datetime(2024, 3, 11, 9, tzinfo=paris)))
    naive = store.add(BusyInterval(start=datetime(2024, 3, 10, 8), end=datetime(2024, 3, 10, 9)))

    assert store.query_existing(MARCH) == [naive, aware]
