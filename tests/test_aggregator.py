"""Tests for the per-day busy count aggregator."""

import logging

import pytest

from busy_calendar.core.aggregator import DayBusyAggregator
from busy_calendar.core.models import CountChange, IntervalAdded, IntervalRemoved


@pytest.fixture
def calls():
    return []


@pytest.fixture
def aggregator(calls):
    agg = DayBusyAggregator(on_count_changed=lambda day_id, count: calls.append((day_id, count)))
    for day in ("2024-03-09", "2024-03-10", "2024-03-11"):
        agg.register_day(day)
    return agg


def test_registered_day_starts_at_zero_and_absent_day_is_none(aggregator):
    assert aggregator.count("2024-03-10") == 0
    assert aggregator.count("2024-03-12") is None
    assert "2024-03-10" in aggregator
    assert len(aggregator) == 3


def test_scenario_add_overlapping_then_remove(aggregator, make_interval):
    a = make_interval("2024-03-10T08:00:00", "2024-03-10T10:00:00")
    b = make_interval("2024-03-09T00:00:00", "2024-03-11T00:00:00")

    aggregator.apply_batch(added=[a])
    assert aggregator.count("2024-03-10") == 1

    aggregator.apply_batch(added=[b])
    assert aggregator.count("2024-03-09") == 1
    assert aggregator.count("2024-03-10") == 2
    assert aggregator.count("2024-03-11") == 0

    aggregator.apply_batch(removed=[a])
    assert aggregator.count("2024-03-10") == 1
    assert aggregator.count("2024-03-09") == 1


def test_add_then_remove_restores_counts(aggregator, make_interval):
    interval = make_interval("2024-03-09T12:00:00", "2024-03-11T12:00:00")
    before = aggregator.counts()

    aggregator.apply_batch(added=[interval])
    aggregator.apply_batch(removed=[interval])

    assert aggregator.counts() == before


def test_batch_processes_added_before_removed(aggregator, calls, make_interval):
    first = make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00")
    second = make_interval("2024-03-10T10:00:00", "2024-03-10T11:00:00")
    aggregator.apply_batch(added=[first])
    calls.clear()

    changes = aggregator.apply_batch(added=[second], removed=[first])

    assert changes == [
        CountChange(day_id="2024-03-10", count=2, delta=1),
        CountChange(day_id="2024-03-10", count=1, delta=-1),
    ]
    assert calls == [("2024-03-10", 2), ("2024-03-10", 1)]


def test_listener_called_per_touched_day(aggregator, calls, make_interval):
    aggregator.apply_batch(added=[make_interval("2024-03-09T00:00:00", "2024-03-11T00:00:00")])

    assert calls == [("2024-03-09", 1), ("2024-03-10", 1)]


def test_unregistered_day_counts_from_zero(aggregator, make_interval):
    aggregator.apply_batch(added=[make_interval("2024-03-20T08:00:00", "2024-03-20T09:00:00")])

    assert aggregator.count("2024-03-20") == 1


def test_unmatched_removal_goes_negative_without_raising(aggregator, make_interval, caplog):
    interval = make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00")

    with caplog.at_level(logging.WARNING, logger="busy_calendar.aggregator"):
        aggregator.apply_batch(removed=[interval])

    assert aggregator.count("2024-03-10") == -1
    assert any(getattr(record, "event", None) == "busy_count_negative" for record in caplog.records)


def test_failing_listener_does_not_abort_batch(make_interval):
    seen = []

    def listener(day_id, count):
        seen.append(day_id)
        if day_id == "2024-03-09":
            raise RuntimeError("boom")

    aggregator = DayBusyAggregator(on_count_changed=listener)
    aggregator.apply_batch(added=[make_interval("2024-03-09T08:00:00", "2024-03-10T09:00:00")])

    assert seen == ["2024-03-09", "2024-03-10"]
    assert aggregator.count("2024-03-10") == 1


def test_apply_event_dispatches_variants(aggregator, make_interval):
    interval = make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00")

    aggregator.apply_event(IntervalAdded(interval))
    assert aggregator.count("2024-03-10") == 1

    aggregator.apply_event(IntervalRemoved(interval))
    assert aggregator.count("2024-03-10") == 0


def test_apply_event_rejects_unknown_event(aggregator):
    with pytest.raises(TypeError):
        aggregator.apply_event("add")


def test_reset_empties_all_buckets(aggregator, make_interval):
    aggregator.apply_batch(added=[make_interval("2024-03-10T08:00:00", "2024-03-10T09:00:00")])

    aggregator.reset()

    assert aggregator.counts() == {}
    assert aggregator.count("2024-03-10") is None
