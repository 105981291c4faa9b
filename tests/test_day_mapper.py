"""Tests for mapping busy intervals onto calendar days."""

from datetime import datetime
from zoneinfo import ZoneInfo

from busy_calendar.core.day_mapper import days_touched, normalized_end
from busy_calendar.core.models import BusyInterval


class TestDaysTouched:
    def test_same_day_interval_touches_one_day(self, make_interval):
        interval = make_interval("2024-03-10T08:00:00", "2024-03-10T10:00:00")

        assert days_touched(interval) == ["2024-03-10"]

    def test_full_day_ending_at_midnight_stays_on_its_day(self, make_interval):
        interval = make_interval("2024-03-10T00:00:00", "2024-03-11T00:00:00")

        assert days_touched(interval) == ["2024-03-10"]

    def test_zero_length_at_midnight_keeps_its_day(self, make_interval):
        interval = make_interval("2024-03-10T00:00:00", "2024-03-10T00:00:00")

        assert days_touched(interval) == ["2024-03-10"]

    def test_zero_length_mid_day(self, make_interval):
        interval = make_interval("2024-03-10T13:30:00", "2024-03-10T13:30:00")

        assert days_touched(interval) == ["2024-03-10"]

    def test_multi_day_interval_is_chronological_and_unique(self, make_interval):
        interval = make_interval("2024-02-28T22:00:00", "2024-03-02T01:00:00")

        assert days_touched(interval) == ["2024-02-28", "2024-02-29", "2024-03-01", "2024-03-02"]

    def test_two_full_days(self, make_interval):
        interval = make_interval("2024-03-09T00:00:00", "2024-03-11T00:00:00")

        assert days_touched(interval) == ["2024-03-09", "2024-03-10"]

    def test_end_one_second_after_midnight_counts_next_day(self, make_interval):
        interval = make_interval("2024-03-10T20:00:00", "2024-03-11T00:00:01")

        assert days_touched(interval) == ["2024-03-10", "2024-03-11"]

    def test_daylight_saving_transition_buckets_by_civil_date(self):
        zone = ZoneInfo("America/New_York")
        interval = BusyInterval(
            start=datetime(2024, 3, 9, 22, 0, tzinfo=zone),
            end=datetime(2024, 3, 10, 5, 0, tzinfo=zone),
        )

        assert days_touched(interval) == ["2024-03-09", "2024-03-10"]


class TestNormalizedEnd:
    def test_midnight_end_moves_back_one_second(self, make_interval):
        interval = make_interval("2024-03-10T09:00:00", "2024-03-11T00:00:00")

        assert normalized_end(interval) == datetime(2024, 3, 10, 23, 59, 59)

    def test_non_midnight_end_is_untouched(self, make_interval):
        interval = make_interval("2024-03-10T09:00:00", "2024-03-10T17:15:00")

        assert normalized_end(interval) == interval.end
