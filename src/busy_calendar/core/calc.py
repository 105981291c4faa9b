"""Calendar helpers: day identifiers, week boundaries and month spans."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from .models import Timespan

DAYS_IN_WEEK = 7

PAST = "past"
PRESENT = "present"
FUTURE = "future"
OTHER_MONTH = "other-month"


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_id(value: date | datetime) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for the civil day of ``value``."""
    return _as_date(value).isoformat()


def parse_day_id(value: str) -> date:
    return date.fromisoformat(value)


def days_in_week() -> int:
    return DAYS_IN_WEEK


def days_between(start: date | datetime, end: date | datetime) -> list[date]:
    """Every civil day from ``start`` to ``end`` inclusive, oldest first."""
    first = _as_date(start)
    last = _as_date(end)
    if first > last:
        return []
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def weekday_order(starts_on_monday: bool = False) -> list[int]:
    """Header column order as ``date.weekday()`` numbers (Monday is 0)."""
    if starts_on_monday:
        return list(range(DAYS_IN_WEEK))
    return [6, 0, 1, 2, 3, 4, 5]


def start_of_week(value: date | datetime, starts_on_monday: bool = False) -> date:
    day = _as_date(value)
    first = weekday_order(starts_on_monday)[0]
    return day - timedelta(days=(day.weekday() - first) % DAYS_IN_WEEK)


def end_of_week(value: date | datetime, starts_on_monday: bool = False) -> date:
    return start_of_week(value, starts_on_monday) + timedelta(days=DAYS_IN_WEEK - 1)


def first_of_month(value: date | datetime) -> date:
    return _as_date(value).replace(day=1)


def last_of_month(value: date | datetime) -> date:
    first = first_of_month(value)
    following = (first + timedelta(days=32)).replace(day=1)
    return following - timedelta(days=1)


def add_months(value: date | datetime, months: int) -> date:
    first = first_of_month(value)
    index = first.year * 12 + (first.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def span_of_month(value: date | datetime, starts_on_monday: bool = False) -> Timespan:
    """Whole weeks covering the month of ``value``."""
    return Timespan(
        start=start_of_week(first_of_month(value), starts_on_monday),
        end=end_of_week(last_of_month(value), starts_on_monday),
    )


def relative_state(day: date | datetime, month: date | datetime, today: date | None = None) -> str:
    """Style state of a grid cell, e.g. ``"past other-month"``."""
    current = _as_date(day)
    reference = today or date.today()
    if current < reference:
        state = PAST
    elif current > reference:
        state = FUTURE
    else:
        state = PRESENT

    shown = _as_date(month)
    if (current.year, current.month) != (shown.year, shown.month):
        state = f"{state} {OTHER_MONTH}"
    return state
