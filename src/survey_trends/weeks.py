"""Month-relative week bucketing.

Weeks are counted inside each calendar month, starting on Sunday: the days up
to the first Saturday of a month form week 1 (which may be shorter than seven
days), and the last week is clipped at the end of the month. This is not ISO
week numbering; two dates in different months never share a week.

Labels produced here (``"2024년 3월 2주차"``) are the grouping keys of the
weekly pipeline and the x-axis values of the results dashboard.
"""
from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Generic, Iterable, NamedTuple, TypeVar

import pandas as pd

DEFAULT_TIMEZONE = "Asia/Seoul"

T = TypeVar("T")


class WeekKey(NamedTuple):
    """(year, month, month-relative week) triple identifying a week bucket."""
    year: int
    month: int
    week: int


@dataclass(frozen=True)
class WeekSpan:
    """A month-relative week with its label and inclusive date bounds."""
    key: WeekKey
    label: str
    start: date
    end: date


@dataclass
class WeekGroup(Generic[T]):
    """Items collected under one week label by `group_by_week`."""
    label: str
    start: date
    items: list[T] = field(default_factory=list)


def _as_date(value: date | datetime) -> date:
    # pd.Timestamp subclasses datetime; .date() keeps the wall-clock date of its tz
    if isinstance(value, datetime):
        return value.date()
    return value


def _sunday_weekday(d: date) -> int:
    """Return the weekday of `d` counting Sunday as 0."""
    return (d.weekday() + 1) % 7


def week_of_month(value: date | datetime) -> WeekKey:
    """Return the (year, month, week) triple for a date.

    ``week = ceil((day_of_month + weekday_of_first_day) / 7)`` with Sunday = 0.
    """
    d = _as_date(value)
    offset = _sunday_weekday(d.replace(day=1))
    week = math.ceil((d.day + offset) / 7)
    return WeekKey(year=d.year, month=d.month, week=week)


def format_week_label(value: date | datetime) -> str:
    """Format the full week label, e.g. ``"2024년 3월 2주차"``."""
    key = week_of_month(value)
    return f"{key.year}년 {key.month}월 {key.week}주차"


def format_short_week_label(value: date | datetime) -> str:
    """Format the label without the year, e.g. ``"3월 2주차"``."""
    key = week_of_month(value)
    return f"{key.month}월 {key.week}주차"


def format_compact_week_label(value: date | datetime) -> str:
    """Format the label with a two-digit year, e.g. ``"24년 3월 2주차"``."""
    key = week_of_month(value)
    return f"{key.year % 100:02d}년 {key.month}월 {key.week}주차"


def week_start(value: date | datetime) -> date:
    """Return the first day of the month-relative week containing `value`."""
    d = _as_date(value)
    sunday = d - timedelta(days=_sunday_weekday(d))
    return max(sunday, d.replace(day=1))


def week_end(value: date | datetime) -> date:
    """Return the last day of the month-relative week containing `value`."""
    d = _as_date(value)
    saturday = d + timedelta(days=6 - _sunday_weekday(d))
    last_day = d.replace(day=calendar.monthrange(d.year, d.month)[1])
    return min(saturday, last_day)


def week_span(value: date | datetime) -> WeekSpan:
    """Return the `WeekSpan` containing `value`."""
    return WeekSpan(
        key=week_of_month(value),
        label=format_week_label(value),
        start=week_start(value),
        end=week_end(value),
    )


def is_same_week(a: date | datetime, b: date | datetime) -> bool:
    """Return True when both dates fall into the same month-relative week."""
    return week_of_month(a) == week_of_month(b)


def weeks_in_range(start: date | datetime, end: date | datetime) -> list[WeekSpan]:
    """List every month-relative week touched by ``[start, end]`` in order.

    A calendar week that straddles a month boundary yields two spans, one per
    month. Returns an empty list when `end` is before `start`.
    """
    current = _as_date(start)
    last = _as_date(end)
    spans: list[WeekSpan] = []
    while current <= last:
        span = week_span(current)
        spans.append(span)
        current = span.end + timedelta(days=1)
    return spans


def parse_timestamp(value: Any, tz: str = DEFAULT_TIMEZONE) -> pd.Timestamp | None:
    """Parse a submission timestamp into a tz-aware Timestamp in `tz`.

    Naive strings are read as wall-clock time in `tz`. Naive `datetime`
    objects are BSON dates, which the store keeps in UTC. Aware values are
    converted into `tz`. Returns None instead of raising for null, empty or
    unparseable input so callers can skip the record.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None

    if ts.tzinfo is None and isinstance(value, datetime):
        return ts.tz_localize("UTC").tz_convert(tz)
    if ts.tzinfo is None:
        return ts.tz_localize(tz, ambiguous=False, nonexistent="shift_forward")
    return ts.tz_convert(tz)


def current_week(tz: str = DEFAULT_TIMEZONE) -> WeekSpan:
    """Return the week containing "now" in `tz`."""
    return week_span(pd.Timestamp.now(tz=tz))


def group_by_week(
    items: Iterable[T],
    date_of: Callable[[T], Any],
    tz: str = DEFAULT_TIMEZONE,
) -> dict[str, WeekGroup[T]]:
    """Bucket arbitrary items by week label, in encounter order.

    Items whose extracted date does not parse are skipped.
    """
    grouped: dict[str, WeekGroup[T]] = {}
    for item in items:
        ts = parse_timestamp(date_of(item), tz)
        if ts is None:
            continue
        label = format_week_label(ts)
        if label not in grouped:
            grouped[label] = WeekGroup(label=label, start=week_start(ts))
        grouped[label].items.append(item)
    return grouped
