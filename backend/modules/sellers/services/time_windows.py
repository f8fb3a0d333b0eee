# backend/modules/sellers/services/time_windows.py

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator, Tuple

from ..constants import SUNDAY, TREND_WINDOW_MONTHS


@dataclass(frozen=True)
class TimeWindows:
    """Window boundaries derived from one captured ``now``"""

    now: datetime
    start_of_today: datetime
    start_of_week: datetime
    start_of_month: datetime
    start_of_trend_window: datetime


def utcnow() -> datetime:
    """The single place report code reads the wall clock."""
    return datetime.utcnow()


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def compute_time_windows(now: datetime, week_start: int = SUNDAY) -> TimeWindows:
    """
    Derive report windows from ``now``.

    Args:
        now: Reference timestamp, captured once per report
        week_start: First day of the week in ``date.weekday()`` numbering
            (0 = Monday ... 6 = Sunday)

    Returns:
        TimeWindows where the week starts on or before today, the month
        starts on the 1st and the trend window starts on the 1st of the
        month 11 months back, so it spans 12 calendar months including the
        current one.
    """
    if not 0 <= week_start <= 6:
        raise ValueError("week_start must be between 0 and 6")

    now = to_naive_utc(now)
    start_of_today = datetime(now.year, now.month, now.day)
    days_since_week_start = (start_of_today.weekday() - week_start) % 7
    start_of_week = start_of_today - timedelta(days=days_since_week_start)
    start_of_month = datetime(now.year, now.month, 1)

    trend_year, trend_month = shift_month(now.year, now.month, -(TREND_WINDOW_MONTHS - 1))
    start_of_trend_window = datetime(trend_year, trend_month, 1)

    return TimeWindows(
        now=now,
        start_of_today=start_of_today,
        start_of_week=start_of_week,
        start_of_month=start_of_month,
        start_of_trend_window=start_of_trend_window,
    )


def iter_months(start: datetime, end: datetime) -> Iterator[Tuple[int, int]]:
    """Yield (year, month) for every calendar month from ``start`` to ``end`` inclusive."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        year, month = shift_month(year, month, 1)


def to_naive_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC; convert aware values accordingly."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
