"""
Tests for report window boundaries.
"""

from datetime import datetime, timedelta, timezone

import pytest

from modules.sellers.services.time_windows import (
    compute_time_windows,
    iter_months,
    shift_month,
    to_naive_utc,
)


class TestComputeTimeWindows:
    """Window derivation from a single reference timestamp"""

    def test_mid_week_thursday(self):
        windows = compute_time_windows(datetime(2026, 10, 22, 15, 0))

        assert windows.now == datetime(2026, 10, 22, 15, 0)
        assert windows.start_of_today == datetime(2026, 10, 22)
        assert windows.start_of_week == datetime(2026, 10, 18)
        assert windows.start_of_month == datetime(2026, 10, 1)
        assert windows.start_of_trend_window == datetime(2025, 11, 1)

    def test_sunday_starts_its_own_week(self):
        windows = compute_time_windows(datetime(2026, 10, 18, 0, 30))

        assert windows.start_of_week == datetime(2026, 10, 18)

    def test_saturday_belongs_to_week_started_previous_sunday(self):
        windows = compute_time_windows(datetime(2026, 10, 24, 23, 59))

        assert windows.start_of_week == datetime(2026, 10, 18)

    def test_week_can_cross_month_boundary(self):
        windows = compute_time_windows(datetime(2026, 10, 2, 12, 0))

        assert windows.start_of_week == datetime(2026, 9, 27)
        assert windows.start_of_month == datetime(2026, 10, 1)

    def test_monday_week_start(self):
        windows = compute_time_windows(datetime(2026, 10, 22, 15, 0), week_start=0)

        assert windows.start_of_week == datetime(2026, 10, 19)

    def test_trend_window_in_january_reaches_into_previous_year(self):
        windows = compute_time_windows(datetime(2027, 1, 5))

        assert windows.start_of_trend_window == datetime(2026, 2, 1)

    def test_trend_window_in_december_starts_in_january(self):
        windows = compute_time_windows(datetime(2026, 12, 31, 23, 0))

        assert windows.start_of_trend_window == datetime(2026, 1, 1)

    def test_boundaries_never_exceed_now(self):
        now = datetime(2026, 3, 1, 0, 0)
        windows = compute_time_windows(now)

        assert windows.start_of_trend_window <= windows.start_of_month
        assert windows.start_of_week <= windows.start_of_today <= windows.now
        assert windows.start_of_month <= windows.now

    def test_aware_now_is_converted_to_naive_utc(self):
        aware = datetime(2026, 10, 22, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        windows = compute_time_windows(aware)

        assert windows.now == datetime(2026, 10, 21, 22, 0)
        assert windows.now.tzinfo is None
        assert windows.start_of_today == datetime(2026, 10, 21)

    @pytest.mark.parametrize("week_start", [-1, 7])
    def test_rejects_invalid_week_start(self, week_start):
        with pytest.raises(ValueError):
            compute_time_windows(datetime(2026, 10, 22), week_start=week_start)


class TestMonthHelpers:
    def test_shift_month_across_years(self):
        assert shift_month(2026, 1, -1) == (2025, 12)
        assert shift_month(2026, 12, 1) == (2027, 1)
        assert shift_month(2026, 10, -11) == (2025, 11)

    def test_iter_months_is_inclusive(self):
        months = list(iter_months(datetime(2025, 11, 1), datetime(2026, 10, 22)))

        assert len(months) == 12
        assert months[0] == (2025, 11)
        assert months[-1] == (2026, 10)

    def test_to_naive_utc_leaves_naive_values_alone(self):
        value = datetime(2026, 10, 22, 15, 0)

        assert to_naive_utc(value) is value
