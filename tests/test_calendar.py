"""
Unit tests for the P/L calendar.

Tests the 42-day grid, spillover rules and month navigation.
"""

import pytest
import sys
from datetime import date
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from alphaone.core.models import Direction, Trade
from alphaone.review.calendar import (
    build_calendar,
    calculate_month_stats,
    grid_start,
    navigate_month,
)


def trade(pl: float, date_str: str) -> Trade:
    return Trade(pair="EURUSD", direction=Direction.LONG, date=date_str, pl=pl)


class TestGridShape:
    """Test grid anchoring and size."""

    @pytest.mark.parametrize("year,month", [
        (2024, 2),   # leap February
        (2023, 2),   # 28 days
        (2021, 2),   # February starting on Monday
        (2024, 4),   # 30 days
        (2024, 3),   # 31 days
        (2023, 9),   # starts on Friday, needs 6 rows
        (2026, 2),   # starts on Sunday
    ])
    def test_always_42_days_and_6_weeks(self, year, month):
        view = build_calendar([], year, month)

        assert len(view.days) == 42
        assert len(view.weeks) == 6
        assert all(len(w.days) == 7 for w in view.weeks)

    def test_starts_on_sunday_before_first(self):
        """March 2024 begins on a Friday; grid starts Sunday Feb 25."""
        view = build_calendar([], 2024, 3)

        assert view.days[0].day == date(2024, 2, 25)
        assert view.days[0].day.weekday() == 6
        assert view.days[-1].day == date(2024, 4, 6)

    def test_month_starting_on_sunday(self):
        """September 2024 begins on a Sunday; no leading spillover."""
        assert grid_start(2024, 9) == date(2024, 9, 1)

    def test_consecutive_days(self):
        view = build_calendar([], 2024, 1)
        days = [d.day for d in view.days]

        assert all((b - a).days == 1 for a, b in zip(days, days[1:]))

    def test_in_month_flags(self):
        view = build_calendar([], 2024, 3)

        in_month = [d for d in view.days if d.in_month]
        assert len(in_month) == 31
        assert not view.days[0].in_month

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            build_calendar([], 2024, 13)


class TestDayBuckets:
    """Test per-day aggregation."""

    def test_time_of_day_ignored(self):
        trades = [
            trade(100, "2024-03-05T00:01"),
            trade(-30, "2024-03-05T23:59"),
            trade(0, "2024-03-05"),
        ]

        view = build_calendar(trades, 2024, 3)
        cell = next(d for d in view.days if d.day == date(2024, 3, 5))

        assert cell.pl == 70
        assert cell.trade_count == 3
        assert cell.win_count == 1

    def test_empty_days_are_zero(self):
        view = build_calendar([trade(10, "2024-03-05")], 2024, 3)
        cell = next(d for d in view.days if d.day == date(2024, 3, 6))

        assert cell.pl == 0
        assert cell.trade_count == 0

    def test_unparseable_dates_ignored(self):
        view = build_calendar([trade(10, "garbage")], 2024, 3)

        assert sum(d.trade_count for d in view.days) == 0


class TestSpillover:
    """Weekly totals include spillover days, the month summary does not."""

    def test_week_includes_previous_month_days(self):
        trades = [
            trade(40, "2024-02-26T10:00"),   # spillover, first row
            trade(60, "2024-03-01T10:00"),   # in month, first row
        ]

        view = build_calendar(trades, 2024, 3)

        assert view.weeks[0].pl == 100
        assert view.weeks[0].trade_count == 2
        assert view.month_stats.net_pl == 60
        assert view.month_stats.trade_count == 1

    def test_week_includes_next_month_days(self):
        view = build_calendar([trade(-25, "2024-04-02")], 2024, 3)

        assert view.weeks[5].pl == -25
        assert view.month_stats.trade_count == 0

    def test_trades_outside_grid_ignored(self):
        view = build_calendar([trade(500, "2024-06-15")], 2024, 3)

        assert sum(w.pl for w in view.weeks) == 0


class TestMonthStats:
    """Test the month header summary."""

    def test_win_rate_counts_zero_as_loss(self):
        trades = [trade(100, "2024-03-01"), trade(0, "2024-03-02"), trade(-50, "2024-03-03"),
                  trade(20, "2024-03-04")]

        stats = calculate_month_stats(trades, 2024, 3)

        assert stats.win_rate == 50
        assert stats.net_pl == 70
        assert stats.trade_count == 4

    def test_empty_month(self):
        stats = calculate_month_stats([], 2024, 3)

        assert stats.win_rate == 0
        assert stats.trade_count == 0

    def test_same_month_other_year_excluded(self):
        stats = calculate_month_stats([trade(10, "2023-03-10")], 2024, 3)

        assert stats.trade_count == 0


class TestNavigation:
    """Test month navigation."""

    def test_back_from_january(self):
        assert navigate_month(2024, 1, -1) == (2023, 12)

    def test_forward_from_december(self):
        assert navigate_month(2024, 12, 1) == (2025, 1)

    def test_within_year(self):
        assert navigate_month(2024, 5, 1) == (2024, 6)
        assert navigate_month(2024, 5, -1) == (2024, 4)

    @pytest.mark.parametrize("month", range(1, 13))
    def test_round_trip_twelve_months(self, month):
        year, m = 2024, month
        for _ in range(12):
            year, m = navigate_month(year, m, 1)
        assert (year, m) == (2025, month)
        for _ in range(12):
            year, m = navigate_month(year, m, -1)
        assert (year, m) == (2024, month)

    def test_large_jumps(self):
        assert navigate_month(2024, 3, -27) == (2021, 12)
