"""
P/L calendar.

Buckets trades into a fixed 6-week grid for one month.

The grid starts on the Sunday on or before the 1st and always spans 42
days. Spillover days from neighbouring months count toward weekly totals
but not toward the month summary.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Tuple

from alphaone.core.models import Trade
from alphaone.core.utils import trade_day

logger = logging.getLogger(__name__)

WEEKS_IN_GRID = 6
DAYS_IN_GRID = WEEKS_IN_GRID * 7
WEEKDAY_LABELS = ["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]


@dataclass
class DayStats:
    """One grid cell."""

    day: date
    in_month: bool
    pl: float = 0.0
    trade_count: int = 0
    win_count: int = 0


@dataclass
class WeekStats:
    """One grid row, spillover days included."""

    index: int
    pl: float = 0.0
    trade_count: int = 0
    win_count: int = 0
    days: List[DayStats] = field(default_factory=list)


@dataclass
class MonthStats:
    """Header summary, restricted to days inside the month."""

    year: int
    month: int
    net_pl: float = 0.0
    win_rate: float = 0.0
    trade_count: int = 0
    win_count: int = 0


@dataclass
class CalendarView:
    year: int
    month: int
    days: List[DayStats]
    weeks: List[WeekStats]
    month_stats: MonthStats

    @property
    def title(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")


def grid_start(year: int, month: int) -> date:
    """The Sunday on or before the 1st of the month."""
    first = date(year, month, 1)
    # weekday(): Monday=0 ... Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def _trades_by_day(trades: List[Trade]) -> Dict[date, List[Trade]]:
    buckets = defaultdict(list)

    for trade in trades:
        day = trade_day(trade.date)
        if day is None:
            logger.warning(f"Trade {trade.id} has unparseable date: {trade.date!r}")
            continue
        buckets[day].append(trade)

    return buckets


def build_calendar(trades: List[Trade], year: int, month: int) -> CalendarView:
    """
    Build the 42-day calendar view for a month.

    Day matching ignores time of day.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    buckets = _trades_by_day(trades)
    start = grid_start(year, month)

    days = []
    for offset in range(DAYS_IN_GRID):
        day = start + timedelta(days=offset)
        day_trades = buckets.get(day, [])
        days.append(DayStats(
            day=day,
            in_month=(day.year == year and day.month == month),
            pl=sum(t.pl for t in day_trades),
            trade_count=len(day_trades),
            win_count=sum(1 for t in day_trades if t.pl > 0),
        ))

    weeks = []
    for index in range(WEEKS_IN_GRID):
        row = days[index * 7:(index + 1) * 7]
        weeks.append(WeekStats(
            index=index,
            pl=sum(d.pl for d in row),
            trade_count=sum(d.trade_count for d in row),
            win_count=sum(d.win_count for d in row),
            days=row,
        ))

    return CalendarView(
        year=year,
        month=month,
        days=days,
        weeks=weeks,
        month_stats=calculate_month_stats(trades, year, month),
    )


def calculate_month_stats(trades: List[Trade], year: int, month: int) -> MonthStats:
    """Net P/L, win rate and trade count for trades dated inside the month."""
    month_trades = []

    for trade in trades:
        day = trade_day(trade.date)
        if day is not None and day.year == year and day.month == month:
            month_trades.append(trade)

    wins = sum(1 for t in month_trades if t.pl > 0)
    count = len(month_trades)

    return MonthStats(
        year=year,
        month=month,
        net_pl=sum(t.pl for t in month_trades),
        win_rate=(wins / count * 100) if count > 0 else 0.0,
        trade_count=count,
        win_count=wins,
    )


def navigate_month(year: int, month: int, direction: int) -> Tuple[int, int]:
    """
    Move `direction` months forward (negative for back).

    Examples:
        (2024, 1, -1) -> (2023, 12)
        (2024, 12, 1) -> (2025, 1)
    """
    total = year * 12 + (month - 1) + direction
    return total // 12, total % 12 + 1
