"""
Derived views for AlphaOne.

KPIs, the equity curve and the P/L calendar. All pure, all recomputed
from a ledger snapshot on every call.
"""

from alphaone.review.kpi import KPISnapshot, calculate_kpis, calculate_discipline
from alphaone.review.equity import EquityPoint, build_equity_curve
from alphaone.review.calendar import CalendarView, build_calendar, navigate_month

__all__ = [
    "KPISnapshot",
    "calculate_kpis",
    "calculate_discipline",
    "EquityPoint",
    "build_equity_curve",
    "CalendarView",
    "build_calendar",
    "navigate_month",
]
