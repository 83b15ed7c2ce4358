"""
Plain-text reports.

Dashboard and calendar summaries for the console and for export.
"""

import logging
from datetime import datetime
from typing import Optional

from alphaone.core.models import Ledger
from alphaone.core.utils import format_money
from alphaone.guardrails.checklist import DEFAULT_CHECKLIST
from alphaone.review.calendar import WEEKDAY_LABELS, CalendarView
from alphaone.review.equity import build_equity_curve
from alphaone.review.kpi import calculate_discipline, calculate_kpis, win_loss_breakdown

logger = logging.getLogger(__name__)


def format_dashboard(ledger: Ledger, equity_points: int = 5) -> str:
    """
    Format dashboard KPIs as plain text.
    """
    stats = calculate_kpis(ledger)

    lines = [
        "AlphaOne - Dashboard",
        "",
        f"Balance: {format_money(stats.balance)}",
        f"Net P/L: {format_money(stats.net_pl, signed=True)}",
        f"Win rate: {stats.win_rate:.1f}%",
        f"Profit factor: {stats.profit_factor:.2f}",
        f"Exp. value: {format_money(stats.expected_value, signed=True)}",
        "",
    ]

    if stats.total_trades == 0:
        lines.extend([
            "No trades logged yet.",
        ])
        return "\n".join(lines)

    breakdown = win_loss_breakdown(ledger.trades)
    lines.extend([
        f"Trades: {stats.total_trades} ({breakdown['Wins']} wins / {breakdown['Losses']} losses)",
        f"Avg win: {format_money(stats.avg_win)}",
        f"Avg loss: {format_money(stats.avg_loss)}",
        "",
    ])

    discipline = calculate_discipline(ledger.trades)
    if discipline.avg_score is not None:
        labels = {item["id"]: item["text"] for item in DEFAULT_CHECKLIST}
        lines.extend([
            "Discipline:",
            f"Avg checklist score: {discipline.avg_score:.0f} ({discipline.scored_trades} scored trades)",
        ])
        for item_id, count in sorted(discipline.item_counts.items(), key=lambda kv: -kv[1]):
            lines.append(f"  {labels.get(item_id, item_id)}: {count}")
        lines.append("")

    curve = build_equity_curve(ledger)
    lines.append("Equity (latest):")
    for point in curve[-equity_points:]:
        lines.append(f"  {point.timestamp:%Y-%m-%d %H:%M}  {format_money(point.value)}")

    return "\n".join(lines)


def format_calendar(view: CalendarView) -> str:
    """
    Format a calendar view as a text grid with weekly totals.

    Spillover days are shown in brackets.
    """
    stats = view.month_stats

    lines = [
        f"P/L Calendar - {view.title}",
        f"Monthly P/L: {format_money(stats.net_pl, signed=True)} | "
        f"Win rate: {stats.win_rate:.0f}% | Trades: {stats.trade_count}",
        "",
        " ".join(f"{label:>10}" for label in WEEKDAY_LABELS) + f"{'WEEK':>12}",
    ]

    for week in view.weeks:
        cells = []
        for day in week.days:
            label = f"{day.day.day}" if day.in_month else f"({day.day.day})"
            if day.trade_count:
                label += f" {day.pl:+.0f}"
            cells.append(f"{label:>10}")
        lines.append(" ".join(cells) + f"{week.pl:>+12.2f}")

    return "\n".join(lines)


def export_dashboard(ledger: Ledger, filepath: Optional[str] = None) -> str:
    """
    Export dashboard summary to file.

    Returns file path.
    """
    if not filepath:
        filepath = f"data/dashboard_{datetime.now().strftime('%Y%m%d')}.txt"

    with open(filepath, "w") as f:
        f.write(format_dashboard(ledger))

    logger.info(f"Dashboard exported to {filepath}")
    return filepath
