#!/usr/bin/env python3
"""
P/L calendar.

Shows a month as a 6-week grid with daily and weekly P/L.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
from datetime import date
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from alphaone.core.config import Config
from alphaone.core.utils import format_money
from alphaone.review.calendar import WEEKDAY_LABELS, build_calendar, navigate_month
from alphaone.storage import open_store

app = typer.Typer(help="P/L calendar")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@app.command()
def main(
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Year (defaults to current)"),
    month: Optional[int] = typer.Option(None, "--month", "-m", help="Month 1-12 (defaults to current)"),
    offset: int = typer.Option(0, "--offset", "-o", help="Months to move from the selected month"),
):
    """
    Show the P/L calendar for a month.
    """
    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    today = date.today()
    year, month = navigate_month(year or today.year, month or today.month, offset)

    try:
        view = build_calendar(ledger.trades, year, month)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    stats = view.month_stats
    colour = "green" if stats.net_pl >= 0 else "red"
    console.print(f"\n[bold]P/L Calendar - {view.title}[/bold]")
    console.print(
        f"Monthly P/L: [{colour}]{format_money(stats.net_pl, signed=True)}[/{colour}]  "
        f"Win Rate: {stats.win_rate:.0f}%  Trades: {stats.trade_count}\n"
    )

    table = Table(show_lines=True)
    for label in WEEKDAY_LABELS:
        table.add_column(label, justify="center")
    table.add_column("WEEK", justify="right")

    for week in view.weeks:
        cells = []
        for day in week.days:
            style = "" if day.in_month else "dim"
            text = f"[{style}]{day.day.day}[/{style}]" if style else str(day.day.day)
            if day.trade_count:
                day_colour = "green" if day.pl > 0 else "red" if day.pl < 0 else "white"
                text += f"\n[{day_colour}]{day.pl:+.2f}[/{day_colour}]\n{day.trade_count} trade(s)"
            cells.append(text)

        week_colour = "green" if week.pl >= 0 else "red"
        cells.append(f"[{week_colour}]{week.pl:+.2f}[/{week_colour}]\n{week.trade_count} trade(s)")
        table.add_row(*cells)

    console.print(table)


if __name__ == "__main__":
    app()
