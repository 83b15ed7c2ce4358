#!/usr/bin/env python3
"""
Export data to CSV.

Exports trades, transactions or the equity curve for external analysis.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import csv
import logging
import typer
from datetime import datetime
from dotenv import load_dotenv
from rich.console import Console

from alphaone.core.config import Config
from alphaone.review.equity import build_equity_curve
from alphaone.review.kpi import sorted_trades
from alphaone.storage import open_store

app = typer.Typer(help="Export data to CSV")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _default_output(name: str) -> str:
    return f"data/{name}_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"


@app.command()
def trades(
    output: str = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Export all trades to CSV.
    """
    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    output = output or _default_output("trades")
    rows = sorted_trades(ledger.trades, newest_first=False)

    with open(output, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "id",
            "date",
            "pair",
            "direction",
            "strategy",
            "risk",
            "pl",
            "score",
            "checklist",
            "notes",
        ])

        for trade in rows:
            writer.writerow([
                trade.id,
                trade.date,
                trade.pair,
                trade.direction.value,
                trade.strategy,
                trade.risk,
                trade.pl,
                "" if trade.score is None else trade.score,
                ";".join(trade.checklist or []),
                trade.notes,
            ])

    console.print(f"[green]Exported {len(rows)} trades to {output}[/green]")


@app.command()
def transactions(
    output: str = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Export all deposits and withdrawals to CSV.
    """
    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    output = output or _default_output("transactions")

    with open(output, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "date", "type", "amount"])

        for transaction in sorted(ledger.accounting, key=lambda a: a.date):
            writer.writerow([
                transaction.id,
                transaction.date,
                transaction.type.value,
                transaction.amount,
            ])

    console.print(f"[green]Exported {len(ledger.accounting)} transactions to {output}[/green]")


@app.command()
def equity(
    output: str = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Export the equity curve to CSV.
    """
    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    output = output or _default_output("equity")
    curve = build_equity_curve(ledger)

    with open(output, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["timestamp", "equity"])

        for point in curve:
            writer.writerow([point.timestamp.isoformat(), f"{point.value:.2f}"])

    console.print(f"[green]Exported {len(curve)} equity points to {output}[/green]")


if __name__ == "__main__":
    app()
