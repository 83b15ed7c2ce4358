#!/usr/bin/env python3
"""
Dashboard script.

Shows balance, P/L, win rate, profit factor, expected value and the
latest equity points.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console

from alphaone.core.config import Config
from alphaone.review.summary import export_dashboard, format_dashboard
from alphaone.storage import open_store

app = typer.Typer(help="Trading dashboard")
console = Console()


@app.command()
def main(
    points: int = typer.Option(5, "--points", "-p", help="Equity points to show"),
    export: bool = typer.Option(False, "--export", "-e", help="Export to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """
    Show dashboard KPIs.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    if export:
        filepath = export_dashboard(ledger)
        console.print(f"[green]Dashboard exported to {filepath}[/green]")
    else:
        print(format_dashboard(ledger, equity_points=points))


if __name__ == "__main__":
    app()
