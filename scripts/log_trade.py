#!/usr/bin/env python3
"""
Log, edit and delete trades.

Every new trade goes through the pre-trade checklist.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import base64
import logging
from datetime import datetime
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from alphaone.core.config import Config
from alphaone.core.models import Direction, Trade
from alphaone.core.utils import format_money
from alphaone.guardrails.checklist import get_checklist, quality_score, run_all_guardrails
from alphaone.review.kpi import sorted_trades
from alphaone.storage import open_store

app = typer.Typer(help="Log a trade manually")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _read_image(path: Optional[Path]) -> Optional[str]:
    """Chart screenshot as a base64 data URL."""
    if path is None:
        return None

    suffix = path.suffix.lstrip(".").lower() or "png"
    encoded = base64.b64encode(path.read_bytes()).decode()
    return f"data:image/{suffix};base64,{encoded}"


def _parse_direction(value: str) -> Direction:
    try:
        return Direction(value.capitalize())
    except ValueError:
        console.print(f"[red]Direction must be Long or Short, got {value}[/red]")
        raise typer.Exit(1)


@app.command()
def main(
    pair: str = typer.Option(..., "--pair", "-p", help="Pair (e.g., EURUSD)"),
    direction: str = typer.Option(..., "--direction", "-d", help="Long or Short"),
    pl: float = typer.Option(..., "--pl", help="Realized profit/loss"),
    risk: float = typer.Option(0.0, "--risk", "-r", help="Amount risked"),
    strategy: str = typer.Option("", "--strategy", "-s", help="Strategy tag"),
    date: str = typer.Option(None, "--date", help="Trade time (YYYY-MM-DDTHH:MM), defaults to now"),
    notes: str = typer.Option("", "--notes", "-n", help="Trade notes"),
    image: Optional[Path] = typer.Option(None, "--image", "-i", help="Chart screenshot"),
    suggest_tag: bool = typer.Option(False, "--suggest-tag", help="Ask the AI coach for a strategy tag"),
):
    """
    Log a new trade with the pre-trade checklist.

    Prompts for each checklist item.
    """
    load_dotenv()
    config = Config.from_env()
    store = open_store(config)

    # Checklist
    console.print("\n[yellow]Pre-Trade Checklist[/yellow]\n")

    items = get_checklist(config)
    checked = [
        item["id"] for item in items
        if Confirm.ask(item["text"], console=console, default=False)
    ]
    score = quality_score(checked, items)

    if suggest_tag and not strategy:
        from alphaone.coach.gemini import GeminiCoach

        strategy = GeminiCoach(config).suggest_strategy_tag(notes)
        console.print(f"Suggested strategy tag: [cyan]{strategy}[/cyan]")

    trade = Trade(
        pair=pair.upper(),
        direction=_parse_direction(direction),
        date=date or datetime.now().strftime("%Y-%m-%dT%H:%M"),
        strategy=strategy,
        risk=risk,
        pl=pl,
        notes=notes,
        image=_read_image(image),
        score=score,
        checklist=checked,
    )

    # Guardrails warn, they never block
    warnings = run_all_guardrails(config, trade)
    if warnings:
        console.print("\n[bold]Guardrail Warnings:[/bold]")
        for warning in warnings:
            console.print(f"  [yellow]{warning}[/yellow]")

    try:
        trade = store.add_trade(trade)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Trade {trade.id} logged (score {score}).[/green]\n")


@app.command()
def edit(
    trade_id: str = typer.Argument(..., help="Trade ID"),
    pl: Optional[float] = typer.Option(None, "--pl", help="Realized profit/loss"),
    risk: Optional[float] = typer.Option(None, "--risk", "-r", help="Amount risked"),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="Strategy tag"),
    date: Optional[str] = typer.Option(None, "--date", help="Trade time"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Trade notes"),
):
    """
    Edit fields of an existing trade.
    """
    load_dotenv()
    config = Config.from_env()
    store = open_store(config)

    trade = store.get_trade(trade_id)
    if not trade:
        console.print(f"[red]Trade {trade_id} not found.[/red]")
        raise typer.Exit(1)

    if pl is not None:
        trade.pl = pl
    if risk is not None:
        trade.risk = risk
    if strategy is not None:
        trade.strategy = strategy
    if date is not None:
        trade.date = date
    if notes is not None:
        trade.notes = notes

    try:
        updated = store.update_trade(trade)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not updated:
        console.print(f"[red]Trade {trade_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Trade {trade_id} updated.[/green]\n")


@app.command()
def delete(
    trade_id: str = typer.Argument(..., help="Trade ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """
    Delete a trade.
    """
    load_dotenv()
    config = Config.from_env()
    store = open_store(config)

    if not yes and not Confirm.ask("Are you sure you want to delete this trade?", console=console):
        raise typer.Exit(0)

    if not store.delete_trade(trade_id):
        console.print(f"[yellow]Trade {trade_id} not found.[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]Trade {trade_id} deleted.[/green]")


@app.command("list")
def list_trades(
    limit: int = typer.Option(20, "--limit", "-l", help="Number of trades to show"),
):
    """
    Show the journal, newest first.
    """
    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    table = Table(title="Trade Journal")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Pair")
    table.add_column("Dir")
    table.add_column("Strategy")
    table.add_column("Risk", justify="right")
    table.add_column("P/L", justify="right")
    table.add_column("Score", justify="right")

    for trade in sorted_trades(ledger.trades)[:limit]:
        colour = "green" if trade.pl > 0 else "red"
        table.add_row(
            trade.id,
            trade.date,
            trade.pair,
            trade.direction.value,
            trade.strategy,
            format_money(trade.risk),
            f"[{colour}]{format_money(trade.pl, signed=True)}[/{colour}]",
            "" if trade.score is None else str(trade.score),
        )

    console.print(table)


if __name__ == "__main__":
    app()
