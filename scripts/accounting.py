#!/usr/bin/env python3
"""
Record deposits and withdrawals.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
from datetime import date as date_cls
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from alphaone.core.config import Config
from alphaone.core.models import Transaction, TransactionType
from alphaone.core.utils import format_money
from alphaone.storage import open_store

app = typer.Typer(help="Account deposits and withdrawals")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _parse_type(value: str) -> TransactionType:
    try:
        return TransactionType(value.capitalize())
    except ValueError:
        console.print(f"[red]Type must be Deposit or Withdrawal, got {value}[/red]")
        raise typer.Exit(1)


@app.command()
def add(
    tx_type: str = typer.Argument(..., help="Deposit or Withdrawal"),
    amount: float = typer.Argument(..., help="Amount"),
    date: str = typer.Option(None, "--date", help="Date (YYYY-MM-DD), defaults to today"),
):
    """
    Record a new transaction.
    """
    load_dotenv()
    config = Config.from_env()
    store = open_store(config)

    transaction = Transaction(
        type=_parse_type(tx_type),
        amount=amount,
        date=date or date_cls.today().isoformat(),
    )

    try:
        transaction = store.add_transaction(transaction)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]{transaction.type.value} of {format_money(amount)} recorded ({transaction.id}).[/green]")


@app.command()
def edit(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    tx_type: Optional[str] = typer.Option(None, "--type", "-t", help="Deposit or Withdrawal"),
    amount: Optional[float] = typer.Option(None, "--amount", "-a", help="Amount"),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
):
    """
    Edit an existing transaction.
    """
    load_dotenv()
    config = Config.from_env()
    store = open_store(config)

    transaction = store.get_transaction(transaction_id)
    if not transaction:
        console.print(f"[red]Transaction {transaction_id} not found.[/red]")
        raise typer.Exit(1)

    if tx_type is not None:
        transaction.type = _parse_type(tx_type)
    if amount is not None:
        transaction.amount = amount
    if date is not None:
        transaction.date = date

    try:
        updated = store.update_transaction(transaction)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not updated:
        console.print(f"[red]Transaction {transaction_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Transaction {transaction_id} updated.[/green]")


@app.command()
def delete(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """
    Delete a transaction.
    """
    load_dotenv()
    config = Config.from_env()
    store = open_store(config)

    if not yes and not Confirm.ask("Are you sure you want to delete this transaction?", console=console):
        raise typer.Exit(0)

    if not store.delete_transaction(transaction_id):
        console.print(f"[yellow]Transaction {transaction_id} not found.[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]Transaction {transaction_id} deleted.[/green]")


@app.command("list")
def list_transactions():
    """
    Show all transactions, newest first.
    """
    load_dotenv()
    config = Config.from_env()
    ledger = open_store(config).load()

    table = Table(title="Accounting")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Amount", justify="right")

    for transaction in sorted(ledger.accounting, key=lambda a: a.date, reverse=True):
        colour = "green" if transaction.type == TransactionType.DEPOSIT else "red"
        table.add_row(
            transaction.id,
            transaction.date,
            transaction.type.value,
            f"[{colour}]{format_money(transaction.signed_amount, signed=True)}[/{colour}]",
        )

    console.print(table)


if __name__ == "__main__":
    app()
