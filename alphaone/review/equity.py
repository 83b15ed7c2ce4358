"""
Equity curve.

Merges trade P/L and cash movements into one cumulative series.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from alphaone.core.models import Ledger
from alphaone.core.utils import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class EquityPoint:
    """Cumulative account value after one event."""

    timestamp: datetime
    value: float


def _collect_events(ledger: Ledger) -> List[Tuple[datetime, float]]:
    """One (timestamp, value) event per trade and per transaction."""
    events = []

    for trade in ledger.trades:
        timestamp = parse_timestamp(trade.date)
        if timestamp is None:
            logger.warning(f"Skipping trade {trade.id} with unparseable date: {trade.date!r}")
            continue
        events.append((timestamp, trade.pl))

    for transaction in ledger.accounting:
        timestamp = parse_timestamp(transaction.date)
        if timestamp is None:
            logger.warning(
                f"Skipping transaction {transaction.id} with unparseable date: {transaction.date!r}"
            )
            continue
        events.append((timestamp, transaction.signed_amount))

    return events


def build_equity_curve(ledger: Ledger, now: Optional[datetime] = None) -> List[EquityPoint]:
    """
    Build the equity curve for a ledger.

    Events are ordered by timestamp only; sorted() is stable so ties keep
    their original order (trades before transactions). An empty ledger
    yields a single zero point at `now`.
    """
    events = sorted(_collect_events(ledger), key=lambda event: event[0])

    if not events:
        return [EquityPoint(timestamp=now or datetime.now(), value=0.0)]

    points = []
    running = 0.0

    for timestamp, value in events:
        running += value
        points.append(EquityPoint(timestamp=timestamp, value=running))

    return points
