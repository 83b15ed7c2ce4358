"""
KPI engine.

Aggregate performance statistics from a ledger snapshot.
A trade with pl == 0 counts as a loss.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from alphaone.core.models import Ledger, Trade, TransactionType
from alphaone.core.utils import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class KPISnapshot:
    """Dashboard KPIs. Recomputed on every request, never stored."""

    balance: float
    net_pl: float
    win_rate: float
    profit_factor: float
    expected_value: float
    gross_win: float = 0.0
    gross_loss: float = 0.0
    wins: int = 0
    losses: int = 0
    total_trades: int = 0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    avg_hold: str = "N/A"

    def to_dict(self) -> dict:
        return {
            "balance": self.balance,
            "net_pl": self.net_pl,
            "win_rate": self.win_rate,
            "profit_factor": self.profit_factor,
            "expected_value": self.expected_value,
            "gross_win": self.gross_win,
            "gross_loss": self.gross_loss,
            "wins": self.wins,
            "losses": self.losses,
            "total_trades": self.total_trades,
            "avg_win": self.avg_win,
            "avg_loss": self.avg_loss,
            "avg_hold": self.avg_hold,
        }


@dataclass
class DisciplineStats:
    """Checklist usage across trades."""

    scored_trades: int = 0
    avg_score: Optional[float] = None
    item_counts: Dict[str, int] = field(default_factory=dict)


def is_win(trade: Trade) -> bool:
    return trade.pl > 0


def calculate_kpis(ledger: Ledger) -> KPISnapshot:
    """
    Calculate KPIs for the whole ledger.

    Total for every ledger, including the empty one:
    - win rate is 0 without trades
    - profit factor falls back to gross win when there are no losses
    - expected value terms are 0 when their denominator is 0
    """
    trades = ledger.trades
    total = len(trades)

    wins = [t for t in trades if is_win(t)]
    losses = [t for t in trades if not is_win(t)]

    net_pl = sum(t.pl for t in trades)
    deposits = sum(
        a.amount for a in ledger.accounting if a.type == TransactionType.DEPOSIT
    )
    withdrawals = sum(
        a.amount for a in ledger.accounting if a.type == TransactionType.WITHDRAWAL
    )
    balance = deposits - withdrawals + net_pl

    win_rate = (len(wins) / total * 100) if total > 0 else 0.0

    gross_win = sum(t.pl for t in wins)
    gross_loss = abs(sum(t.pl for t in losses))

    # No losing P/L: report gross win instead of infinity
    profit_factor = gross_win if gross_loss == 0 else gross_win / gross_loss

    avg_win = gross_win / len(wins) if wins else 0.0
    avg_loss = gross_loss / len(losses) if losses else 0.0
    win_fraction = len(wins) / total if total > 0 else 0.0
    loss_fraction = len(losses) / total if total > 0 else 0.0
    expected_value = avg_win * win_fraction - avg_loss * loss_fraction

    return KPISnapshot(
        balance=balance,
        net_pl=net_pl,
        win_rate=win_rate,
        profit_factor=profit_factor,
        expected_value=expected_value,
        gross_win=gross_win,
        gross_loss=gross_loss,
        wins=len(wins),
        losses=len(losses),
        total_trades=total,
        avg_win=avg_win,
        avg_loss=avg_loss,
    )


def win_loss_breakdown(trades: List[Trade]) -> Dict[str, int]:
    """Win/loss counts for the win ratio chart."""
    wins = sum(1 for t in trades if is_win(t))
    return {"Wins": wins, "Losses": len(trades) - wins}


def calculate_discipline(trades: List[Trade]) -> DisciplineStats:
    """
    Average checklist score and how often each checklist item was satisfied.

    Trades without a score are left out of the average.
    """
    scores = [t.score for t in trades if t.score is not None]
    counter = Counter(item for t in trades for item in (t.checklist or []))

    return DisciplineStats(
        scored_trades=len(scores),
        avg_score=(sum(scores) / len(scores)) if scores else None,
        item_counts=dict(counter),
    )


def sorted_trades(trades: List[Trade], newest_first: bool = True) -> List[Trade]:
    """Trades ordered by date for the journal view. Unparseable dates sort as oldest."""
    return sorted(
        trades,
        key=lambda t: parse_timestamp(t.date) or datetime.min,
        reverse=newest_first,
    )
