"""
Data models for AlphaOne.

Storage model: KeyValueEntry (SQLAlchemy).
Journal records: Trade, Transaction, Ledger.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from alphaone.core.utils import parse_timestamp, trade_day

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class KeyValueEntry(Base):
    """
    A named blob in device-local storage.

    The whole ledger lives in a single entry.
    """

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.key}: {len(self.value or b'')} bytes>"


class _CaseInsensitiveEnum(str, Enum):
    """Accepts values regardless of case or surrounding whitespace."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class Direction(_CaseInsensitiveEnum):
    """Trade direction."""
    LONG = "Long"
    SHORT = "Short"


class TransactionType(_CaseInsensitiveEnum):
    """Cash movement type."""
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


@dataclass
class Trade:
    """
    A single executed position.

    `pl` is the realized profit/loss. `score` and `checklist` come from
    the pre-trade checklist and are optional.
    """

    pair: str
    direction: Direction
    date: str
    pl: float
    strategy: str = ""
    risk: float = 0.0
    notes: str = ""
    image: Optional[str] = None
    score: Optional[int] = None
    checklist: Optional[List[str]] = None
    id: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError if the trade violates field constraints."""
        if not isinstance(self.direction, Direction):
            try:
                self.direction = Direction(self.direction)
            except ValueError:
                raise ValueError(f"Invalid direction: {self.direction}")

        if parse_timestamp(self.date) is None or trade_day(self.date) is None:
            raise ValueError(f"Invalid trade date: {self.date!r}")

        if self.risk < 0:
            raise ValueError(f"Risk must be >= 0, got {self.risk}")

        if self.score is not None and not 0 <= self.score <= 100:
            raise ValueError(f"Score must be within 0-100, got {self.score}")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "pair": self.pair,
            "direction": Direction(self.direction).value,
            "date": self.date,
            "strategy": self.strategy,
            "risk": self.risk,
            "pl": self.pl,
            "notes": self.notes,
        }

        if self.id is not None:
            data["id"] = self.id
        if self.image is not None:
            data["image"] = self.image
        if self.score is not None:
            data["score"] = self.score
        if self.checklist is not None:
            data["checklist"] = list(self.checklist)

        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Trade":
        """
        Create from dictionary.

        Direction matching ignores case and a missing pair reads as "".
        Raises KeyError/ValueError/TypeError when the record cannot be
        represented (no direction or date, non-numeric amounts).
        """
        checklist = data.get("checklist")
        score = data.get("score")
        return cls(
            id=data.get("id") or None,
            pair=data.get("pair") or "",
            direction=Direction(data["direction"]),
            date=str(data["date"]),
            strategy=data.get("strategy") or "",
            risk=float(data.get("risk", 0) or 0),
            pl=float(data.get("pl", 0) or 0),
            notes=data.get("notes") or "",
            image=data.get("image"),
            score=int(score) if score is not None else None,
            checklist=list(checklist) if checklist is not None else None,
        )

    def __repr__(self) -> str:
        return f"<Trade {self.id}: {Direction(self.direction).value} {self.pair} {self.pl:+.2f} @ {self.date}>"


@dataclass
class Transaction:
    """A deposit to or withdrawal from the account."""

    type: TransactionType
    amount: float
    date: str
    id: Optional[str] = None

    @property
    def signed_amount(self) -> float:
        """Amount with the sign implied by the type."""
        if self.type == TransactionType.WITHDRAWAL:
            return -self.amount
        return self.amount

    def validate(self) -> None:
        """Raise ValueError if the transaction violates field constraints."""
        if not isinstance(self.type, TransactionType):
            try:
                self.type = TransactionType(self.type)
            except ValueError:
                raise ValueError(f"Invalid transaction type: {self.type}")

        if parse_timestamp(self.date) is None or trade_day(self.date) is None:
            raise ValueError(f"Invalid transaction date: {self.date!r}")

        if self.amount < 0:
            raise ValueError(f"Amount must be >= 0, got {self.amount}")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "type": TransactionType(self.type).value,
            "amount": self.amount,
            "date": self.date,
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Create from dictionary."""
        return cls(
            id=data.get("id") or None,
            type=TransactionType(data["type"]),
            amount=float(data.get("amount", 0) or 0),
            date=str(data["date"]),
        )

    def __repr__(self) -> str:
        return f"<Transaction {self.id}: {TransactionType(self.type).value} {self.amount:.2f} @ {self.date}>"


@dataclass
class Ledger:
    """
    All trades and cash movements.

    `balance` is carried for storage compatibility only and is never
    read back; KPIs recompute it.

    Stored records that cannot be read as a Trade or Transaction are
    kept verbatim in `unreadable_trades` / `unreadable_accounting`. They
    take no part in any view and are written back unchanged on save.
    """

    trades: List[Trade] = field(default_factory=list)
    accounting: List[Transaction] = field(default_factory=list)
    balance: float = 0.0
    unreadable_trades: List[Any] = field(default_factory=list)
    unreadable_accounting: List[Any] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Ledger":
        return cls()

    def to_dict(self) -> dict:
        return {
            "trades": [t.to_dict() for t in self.trades] + list(self.unreadable_trades),
            "accounting": [a.to_dict() for a in self.accounting] + list(self.unreadable_accounting),
            "balance": self.balance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Ledger":
        """
        Create from the stored document.

        Raises ValueError only when the document itself has the wrong
        shape. A bad record is logged and set aside.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Ledger must be an object, got {type(data).__name__}")

        trades, unreadable_trades = _load_records(data.get("trades"), Trade.from_dict, "trade")
        accounting, unreadable_accounting = _load_records(
            data.get("accounting"), Transaction.from_dict, "transaction"
        )

        return cls(
            trades=trades,
            accounting=accounting,
            balance=data.get("balance", 0) or 0,
            unreadable_trades=unreadable_trades,
            unreadable_accounting=unreadable_accounting,
        )


def _load_records(items: Any, loader: Callable[[dict], Any], kind: str) -> Tuple[list, list]:
    if items is None:
        return [], []

    if not isinstance(items, list):
        raise ValueError(f"Stored {kind} collection must be a list, got {type(items).__name__}")

    loaded, unreadable = [], []

    for item in items:
        try:
            loaded.append(loader(item))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Keeping unreadable {kind} record as stored: {e!r}")
            unreadable.append(item)

    return loaded, unreadable
