"""
Ledger store.

Owns the persisted trades and transactions. Every mutation re-reads the
whole ledger, applies the change and writes it back in one set().
"""

import json
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from alphaone.core.ids import new_id
from alphaone.core.models import Ledger, Trade, Transaction
from alphaone.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "ALPHA_ONE_DATA_V1"


def serialize_ledger(ledger: Ledger) -> bytes:
    """Encode a ledger. Equal ledgers always encode to equal bytes."""
    return json.dumps(
        ledger.to_dict(), sort_keys=True, separators=(",", ":")
    ).encode("utf-8")


def deserialize_ledger(raw: bytes) -> Ledger:
    """Decode a ledger. Raises on malformed input."""
    return Ledger.from_dict(json.loads(raw.decode("utf-8")))


def backfill_ids(ledger: Ledger, id_factory: Callable[[], str] = new_id) -> int:
    """
    Assign ids to records that have none.

    A record repeating an id already seen in its collection gets a new one
    too. Returns the number of records that were given an id.
    """
    assigned = 0

    for records in (ledger.trades, ledger.accounting):
        seen = set()

        for record in records:
            if not record.id or record.id in seen:
                record.id = id_factory()
                while record.id in seen:
                    record.id = id_factory()
                assigned += 1

            seen.add(record.id)

    return assigned


class LedgerStore:
    """
    Persistent trade + transaction store.

    Update and delete on an unknown id log a warning and return False.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        id_factory: Callable[[], str] = new_id,
    ):
        self.kv = kv
        self.storage_key = storage_key
        self.id_factory = id_factory

    def read(self) -> Ledger:
        """
        Read the ledger without writing anything back.

        Missing state, undecodable bytes or a document of the wrong shape
        yield an empty ledger. Single unreadable records are kept aside
        by Ledger.from_dict and never cost the rest of the journal.
        """
        raw = self.kv.get(self.storage_key)

        if raw is None:
            return Ledger.empty()

        try:
            return deserialize_ledger(raw)
        except ValueError:
            logger.exception(
                f"Stored ledger under {self.storage_key} is unreadable, "
                f"falling back to empty ledger"
            )
            return Ledger.empty()

    def load_and_migrate(self) -> Ledger:
        """
        Read the ledger and backfill missing ids.

        Persists the repaired ledger only if something changed, so a second
        call performs no write.
        """
        ledger = self.read()
        assigned = backfill_ids(ledger, self.id_factory)

        if assigned:
            logger.info(f"Backfilled ids for {assigned} record(s)")
            self.save(ledger)

        return ledger

    load = load_and_migrate

    def save(self, ledger: Ledger) -> None:
        """Persist the whole ledger in a single write."""
        self.kv.set(self.storage_key, serialize_ledger(ledger))

    # --- TRADES ---

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        for trade in self.load().trades:
            if trade.id == trade_id:
                return trade
        return None

    def add_trade(self, trade: Trade) -> Trade:
        """Store a copy of the trade under a fresh id and return the copy."""
        trade = replace(trade, id=None)
        trade.validate()

        ledger = self.load()
        trade.id = self.id_factory()
        ledger.trades.append(trade)
        self.save(ledger)

        logger.info(f"Added trade: {trade!r}")
        return trade

    def update_trade(self, trade: Trade) -> bool:
        """Replace the trade with the same id. Returns False if not found."""
        trade = replace(trade)
        trade.validate()

        ledger = self.load()
        index = _find_index(ledger.trades, trade.id)

        if index is None:
            logger.warning(f"Trade ID not found for update: {trade.id}")
            return False

        ledger.trades[index] = trade
        self.save(ledger)
        return True

    def delete_trade(self, trade_id: str) -> bool:
        """Remove the trade with this id. Returns False if not found."""
        ledger = self.load()
        remaining = [t for t in ledger.trades if t.id != trade_id]

        if len(remaining) == len(ledger.trades):
            logger.warning(f"Trade ID not found for deletion: {trade_id}")
            return False

        ledger.trades = remaining
        self.save(ledger)
        return True

    # --- ACCOUNTING ---

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.load().accounting:
            if transaction.id == transaction_id:
                return transaction
        return None

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Store a copy of the transaction under a fresh id and return the copy."""
        transaction = replace(transaction, id=None)
        transaction.validate()

        ledger = self.load()
        transaction.id = self.id_factory()
        ledger.accounting.append(transaction)
        self.save(ledger)

        logger.info(f"Added transaction: {transaction!r}")
        return transaction

    def update_transaction(self, transaction: Transaction) -> bool:
        """Replace the transaction with the same id. Returns False if not found."""
        transaction = replace(transaction)
        transaction.validate()

        ledger = self.load()
        index = _find_index(ledger.accounting, transaction.id)

        if index is None:
            logger.warning(f"Transaction ID not found for update: {transaction.id}")
            return False

        ledger.accounting[index] = transaction
        self.save(ledger)
        return True

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove the transaction with this id. Returns False if not found."""
        ledger = self.load()
        remaining = [a for a in ledger.accounting if a.id != transaction_id]

        if len(remaining) == len(ledger.accounting):
            logger.warning(f"Transaction ID not found for deletion: {transaction_id}")
            return False

        ledger.accounting = remaining
        self.save(ledger)
        return True


def _find_index(records: List, record_id: Optional[str]) -> Optional[int]:
    if not record_id:
        return None

    for index, record in enumerate(records):
        if record.id == record_id:
            return index

    return None
