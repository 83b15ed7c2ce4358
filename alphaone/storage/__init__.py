"""
Persistence for AlphaOne.

The ledger is one JSON document in a device-local key/value store.
"""

from alphaone.core.config import Config
from alphaone.storage.kv import MemoryKeyValueStore, SqliteKeyValueStore
from alphaone.storage.ledger import LedgerStore


def open_store(config: Config) -> LedgerStore:
    """Ledger store over the configured SQLite database."""
    return LedgerStore(SqliteKeyValueStore(config), storage_key=config.storage_key)


__all__ = ["LedgerStore", "MemoryKeyValueStore", "SqliteKeyValueStore", "open_store"]
