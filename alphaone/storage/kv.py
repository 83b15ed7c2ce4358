"""
Device-local key/value persistence.

Two backends: SQLite through SQLAlchemy, and an in-memory dict.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Protocol

from alphaone.core.config import Config
from alphaone.core.db import get_engine, init_db, session_scope
from alphaone.core.models import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Synchronous get/set of named byte blobs."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...


class SqliteKeyValueStore:
    """
    Key/value store backed by the kv_store table.

    Every set() is its own committed transaction. One engine is opened
    per store and reused until close().
    """

    def __init__(self, config: Config):
        self.config = config
        self.engine = get_engine(config)
        init_db(config, self.engine)

    def close(self) -> None:
        self.engine.dispose()

    def get(self, key: str) -> Optional[bytes]:
        with session_scope(self.config, self.engine) as session:
            entry = session.get(KeyValueEntry, key)

            if entry is None:
                return None

            return bytes(entry.value)

    def set(self, key: str, value: bytes) -> None:
        with session_scope(self.config, self.engine) as session:
            session.merge(
                KeyValueEntry(key=key, value=value, updated_at=datetime.utcnow())
            )

        logger.debug(f"Stored {len(value)} bytes under {key}")


class MemoryKeyValueStore:
    """Key/value store held in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self.data: Dict[str, bytes] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)
        self.writes += 1
