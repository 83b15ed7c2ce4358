"""
Unit tests for the ledger store.

Tests persistence behaviour:
- Loading absent and corrupt state
- Id backfill migration and its idempotency
- Trade and transaction CRUD
- SQLite key/value backend
"""

import json
import pytest
import sys
from itertools import count
from pathlib import Path
from unittest.mock import patch

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from alphaone.core.config import Config
from alphaone.core.models import Direction, Ledger, Trade, Transaction, TransactionType
from alphaone.storage.kv import MemoryKeyValueStore, SqliteKeyValueStore
from alphaone.storage.ledger import (
    DEFAULT_STORAGE_KEY,
    LedgerStore,
    backfill_ids,
    serialize_ledger,
)


def sequential_ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


def make_trade(pl: float = 100.0, date: str = "2024-03-05T10:30", **kwargs) -> Trade:
    return Trade(
        pair=kwargs.pop("pair", "EURUSD"),
        direction=kwargs.pop("direction", Direction.LONG),
        date=date,
        pl=pl,
        **kwargs,
    )


def raw_state(trades=None, accounting=None) -> bytes:
    return json.dumps({
        "trades": trades or [],
        "accounting": accounting or [],
        "balance": 0,
    }).encode()


LEGACY_TRADE = {
    "pair": "GBPUSD",
    "direction": "Short",
    "date": "2024-02-01T09:00",
    "strategy": "Breakout",
    "risk": 50,
    "pl": -25,
    "notes": "",
}

LEGACY_DEPOSIT = {"type": "Deposit", "amount": 1000, "date": "2024-01-01"}


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return LedgerStore(kv, id_factory=sequential_ids())


class TestLoad:
    """Test loading persisted state."""

    def test_absent_state_is_empty_ledger(self, store, kv):
        """No stored record yields an empty ledger and no write."""
        ledger = store.load()

        assert ledger.trades == []
        assert ledger.accounting == []
        assert ledger.balance == 0
        assert kv.writes == 0

    def test_corrupt_json_falls_back_to_empty(self, kv):
        """Unparseable bytes never raise to the caller."""
        kv.data[DEFAULT_STORAGE_KEY] = b"{not json"
        store = LedgerStore(kv)

        ledger = store.load()

        assert ledger.trades == []
        assert ledger.accounting == []

    def test_wrong_shape_falls_back_to_empty(self, kv):
        """A JSON document of the wrong shape is treated as corrupt."""
        kv.data[DEFAULT_STORAGE_KEY] = b"[1, 2, 3]"

        assert LedgerStore(kv).load().trades == []

    def test_malformed_record_does_not_cost_valid_ones(self, kv, store):
        """Valid records survive next to a malformed one and a later add."""
        odd = dict(LEGACY_TRADE, id="odd", direction="Sideways")
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(
            trades=[
                dict(LEGACY_TRADE, id="t1", pair="EURUSD", direction="Long"),
                dict(LEGACY_TRADE, id="t2", direction="long"),
                odd,
            ],
            accounting=[dict(LEGACY_DEPOSIT, id="d1")],
        )

        ledger = store.load()

        assert [t.id for t in ledger.trades] == ["t1", "t2"]
        assert ledger.trades[1].direction == Direction.LONG
        assert [a.id for a in ledger.accounting] == ["d1"]

        store.add_trade(make_trade(pair="USDJPY"))

        persisted = json.loads(kv.data[DEFAULT_STORAGE_KEY])
        assert [t["pair"] for t in persisted["trades"]] == ["EURUSD", "GBPUSD", "USDJPY", "GBPUSD"]
        assert odd in persisted["trades"]
        assert persisted["accounting"][0]["amount"] == 1000

    def test_record_missing_pair_loads_with_empty_pair(self, kv):
        record = {k: v for k, v in LEGACY_TRADE.items() if k != "pair"}
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(trades=[dict(record, id="t1")])

        trades = LedgerStore(kv).load().trades

        assert len(trades) == 1
        assert trades[0].pair == ""

    def test_unreadable_records_are_left_out_of_views(self, kv):
        """Non-numeric P/L or a non-object entry is set aside, not loaded."""
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(
            trades=[dict(LEGACY_TRADE, id="t1"), dict(LEGACY_TRADE, id="t2", pl="lots"), 7],
            accounting=[{"type": "Deposit", "amount": 5}],
        )

        ledger = LedgerStore(kv).read()

        assert [t.id for t in ledger.trades] == ["t1"]
        assert ledger.unreadable_trades == [dict(LEGACY_TRADE, id="t2", pl="lots"), 7]
        assert ledger.accounting == []
        assert ledger.unreadable_accounting == [{"type": "Deposit", "amount": 5}]

    def test_missing_collections_default_to_empty(self, kv):
        kv.data[DEFAULT_STORAGE_KEY] = b'{"balance": 0}'

        ledger = LedgerStore(kv).load()

        assert ledger.trades == []
        assert ledger.accounting == []
        assert kv.writes == 0

    def test_uses_configured_storage_key(self, kv):
        kv.data["OTHER_KEY"] = raw_state(trades=[dict(LEGACY_TRADE, id="t1")])

        assert LedgerStore(kv).load().trades == []
        assert len(LedgerStore(kv, storage_key="OTHER_KEY").load().trades) == 1


class TestMigration:
    """Test id backfill on load."""

    def test_backfills_missing_ids(self, kv, store):
        """Records without an id get one and the fix is persisted."""
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(
            trades=[LEGACY_TRADE, dict(LEGACY_TRADE, id="keep-me")],
            accounting=[LEGACY_DEPOSIT],
        )

        ledger = store.load()

        assert [t.id for t in ledger.trades] == ["id-1", "keep-me"]
        assert ledger.accounting[0].id == "id-2"
        assert kv.writes == 1

        persisted = json.loads(kv.data[DEFAULT_STORAGE_KEY])
        assert all(t["id"] for t in persisted["trades"])
        assert all(a["id"] for a in persisted["accounting"])

    def test_second_load_performs_no_write(self, kv, store):
        """Migration is idempotent: persisted bytes stay identical."""
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(trades=[LEGACY_TRADE])

        store.load()
        after_first = kv.data[DEFAULT_STORAGE_KEY]
        store.load()

        assert kv.writes == 1
        assert kv.data[DEFAULT_STORAGE_KEY] == after_first

    def test_read_never_writes(self, kv, store):
        """The pure read leaves missing ids alone."""
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(trades=[LEGACY_TRADE])

        ledger = store.read()

        assert ledger.trades[0].id is None
        assert kv.writes == 0

    def test_duplicate_ids_are_reassigned(self, kv, store):
        """Ids end up unique within each collection."""
        kv.data[DEFAULT_STORAGE_KEY] = raw_state(
            trades=[dict(LEGACY_TRADE, id="dup"), dict(LEGACY_TRADE, id="dup")],
        )

        ids = [t.id for t in store.load().trades]

        assert ids[0] == "dup"
        assert len(set(ids)) == 2

    def test_same_id_allowed_across_collections(self):
        """Uniqueness is per collection."""
        ledger = Ledger(
            trades=[make_trade(id="x")],
            accounting=[Transaction(type=TransactionType.DEPOSIT, amount=10, date="2024-01-01", id="x")],
        )

        assert backfill_ids(ledger, sequential_ids()) == 0

    def test_backfill_count(self):
        ledger = Ledger(trades=[make_trade(), make_trade(id="a")])

        assert backfill_ids(ledger, sequential_ids()) == 1


class TestTradeCrud:
    """Test trade add/update/delete."""

    def test_add_assigns_id_and_persists(self, store):
        trade = store.add_trade(make_trade())

        assert trade.id == "id-1"
        assert [t.id for t in store.load().trades] == ["id-1"]

    def test_add_ignores_caller_id(self, store):
        trade = store.add_trade(make_trade(id="chosen"))

        assert trade.id == "id-1"

    def test_add_rejects_invalid_direction(self, store):
        with pytest.raises(ValueError):
            store.add_trade(make_trade(direction="Sideways"))

    def test_add_rejects_negative_risk(self, store):
        with pytest.raises(ValueError):
            store.add_trade(make_trade(risk=-1))

    def test_add_rejects_out_of_range_score(self, store):
        with pytest.raises(ValueError):
            store.add_trade(make_trade(score=101))

    def test_add_accepts_string_direction(self, store):
        trade = store.add_trade(make_trade(direction="Short"))

        assert store.load().trades[0].direction == Direction.SHORT
        assert trade.direction == Direction.SHORT

    def test_add_rejects_unparseable_date(self, kv, store):
        """A date the views cannot place is refused up front."""
        with pytest.raises(ValueError):
            store.add_trade(make_trade(date="yesterday"))

        assert kv.writes == 0

    def test_update_rejects_unparseable_date(self, store):
        trade = store.add_trade(make_trade(pl=100))
        trade.date = "yesterday"

        with pytest.raises(ValueError):
            store.update_trade(trade)

        assert store.get_trade(trade.id).date == "2024-03-05T10:30"

    def test_add_leaves_caller_object_untouched(self, store):
        """The stored trade is a copy; the input keeps its own id."""
        original = make_trade(direction="Long")

        stored = store.add_trade(original)
        stored.pl = 999

        assert original.id is None
        assert stored is not original
        assert store.get_trade(stored.id).pl == 100

    def test_update_replaces_only_target(self, store):
        """Other records keep their ids and values."""
        first = store.add_trade(make_trade(pl=10))
        second = store.add_trade(make_trade(pl=20, pair="USDJPY"))

        replacement = make_trade(pl=-5, pair="AUDUSD", id=first.id)
        assert store.update_trade(replacement) is True

        trades = {t.id: t for t in store.load().trades}
        assert trades[first.id].pl == -5
        assert trades[first.id].pair == "AUDUSD"
        assert trades[second.id].pl == 20
        assert trades[second.id].pair == "USDJPY"

    def test_update_unknown_id_reports_not_found(self, kv, store, caplog):
        store.add_trade(make_trade())
        before = kv.data[DEFAULT_STORAGE_KEY]

        assert store.update_trade(make_trade(id="missing")) is False
        assert kv.data[DEFAULT_STORAGE_KEY] == before
        assert "not found" in caplog.text

    def test_delete_removes_record(self, store):
        trade = store.add_trade(make_trade())
        store.add_trade(make_trade())

        assert store.delete_trade(trade.id) is True
        assert trade.id not in [t.id for t in store.load().trades]

    def test_delete_unknown_id_leaves_state(self, kv, store, caplog):
        store.add_trade(make_trade())
        before = kv.data[DEFAULT_STORAGE_KEY]
        writes = kv.writes

        assert store.delete_trade("missing") is False
        assert kv.data[DEFAULT_STORAGE_KEY] == before
        assert kv.writes == writes
        assert "not found" in caplog.text

    def test_optional_fields_round_trip(self, store):
        trade = store.add_trade(make_trade(
            image="data:image/png;base64,AAAA",
            score=71,
            checklist=["trend", "sr"],
        ))

        loaded = store.get_trade(trade.id)
        assert loaded.image == "data:image/png;base64,AAAA"
        assert loaded.score == 71
        assert loaded.checklist == ["trend", "sr"]

    def test_get_trade_unknown(self, store):
        assert store.get_trade("missing") is None


class TestTransactionCrud:
    """Test transaction add/update/delete."""

    def test_add_and_delete(self, store):
        tx = store.add_transaction(
            Transaction(type=TransactionType.DEPOSIT, amount=500, date="2024-01-02")
        )

        assert store.get_transaction(tx.id).amount == 500
        assert store.delete_transaction(tx.id) is True
        assert store.load().accounting == []

    def test_add_rejects_negative_amount(self, store):
        with pytest.raises(ValueError):
            store.add_transaction(
                Transaction(type=TransactionType.WITHDRAWAL, amount=-5, date="2024-01-02")
            )

    def test_add_rejects_unknown_type(self, store):
        with pytest.raises(ValueError):
            store.add_transaction(Transaction(type="Transfer", amount=5, date="2024-01-02"))

    def test_add_rejects_unparseable_date(self, kv, store):
        with pytest.raises(ValueError):
            store.add_transaction(
                Transaction(type=TransactionType.DEPOSIT, amount=5, date="yesterday")
            )

        assert kv.writes == 0

    def test_update_rejects_unparseable_date(self, store):
        tx = store.add_transaction(
            Transaction(type=TransactionType.DEPOSIT, amount=500, date="2024-01-02")
        )

        with pytest.raises(ValueError):
            store.update_transaction(
                Transaction(type=TransactionType.DEPOSIT, amount=500, date="", id=tx.id)
            )

        assert store.get_transaction(tx.id).date == "2024-01-02"

    def test_add_leaves_caller_object_untouched(self, store):
        original = Transaction(type=TransactionType.DEPOSIT, amount=50, date="2024-01-02")

        stored = store.add_transaction(original)

        assert original.id is None
        assert stored is not original
        assert stored.id == "id-1"

    def test_update(self, store):
        tx = store.add_transaction(
            Transaction(type=TransactionType.DEPOSIT, amount=500, date="2024-01-02")
        )

        updated = Transaction(type=TransactionType.WITHDRAWAL, amount=200, date="2024-01-03", id=tx.id)
        assert store.update_transaction(updated) is True

        loaded = store.get_transaction(tx.id)
        assert loaded.type == TransactionType.WITHDRAWAL
        assert loaded.amount == 200

    def test_update_unknown_id(self, store):
        tx = Transaction(type=TransactionType.DEPOSIT, amount=1, date="2024-01-01", id="missing")

        assert store.update_transaction(tx) is False

    def test_delete_unknown_id(self, store):
        assert store.delete_transaction("missing") is False


class TestSerialization:
    """Test the stored document."""

    def test_equal_ledgers_serialize_identically(self):
        a = Ledger(trades=[make_trade(id="1")])
        b = Ledger(trades=[make_trade(id="1")])

        assert serialize_ledger(a) == serialize_ledger(b)

    def test_unset_optional_fields_are_omitted(self):
        data = json.loads(serialize_ledger(Ledger(trades=[make_trade(id="1")])))

        assert "image" not in data["trades"][0]
        assert "score" not in data["trades"][0]
        assert data["balance"] == 0


class TestSqliteBackend:
    """Test the SQLite key/value store."""

    @pytest.fixture
    def config(self, tmp_path):
        return Config(database_path=str(tmp_path / "journal.db"))

    def test_get_absent_key(self, config):
        assert SqliteKeyValueStore(config).get("nothing") is None

    def test_set_then_get(self, config):
        kv = SqliteKeyValueStore(config)
        kv.set("k", b"v1")
        kv.set("k", b"v2")

        assert kv.get("k") == b"v2"

    def test_ledger_persists_across_instances(self, config):
        store = LedgerStore(SqliteKeyValueStore(config))
        trade = store.add_trade(make_trade(pl=42))

        reopened = LedgerStore(SqliteKeyValueStore(config))
        assert reopened.get_trade(trade.id).pl == 42

    def test_engine_is_reused_across_calls(self, config):
        """Reads and writes run on the store's engine, never a new one."""
        kv = SqliteKeyValueStore(config)

        with patch("alphaone.core.db.get_engine", side_effect=AssertionError("new engine")):
            kv.set("k", b"v1")
            assert kv.get("k") == b"v1"

        kv.close()
