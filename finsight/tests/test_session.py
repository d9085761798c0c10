"""
Tests for finance sessions and the session registry.

Sessions run with a long save delay so that writes happen only on an
explicit flush.
"""

import asyncio
from datetime import date

import pytest

from finsight.core.session import FinanceSession, FinanceSessionRegistry, seed_sample_data_enabled
from finsight.db.record_store import MemoryRecordStore
from finsight.utils.error_utils import DataFormatError, RecordStoreError

TODAY = date(2026, 2, 14)


def make_session(store, seed=True):
    return FinanceSession(1, store, seed_sample_data=seed, today=TODAY, save_delay=60)


def run(coro):
    return asyncio.run(coro)


class BrokenStore(MemoryRecordStore):
    """Memory store that cannot be read until repaired."""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.broken = True

    async def load(self, name):
        if self.broken:
            raise RecordStoreError(f"Failed to load '{name}'")
        return await super().load(name)


class ReadOnlyStore(MemoryRecordStore):
    """Memory store that rejects every write."""

    async def save(self, name, items):
        return False

    async def save_many(self, documents):
        return False


def stored_items(store, name):
    return store.documents[name]["items"]


class TestOpen:
    """Test loading and seeding."""

    def test_seeds_new_user(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store)
            state = await session.open()
            assert session.scheduler.pending == ["debts", "investments", "transactions"]
            await session.flush()
            return session, state

        session, state = run(scenario())

        assert session.loaded
        assert session.sync_status == "saved"
        assert len(state.transactions) == 20
        assert len(state.investments) == 5
        assert len(state.debts) == 3
        assert len(stored_items(store, "transactions")) == 20
        assert "settings" not in store.documents

    def test_seeding_disabled(self):
        store = MemoryRecordStore()
        session = make_session(store, seed=False)
        state = run(session.open())

        assert state.transactions == ()
        assert store.save_count == 0

    def test_saved_empty_collection_is_not_reseeded(self):
        store = MemoryRecordStore({"transactions": {"items": [], "updatedAt": 1}})

        async def scenario():
            session = make_session(store)
            state = await session.open()
            return session, state

        session, state = run(scenario())

        assert state.transactions == ()
        assert len(state.investments) == 5
        assert "transactions" not in session.scheduler.pending

    def test_loads_stored_records(self):
        store = MemoryRecordStore({
            "transactions": {
                "items": [{"id": "t1", "type": "income", "category": "Salary", "amount": 100, "date": "2026-02-01", "note": ""}],
                "updatedAt": 1,
            },
            "investments": [],
            "debts": {"items": [], "updatedAt": 1},
        })
        state = run(make_session(store).open())

        assert [tx.id for tx in state.transactions] == ["t1"]
        assert state.investments == ()
        assert store.save_count == 0

    def test_restores_settings(self):
        store = MemoryRecordStore({"settings": {"view": "yearly", "activeTab": "debts", "updatedAt": 1}})
        state = run(make_session(store, seed=False).open())

        assert state.view == "yearly"
        assert state.active_tab == "debts"
        assert state.reference == "2026"

    def test_ignores_unknown_settings(self):
        store = MemoryRecordStore({"settings": {"view": "weekly", "activeTab": "nowhere", "updatedAt": 1}})
        state = run(make_session(store, seed=False).open())

        assert state.view == "monthly"
        assert state.active_tab == "dashboard"

    def test_open_is_idempotent(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store)
            first = await session.open()
            second = await session.open()
            return first, second

        first, second = run(scenario())
        assert first is second

    def test_load_error_does_not_seed(self):
        store = BrokenStore()
        session = make_session(store)

        with pytest.raises(RecordStoreError):
            run(session.open())

        assert not session.loaded
        assert session.sync_status == "error"
        assert session.status()["lastError"] == "Failed to load 'transactions'"
        assert store.save_count == 0
        assert store.documents == {}

    def test_open_retries_after_load_error(self):
        store = BrokenStore({"transactions": {"items": [], "updatedAt": 1}})
        session = make_session(store, seed=False)

        with pytest.raises(RecordStoreError):
            run(session.open())
        store.broken = False
        run(session.open())

        assert session.loaded
        assert session.sync_status == "saved"

    def test_invalid_stored_records_fail_open(self):
        store = MemoryRecordStore({"debts": {"items": [{"id": "x", "name": "Bad"}], "updatedAt": 1}})
        session = make_session(store)

        with pytest.raises(RecordStoreError):
            run(session.open())
        assert store.documents["debts"]["items"] == [{"id": "x", "name": "Bad"}]


class TestDispatch:
    """Test that mutations schedule the documents they change."""

    def test_add_schedules_collection(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            session.dispatch({"type": "add_transaction", "payload": {"category": "Other", "amount": 12, "date": "2026-02-03"}})
            assert session.scheduler.pending == ["transactions"]
            assert session.sync_status == "saving"
            await session.flush()
            return session

        session = run(scenario())

        assert [item["amount"] for item in stored_items(store, "transactions")] == [12.0]
        assert session.sync_status == "saved"

    def test_view_change_schedules_settings(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            session.dispatch({"type": "set_view", "view": "daily"})
            session.dispatch({"type": "set_tab", "tab": "advisor"})
            await session.flush()

        run(scenario())

        settings = store.documents["settings"]
        assert settings["view"] == "daily"
        assert settings["activeTab"] == "advisor"

    def test_rejected_action_schedules_nothing(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            session.dispatch({"type": "add_debt", "payload": {"name": "No balance"}})
            session.dispatch({"type": "select_period", "month": "2026-01"})
            return session.scheduler.pending

        assert run(scenario()) == []

    def test_write_failure_is_reported(self):
        store = ReadOnlyStore()

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            session.dispatch({"type": "add_transaction", "payload": {"category": "Other", "amount": 1}})
            ok = await session.flush()
            return session, ok

        session, ok = run(scenario())

        assert not ok
        assert session.status() == {
            "status": "error",
            "pending": [],
            "lastError": "Failed to save transactions",
            "loaded": True,
        }
        assert len(session.state.transactions) == 1

    def test_clear_all_persists_and_is_not_reseeded(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store)
            await session.open()
            session.clear_all()
            await session.flush()

            reopened = make_session(store)
            return await reopened.open()

        state = run(scenario())

        assert stored_items(store, "transactions") == []
        assert state.transactions == ()
        assert state.debts == ()

    def test_reset_to_sample(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            state = session.reset_to_sample()
            await session.flush()
            return state

        state = run(scenario())

        assert len(state.transactions) == 20
        assert len(stored_items(store, "debts")) == 3


class TestImport:
    """Test backup import through a session."""

    def test_round_trip(self):
        source = MemoryRecordStore()
        target = MemoryRecordStore()

        async def scenario():
            exporter = make_session(source)
            await exporter.open()
            backup = exporter.state.export()

            importer = make_session(target, seed=False)
            await importer.open()
            imported = await importer.import_backup(backup)
            return backup, importer, imported

        backup, importer, imported = run(scenario())

        assert imported == ["transactions", "investments", "debts"]
        assert importer.state.export() == backup
        assert stored_items(target, "investments") == backup["investments"]
        assert importer.sync_status == "saved"

    def test_bare_array_replaces_transactions_only(self):
        store = MemoryRecordStore()
        rows = [{"id": "n1", "type": "income", "category": "Gifts", "amount": 50, "date": "2026-02-02"}]

        async def scenario():
            session = make_session(store)
            await session.open()
            await session.flush()
            imported = await session.import_backup(rows)
            return session, imported

        session, imported = run(scenario())

        assert imported == ["transactions"]
        assert [tx.id for tx in session.state.transactions] == ["n1"]
        assert len(session.state.debts) == 3
        assert [item["id"] for item in stored_items(store, "transactions")] == ["n1"]

    def test_malformed_file_changes_nothing(self):
        store = MemoryRecordStore()

        async def scenario():
            session = make_session(store)
            await session.open()
            await session.flush()
            before = session.state
            count = store.save_count
            with pytest.raises(DataFormatError):
                await session.import_backup({"transactions": "nope"})
            return session, before, count

        session, before, count = run(scenario())

        assert session.state is before
        assert store.save_count == count

    def test_duplicate_ids_rejected(self):
        store = MemoryRecordStore()
        row = {"id": "dup", "category": "Other", "amount": 5, "date": "2026-02-02"}

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            with pytest.raises(DataFormatError):
                await session.import_backup([row, row])
            return session

        session = run(scenario())
        assert session.state.transactions == ()

    def test_write_failure_keeps_state(self):
        store = ReadOnlyStore()
        rows = [{"id": "n1", "category": "Other", "amount": 5, "date": "2026-02-02"}]

        async def scenario():
            session = make_session(store, seed=False)
            await session.open()
            with pytest.raises(RecordStoreError):
                await session.import_backup(rows)
            return session

        session = run(scenario())

        assert session.state.transactions == ()
        assert session.sync_status == "error"


class TestRegistry:
    """Test per-user session bookkeeping."""

    def test_get_opens_once_per_user(self):
        stores = {}

        def factory(user_id):
            stores[user_id] = MemoryRecordStore()
            return stores[user_id]

        registry = FinanceSessionRegistry(factory, seed_sample_data=False, today=TODAY, save_delay=60)

        async def scenario():
            first = await registry.get(1)
            again = await registry.get(1)
            other = await registry.get(2)
            first.dispatch({"type": "set_view", "view": "yearly"})
            ok = await registry.flush_all()
            return first, again, other, ok

        first, again, other, ok = run(scenario())

        assert first is again
        assert first is not other
        assert ok
        assert 1 in registry
        assert len(registry) == 2
        assert stores[1].documents["settings"]["view"] == "yearly"
        assert "settings" not in stores[2].documents

        registry.drop(1)
        assert 1 not in registry


def test_seed_sample_data_env(monkeypatch):
    monkeypatch.setenv("SEED_SAMPLE_DATA", "false")
    assert not seed_sample_data_enabled()
    monkeypatch.setenv("SEED_SAMPLE_DATA", "1")
    assert seed_sample_data_enabled()
