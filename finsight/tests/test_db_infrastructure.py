"""
Infrastructure tests for the database layer.

Runs the document repository and the SQL record store against in-memory
SQLite, so no PostgreSQL server is required.

Usage:
    pytest finsight/tests/test_db_infrastructure.py -v
"""

import asyncio
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine, JSON, inspect
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from finsight.db.connection import DatabaseConfig
from finsight.db.models import Base, User, UserDocument
from finsight.db.record_store import SqlRecordStore, MemoryRecordStore, wrap_document, unwrap_document
from finsight.db.repositories import DocumentRepository, UserRepository
from finsight.utils.error_utils import RecordStoreError


def _patch_jsonb_columns():
    """Replace JSONB columns with JSON for SQLite compatibility."""
    for table in Base.metadata.tables.values():
        for column in table.columns:
            if isinstance(column.type, JSONB):
                column.type = JSON()


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def sqlite_scope():
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def broken_scope():
    raise OperationalError("SELECT 1", {}, Exception("database is down"))
    yield  # pragma: no cover


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables and a test user before each test, drop after."""
    _patch_jsonb_columns()
    Base.metadata.create_all(bind=engine)
    with sqlite_scope() as session:
        session.add(User(id=1, name="Test User", email="test@finsight.local"))
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.rollback()
    session.close()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def test_database_url_required(monkeypatch):
    monkeypatch.delenv("NEON_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValueError):
        DatabaseConfig()


def test_sqlite_url_detected(monkeypatch):
    monkeypatch.delenv("NEON_DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///finsight.db")
    config = DatabaseConfig()
    assert config.is_sqlite
    assert config.pool_size == 5


def test_tables_created():
    tables = set(inspect(engine).get_table_names())
    assert {"users", "user_documents"} <= tables


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class TestUserRepository:
    def test_default_user_exists(self, db):
        user = UserRepository(db).get_or_create_default(1)
        assert user.name == "Test User"

    def test_default_user_created(self, db):
        user = UserRepository(db).get_or_create_default(7)
        assert user.id == 7
        assert user.auth_provider == "local"

    def test_clerk_user_created_once(self, db):
        repo = UserRepository(db)
        first = repo.get_or_create_by_clerk_id("user_2abcdefgh", "ana@example.com")
        second = repo.get_or_create_by_clerk_id("user_2abcdefgh")

        assert first.id == second.id
        assert first.email == "ana@example.com"
        assert repo.count() == 2


class TestDocumentRepository:
    def test_upsert_inserts_then_overwrites(self, db):
        repo = DocumentRepository(db)
        repo.upsert(1, "transactions", {"items": [{"id": "a"}], "updatedAt": 1}, 1)
        repo.upsert(1, "transactions", {"items": [], "updatedAt": 2}, 2)

        document = repo.get_document(1, "transactions")
        assert document.payload == {"items": [], "updatedAt": 2}
        assert document.updated_at_ms == 2
        assert repo.count(user_id=1) == 1

    def test_missing_document(self, db):
        assert DocumentRepository(db).get_payload(1, "debts") is None

    def test_list_and_delete(self, db):
        repo = DocumentRepository(db)
        repo.upsert(1, "settings", {"view": "daily", "updatedAt": 1}, 1)
        repo.upsert(1, "debts", {"items": [], "updatedAt": 1}, 1)

        assert repo.list_names(1) == ["debts", "settings"]
        assert repo.delete_all(1) == 2
        assert repo.list_names(1) == []

    def test_documents_are_per_user(self, db):
        db.add(User(id=2, name="Other"))
        db.flush()
        repo = DocumentRepository(db)
        repo.upsert(1, "debts", {"items": [{"id": "mine"}], "updatedAt": 1}, 1)
        repo.upsert(2, "debts", {"items": [], "updatedAt": 1}, 1)

        assert repo.get_payload(1, "debts")["items"] == [{"id": "mine"}]
        assert repo.get_payload(2, "debts")["items"] == []


# ---------------------------------------------------------------------------
# Document envelopes
# ---------------------------------------------------------------------------


def test_wrap_collection():
    assert wrap_document("transactions", [{"id": "a"}], 5) == {"items": [{"id": "a"}], "updatedAt": 5}


def test_wrap_settings_is_flat():
    assert wrap_document("settings", {"view": "daily"}, 5) == {"view": "daily", "updatedAt": 5}


def test_unwrap():
    assert unwrap_document("debts", None) is None
    assert unwrap_document("debts", {"items": [1], "updatedAt": 5}) == [1]
    assert unwrap_document("debts", [1, 2]) == [1, 2]
    assert unwrap_document("debts", {"updatedAt": 5}) == []
    assert unwrap_document("settings", {"view": "daily", "updatedAt": 5})["view"] == "daily"


# ---------------------------------------------------------------------------
# Record stores
# ---------------------------------------------------------------------------


class TestSqlRecordStore:
    def test_never_saved_document_loads_as_none(self):
        store = SqlRecordStore(1, session_scope=sqlite_scope)
        assert asyncio.run(store.load("transactions")) is None

    def test_save_and_load(self):
        store = SqlRecordStore(1, session_scope=sqlite_scope)
        items = [{"id": "a", "type": "income", "category": "Salary", "amount": 10.0, "date": "2026-02-01", "note": ""}]

        async def scenario():
            assert await store.save("transactions", items)
            assert await store.save("settings", {"view": "yearly", "activeTab": "debts"})
            return await store.load("transactions"), await store.load("settings")

        transactions, settings = asyncio.run(scenario())

        assert transactions == items
        assert settings["view"] == "yearly"
        with sqlite_scope() as session:
            payload = DocumentRepository(session).get_payload(1, "transactions")
        assert payload["items"] == items
        assert isinstance(payload["updatedAt"], int)

    def test_save_many_shares_timestamp(self):
        store = SqlRecordStore(1, session_scope=sqlite_scope)
        asyncio.run(store.save_many({"transactions": [], "investments": [], "debts": []}))

        with sqlite_scope() as session:
            stamps = {doc.updated_at_ms for doc in session.query(UserDocument).all()}
        assert len(stamps) == 1

    def test_unknown_document_rejected(self):
        store = SqlRecordStore(1, session_scope=sqlite_scope)
        with pytest.raises(RecordStoreError):
            asyncio.run(store.save("accounts", []))

    def test_load_failure_raises(self):
        store = SqlRecordStore(1, session_scope=broken_scope)
        with pytest.raises(RecordStoreError) as exc_info:
            asyncio.run(store.load("debts"))
        assert exc_info.value.details["user_id"] == 1

    def test_save_failure_returns_false(self):
        store = SqlRecordStore(1, session_scope=broken_scope)
        assert asyncio.run(store.save("debts", [])) is False


class TestMemoryRecordStore:
    def test_round_trip_copies(self):
        store = MemoryRecordStore()
        items = [{"id": "a"}]

        async def scenario():
            await store.save("debts", items)
            items.append({"id": "b"})
            return await store.load("debts")

        assert asyncio.run(scenario()) == [{"id": "a"}]
        assert store.save_count == 1

    def test_unknown_document_rejected(self):
        with pytest.raises(RecordStoreError):
            asyncio.run(MemoryRecordStore().load("accounts"))


# ---------------------------------------------------------------------------
# Demo seeding
# ---------------------------------------------------------------------------


def test_seed_demo_data_is_idempotent():
    from finsight.scripts.seed_demo_data import delete_demo_data, seed_demo_data

    for _ in range(2):
        with sqlite_scope() as session:
            delete_demo_data(session)
            seed_demo_data(session)

    with sqlite_scope() as session:
        demo = UserRepository(session).get_by_clerk_id("demo")
        repo = DocumentRepository(session)
        assert repo.list_names(demo.id) == ["debts", "investments", "settings", "transactions"]
        assert len(repo.get_payload(demo.id, "transactions")["items"]) == 20
        assert session.query(User).filter(User.clerk_id == "demo").count() == 1
