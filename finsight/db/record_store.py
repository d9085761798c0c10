"""
Per-user document store.

A RecordStore holds four documents per user: the transactions, investments
and debts collections plus the UI settings. Collections are persisted as
``{"items": [...], "updatedAt": <epoch ms>}``; settings are stored flat as
``{"view": ..., "activeTab": ..., "updatedAt": <epoch ms>}``.

Every save overwrites the whole document (last write wins). ``load`` raises
RecordStoreError when the backend fails; ``save`` never raises and reports
failure by returning False so that callers can surface a sync error while
local mutations continue.
"""

import copy
import logging
import time
from typing import Any, Callable, ContextManager, Dict, List, Optional, Union

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finsight.core.constants import ALL_DOCUMENTS, EDocument
from finsight.db.connection import db_session
from finsight.db.repositories import DocumentRepository
from finsight.utils.error_utils import RecordStoreError

logger = logging.getLogger(__name__)

Document = Union[List[Dict[str, Any]], Dict[str, Any]]


def now_ms() -> int:
    return int(time.time() * 1000)


def wrap_document(name: str, items: Document, updated_at: Optional[int] = None) -> Dict[str, Any]:
    """Build the persisted payload for a document."""
    updated_at = now_ms() if updated_at is None else updated_at
    if name == EDocument.SETTINGS:
        return {**dict(items or {}), "updatedAt": updated_at}
    return {"items": list(items or []), "updatedAt": updated_at}


def unwrap_document(name: str, payload: Any) -> Optional[Document]:
    """Extract the items (or settings) from a persisted payload."""
    if payload is None:
        return None
    if name == EDocument.SETTINGS:
        return dict(payload) if isinstance(payload, dict) else None
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        items = payload.get("items")
        return items if isinstance(items, list) else []
    return None


def _check_name(name: str):
    if name not in ALL_DOCUMENTS:
        raise RecordStoreError(f"Unknown document '{name}'", {"document": name})


class RecordStore:
    """Interface of a per-user document store."""

    async def load(self, name: str) -> Optional[Document]:
        """
        Read a document.

        Returns:
            The collection list, the settings dict, or None if never saved

        Raises:
            RecordStoreError: If the backend cannot be read
        """
        raise NotImplementedError

    async def save(self, name: str, items: Document) -> bool:
        """Overwrite a document. Returns False on failure."""
        raise NotImplementedError

    async def save_many(self, documents: Dict[str, Document]) -> bool:
        """Overwrite several documents at once, all or nothing."""
        raise NotImplementedError


class MemoryRecordStore(RecordStore):
    """
    Dictionary-backed store for tests and demos.

    Attributes:
        documents: Persisted payloads keyed by document name
        save_count: Number of successful document writes
    """

    def __init__(self, documents: Optional[Dict[str, Any]] = None):
        self.documents: Dict[str, Dict[str, Any]] = copy.deepcopy(documents or {})
        self.save_count = 0

    async def load(self, name: str) -> Optional[Document]:
        _check_name(name)
        return copy.deepcopy(unwrap_document(name, self.documents.get(name)))

    async def save(self, name: str, items: Document) -> bool:
        _check_name(name)
        self.documents[name] = wrap_document(name, copy.deepcopy(items))
        self.save_count += 1
        return True

    async def save_many(self, documents: Dict[str, Document]) -> bool:
        for name in documents:
            _check_name(name)
        updated_at = now_ms()
        for name, items in documents.items():
            self.documents[name] = wrap_document(name, copy.deepcopy(items), updated_at)
            self.save_count += 1
        return True


class SqlRecordStore(RecordStore):
    """
    SQLAlchemy-backed store, one ``user_documents`` row per document.

    Database calls are blocking and run in the threadpool.

    Args:
        user_id: Owner of the documents
        session_scope: Context manager factory yielding a committing Session
    """

    def __init__(self, user_id: int, session_scope: Callable[[], ContextManager[Session]] = db_session):
        self.user_id = user_id
        self.session_scope = session_scope

    async def load(self, name: str) -> Optional[Document]:
        _check_name(name)
        try:
            payload = await run_in_threadpool(self._read, name)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load '{name}' for user {self.user_id}: {e}")
            raise RecordStoreError(f"Failed to load '{name}'", {"user_id": self.user_id, "error": str(e)})
        return unwrap_document(name, payload)

    async def save(self, name: str, items: Document) -> bool:
        return await self.save_many({name: items})

    async def save_many(self, documents: Dict[str, Document]) -> bool:
        for name in documents:
            _check_name(name)
        updated_at = now_ms()
        payloads = {name: wrap_document(name, items, updated_at) for name, items in documents.items()}
        try:
            await run_in_threadpool(self._write, payloads, updated_at)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save {sorted(payloads)} for user {self.user_id}: {e}")
            return False
        logger.debug(f"Saved {sorted(payloads)} for user {self.user_id}")
        return True

    def _read(self, name: str) -> Optional[Dict[str, Any]]:
        with self.session_scope() as session:
            return DocumentRepository(session).get_payload(self.user_id, name)

    def _write(self, payloads: Dict[str, Dict[str, Any]], updated_at: int):
        # One session, one commit: every document lands or none does
        with self.session_scope() as session:
            repo = DocumentRepository(session)
            for name, payload in payloads.items():
                repo.upsert(self.user_id, name, payload, updated_at)
