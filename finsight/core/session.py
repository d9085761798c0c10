"""
Finance sessions: one user's AppState bound to a RecordStore.

A session loads the user's documents once, then keeps the state in memory.
Every accepted action schedules a debounced write of the documents it
changed. Reads never touch the store.
"""

import asyncio
import logging
import os
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from finsight.core.backup import parse_backup
from finsight.core.constants import ALL_DOCUMENTS, COLLECTION_DOCUMENTS, EDocument, ESyncStatus, EView, TABS
from finsight.core.sample_data import sample_collections
from finsight.core.state import AppState, changed_documents, records_from_dicts, reduce
from finsight.core.sync import SaveScheduler
from finsight.utils.error_utils import FinsightError, RecordStoreError

logger = logging.getLogger(__name__)


def seed_sample_data_enabled() -> bool:
    return os.getenv("SEED_SAMPLE_DATA", "true").lower() not in ("0", "false", "no")


class FinanceSession:
    """
    In-memory finance state of one user with write-through persistence.

    Args:
        user_id: Owner of the session
        store: RecordStore holding the user's documents
        scheduler: SaveScheduler for the store (created when omitted)
        seed_sample_data: Install the sample data set into never-saved collections
        today: Reference day for the initial period selection
        save_delay: Debounce window override for the created scheduler
    """

    def __init__(
        self,
        user_id,
        store,
        scheduler: Optional[SaveScheduler] = None,
        seed_sample_data: Optional[bool] = None,
        today: Optional[date] = None,
        save_delay: Optional[float] = None,
    ):
        self.user_id = user_id
        self.store = store
        self.scheduler = scheduler or SaveScheduler(store, delay=save_delay)
        self.seed_sample_data = seed_sample_data_enabled() if seed_sample_data is None else seed_sample_data
        self.state = AppState(today=today)
        self.loaded = False
        self._open_lock = asyncio.Lock()

    @property
    def sync_status(self) -> str:
        return self.scheduler.status

    async def open(self) -> AppState:
        """
        Load the user's documents into memory.

        Runs once per session; later calls return the loaded state.

        Raises:
            RecordStoreError: If the store cannot be read or holds invalid records
        """
        if self.loaded:
            return self.state

        async with self._open_lock:
            if self.loaded:
                return self.state

            self.scheduler.status = ESyncStatus.LOADING
            try:
                documents = {name: await self.store.load(name) for name in ALL_DOCUMENTS}
                state, seeded = self._build_state(documents)
            except FinsightError as e:
                # Leave the stored documents alone; the next open retries
                self.scheduler.status = ESyncStatus.ERROR
                self.scheduler.last_error = e.message
                logger.error(f"Failed to open session for user {self.user_id}: {e.message}")
                if isinstance(e, RecordStoreError):
                    raise
                raise RecordStoreError(e.message, e.details)

            self.state = state
            self.loaded = True
            self.scheduler.status = ESyncStatus.SAVED

            if seeded:
                logger.info(f"Seeding sample {', '.join(seeded)} for user {self.user_id}")
                for name in seeded:
                    self.scheduler.schedule(name, self.document(name))
            return self.state

    def _build_state(self, documents: Dict[str, Any]):
        changes = {}
        seeded = []
        samples = sample_collections() if self.seed_sample_data else {}

        for name in COLLECTION_DOCUMENTS:
            items = documents.get(name)
            if items is None and name in samples:
                items = samples[name]
                seeded.append(name)
            changes[name] = records_from_dicts(name, items)

        settings = documents.get(EDocument.SETTINGS) or {}
        if settings.get("view") in {view.value for view in EView}:
            changes["view"] = settings["view"]
        if settings.get("activeTab") in TABS:
            changes["active_tab"] = settings["activeTab"]

        return self.state.replace(**changes), seeded

    def document(self, name: str):
        """Current content of a document in store form."""
        if name == EDocument.SETTINGS:
            return self.state.settings()
        return [record.to_dict() for record in self.state.collection(name)]

    def dispatch(self, action: Dict[str, Any]) -> AppState:
        """
        Apply an action and schedule saves for the documents it changed.

        Must be called from the event loop.
        """
        before = self.state
        self.state = reduce(before, action)
        for name in changed_documents(before, self.state):
            self.scheduler.schedule(name, self.document(name))
        return self.state

    async def flush(self) -> bool:
        """Write pending documents now."""
        return await self.scheduler.flush()

    async def import_backup(self, data: Any) -> List[str]:
        """
        Replace collections with the content of a backup file.

        The provided collections are written together in one store call
        before the in-memory state changes.

        Returns:
            Names of the imported collections

        Raises:
            DataFormatError: If the file is malformed (nothing is written)
            RecordStoreError: If the write fails (state is unchanged)
        """
        collections = parse_backup(data)
        await self.scheduler.flush()

        documents = {name: [record.to_dict() for record in records] for name, records in collections.items()}
        if not await self.store.save_many(documents):
            self.scheduler.status = ESyncStatus.ERROR
            raise RecordStoreError("Failed to save imported data", {"documents": sorted(documents)})

        self.state = self.state.replace(**collections)
        self.scheduler.status = ESyncStatus.SAVED
        return list(collections)

    def clear_all(self) -> AppState:
        return self.dispatch({"type": "clear_all"})

    def reset_to_sample(self) -> AppState:
        return self.dispatch({"type": "replace_all", **sample_collections()})

    def status(self) -> Dict[str, Any]:
        return {
            "status": self.sync_status,
            "pending": self.scheduler.pending,
            "lastError": self.scheduler.last_error,
            "loaded": self.loaded,
        }


class FinanceSessionRegistry:
    """
    One open FinanceSession per user.

    Args:
        store_factory: Callable returning the RecordStore for a user id
        session_kwargs: Extra FinanceSession arguments (seed_sample_data, today, save_delay)
    """

    def __init__(self, store_factory: Callable[[Any], Any], **session_kwargs):
        self.store_factory = store_factory
        self.session_kwargs = session_kwargs
        self._sessions: Dict[Any, FinanceSession] = {}

    def __contains__(self, user_id) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    async def get(self, user_id) -> FinanceSession:
        """Return the user's session, opening it on first use."""
        session = self._sessions.get(user_id)
        if session is None:
            session = FinanceSession(user_id, self.store_factory(user_id), **self.session_kwargs)
            self._sessions[user_id] = session
        await session.open()
        return session

    async def flush_all(self) -> bool:
        results = [await session.flush() for session in self._sessions.values()]
        return all(results)

    def drop(self, user_id) -> None:
        self._sessions.pop(user_id, None)
