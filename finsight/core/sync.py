"""
Write-coalescing save scheduler.

Mutations hand the scheduler the full new content of a document. The
scheduler keeps only the latest content per document and writes it once the
document has been quiet for ``delay`` seconds; a newer schedule for the same
document cancels the pending write. Writes of one document never overlap.

A failed write sets the sync status to ``error``. Nothing is retried; the
next mutation of that document schedules a fresh write.
"""

import asyncio
import logging
import os
from typing import Dict, List, Optional

from finsight.core.constants import ESyncStatus, DEFAULT_SAVE_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)


def debounce_seconds() -> float:
    """Quiescence window from SAVE_DEBOUNCE_SECONDS."""
    return float(os.getenv("SAVE_DEBOUNCE_SECONDS", DEFAULT_SAVE_DEBOUNCE_SECONDS))


class SaveScheduler:
    """
    Debounced write-through to a RecordStore.

    Must be used from a running event loop.

    Args:
        store: RecordStore receiving the writes
        delay: Quiescence window in seconds (defaults to SAVE_DEBOUNCE_SECONDS)
    """

    def __init__(self, store, delay: Optional[float] = None):
        self.store = store
        self.delay = debounce_seconds() if delay is None else delay
        self.status = ESyncStatus.SAVED
        self.last_error: Optional[str] = None
        self._pending: Dict[str, object] = {}
        self._timers: Dict[str, asyncio.Task] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._in_flight = 0

    @property
    def pending(self) -> List[str]:
        """Documents waiting to be written."""
        return sorted(self._pending)

    @property
    def idle(self) -> bool:
        return not self._pending and not self._in_flight

    def schedule(self, name: str, items) -> None:
        """Replace the pending content of a document and restart its timer."""
        self._pending[name] = items
        self.status = ESyncStatus.SAVING

        timer = self._timers.pop(name, None)
        if timer is not None:
            timer.cancel()
        self._timers[name] = asyncio.get_running_loop().create_task(self._debounce(name))

    def discard(self, names=None) -> None:
        """Drop pending writes without saving them."""
        for name in list(self._pending if names is None else names):
            self._pending.pop(name, None)
            timer = self._timers.pop(name, None)
            if timer is not None:
                timer.cancel()
        if self.idle and self.status == ESyncStatus.SAVING:
            self.status = ESyncStatus.SAVED

    async def flush(self) -> bool:
        """
        Write every pending document now.

        Returns:
            True if all writes succeeded
        """
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

        names = list(self._pending)
        if not names:
            # Wait for writes that already left the queue
            for lock in list(self._locks.values()):
                async with lock:
                    pass
            return self.status != ESyncStatus.ERROR

        results = await asyncio.gather(*(self._write(name) for name in names))
        return all(results)

    async def _debounce(self, name: str):
        await asyncio.sleep(self.delay)
        # From here on the write is committed and no longer cancellable by schedule()
        self._timers.pop(name, None)
        await self._write(name)

    async def _write(self, name: str) -> bool:
        lock = self._locks.setdefault(name, asyncio.Lock())
        async with lock:
            if name not in self._pending:
                return True
            items = self._pending.pop(name)
            self._in_flight += 1
            try:
                ok = await self.store.save(name, items)
            finally:
                self._in_flight -= 1

        if ok:
            logger.debug(f"Saved document '{name}'")
            # The latest completed write decides the status
            if self.idle:
                self.status = ESyncStatus.SAVED
                self.last_error = None
        else:
            logger.warning(f"Write of document '{name}' failed")
            self.status = ESyncStatus.ERROR
            self.last_error = f"Failed to save {name}"
        return ok
