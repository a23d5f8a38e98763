# src/task_tracker/sync/records_manager.py

from __future__ import annotations

"""
Records manager.

Sole holder of the in-memory snapshot. Every mutation goes through the same
cycle:
- run the statement via the record store,
- reload the full list from storage,
- replace the snapshot and broadcast it to subscribers.

The snapshot is never patched in place. Storage is the source of truth.
"""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..core.ports import RecordRepo, RecordsListener, Snapshot, Unsubscribe
from ..storage.record_models import NewRecord, Record

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordsManager:
    """
    Snapshot owner + change fan-out.

    Concurrency:
    - mutations and reloads are serialized through one asyncio.Lock, so a mutation
      finishes its reload+broadcast before the next one starts. Without the lock two
      concurrent creates could broadcast an intermediate snapshot.

    Errors from the store propagate to the caller unchanged. On any failure the
    previous snapshot stays in place and nothing is broadcast.
    """

    def __init__(self, store: RecordRepo) -> None:
        self._store = store
        self._records: Snapshot = ()
        self._listeners: dict[int, RecordsListener] = {}
        self._tokens = itertools.count(1)
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self._records

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    # ---- listeners ----

    def subscribe(self, listener: RecordsListener) -> Unsubscribe:
        """
        Register listener and call it right away with the current snapshot.

        Returns a function that removes the listener. Calling it more than once,
        or after close(), does nothing.
        """
        token = next(self._tokens)
        self._listeners[token] = listener
        try:
            listener(self._records)
        except Exception:
            self._listeners.pop(token, None)
            raise

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def _broadcast(self) -> None:
        records = self._records
        # copy: a listener may unsubscribe (itself or others) while we iterate
        for token, listener in list(self._listeners.items()):
            if token not in self._listeners:
                continue
            try:
                listener(records)
            except Exception:
                logger.exception("Records listener failed token=%s", token)

    # ---- data operations ----

    async def _reload_locked(self) -> None:
        records = await self._store.list_all()
        self._records = tuple(records)
        logger.debug("Snapshot reloaded size=%d listeners=%d", len(self._records), len(self._listeners))
        self._broadcast()

    async def _mutate(self, op: str, fn: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            try:
                result = await fn()
            except Exception:
                logger.warning("Records %s failed; snapshot unchanged", op)
                raise
            await self._reload_locked()
            return result

    async def reload(self) -> None:
        """Fetch all records, replace the snapshot, notify subscribers."""
        async with self._lock:
            await self._reload_locked()

    async def create(self, data: NewRecord) -> None:
        await self._mutate("create", lambda: self._store.insert(data))

    async def update_by_id(self, record_id: int, data: NewRecord) -> None:
        await self._mutate("update", lambda: self._store.update(record_id, data))

    async def delete_by_id(self, record_id: int) -> None:
        await self._mutate("delete", lambda: self._store.delete(record_id))

    async def clear_all(self) -> None:
        await self._mutate("clear_all", self._store.clear_all)

    def find(self, record_id: int) -> Record | None:
        """Lookup in the current snapshot (no storage access)."""
        for r in self._records:
            if r.id == record_id:
                return r
        return None

    async def close(self) -> None:
        """Teardown: drop every listener. Outstanding unsubscribe functions become no-ops."""
        async with self._lock:
            self._listeners.clear()
