# tests/fakes.py

from __future__ import annotations

import asyncio
import sqlite3

import aiosqlite

from task_tracker.core.errors import StorageOperationError
from task_tracker.core.ports import Snapshot
from task_tracker.storage.connection import ConnectionProvider
from task_tracker.storage.record_models import NewRecord, Record


class FakeRecordRepo:
    """
    In-memory RecordRepo used for manager unit tests.

    - fail_on: operation names that raise StorageOperationError
    - delay: seconds every operation sleeps (widens interleaving windows)
    - calls: operation names in call order
    """

    def __init__(self, *, delay: float = 0.0) -> None:
        self.rows: dict[int, Record] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self.delay = delay
        self._next_id = 1
        self._clock = 1_000

    async def _enter(self, op: str, record_id: int | None = None) -> None:
        self.calls.append(op)
        if self.delay:
            await asyncio.sleep(self.delay)
        if op in self.fail_on:
            raise StorageOperationError(op, record_id)

    def _tick(self) -> int:
        self._clock += 1
        return self._clock

    async def list_all(self) -> list[Record]:
        await self._enter("list_all")
        return sorted(
            self.rows.values(),
            key=lambda r: (r.due_at is None, r.due_at or 0, r.id),
        )

    async def get_by_id(self, record_id: int) -> Record | None:
        await self._enter("get_by_id", record_id)
        return self.rows.get(record_id)

    async def insert(self, data: NewRecord) -> int:
        await self._enter("insert")
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = Record(
            id=rid,
            title=data.title,
            description=data.description,
            is_done=data.is_done,
            updated_at=self._tick(),
            due_at=data.due_at,
        )
        return rid

    async def update(self, record_id: int, data: NewRecord) -> int:
        await self._enter("update", record_id)
        if record_id not in self.rows:
            return 0
        self.rows[record_id] = Record(
            id=record_id,
            title=data.title,
            description=data.description,
            is_done=data.is_done,
            updated_at=self._tick(),
            due_at=data.due_at,
        )
        return 1

    async def delete(self, record_id: int) -> int:
        await self._enter("delete", record_id)
        return 1 if self.rows.pop(record_id, None) is not None else 0

    async def clear_all(self) -> None:
        await self._enter("clear_all")
        self.rows.clear()

    async def count(self) -> int:
        await self._enter("count")
        return len(self.rows)


class SnapshotRecorder:
    """Listener that keeps every snapshot it was called with."""

    def __init__(self) -> None:
        self.received: list[Snapshot] = []

    def __call__(self, records: Snapshot) -> None:
        self.received.append(records)

    @property
    def sizes(self) -> list[int]:
        return [len(s) for s in self.received]


class CountingProvider(ConnectionProvider):
    """ConnectionProvider that counts schema setups and holds each one open briefly."""

    def __init__(self, *args, schema_delay: float = 0.02, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.schema_calls = 0
        self.schema_delay = schema_delay

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        self.schema_calls += 1
        await asyncio.sleep(self.schema_delay)
        await super()._ensure_schema(conn)


class FlakyConnect:
    """connect() replacement: the first `failures` calls raise, later calls open a real database."""

    def __init__(self, failures: int = 1, *, delay: float = 0.0) -> None:
        self.failures = failures
        self.delay = delay
        self.calls = 0

    async def __call__(self, *args, **kwargs) -> aiosqlite.Connection:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.calls <= self.failures:
            raise sqlite3.OperationalError("unable to open database file")
        return await aiosqlite.connect(*args, **kwargs)


class _HangingCursor:
    async def __aenter__(self) -> _HangingCursor:
        await asyncio.sleep(3600)
        return self

    async def __aexit__(self, *exc) -> None:
        return None


class HangingConnection:
    """Connection stand-in whose statements never finish."""

    def execute(self, *args, **kwargs) -> _HangingCursor:
        return _HangingCursor()


class StaticProvider:
    """Provider stand-in that hands out a fixed connection object."""

    def __init__(self, conn) -> None:
        self.conn = conn

    async def get_connection(self):
        return self.conn
