# src/task_tracker/storage/record_store.py

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..core.errors import StorageOperationError
from .connection import TABLE, ConnectionProvider
from .record_models import NewRecord, Record, now_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COLUMNS = "id, title, description, is_done, updated_at, datetime_at"


class RecordStore:
    """
    Record access layer over the shared aiosqlite handle.

    Holds no data of its own: every call obtains the ready handle from the
    ConnectionProvider and runs exactly one statement (autocommit).

    Ordering policy for list_all(): due date ascending, records without a due
    date last, ties by id.

    Errors:
    - InitializationError from the provider propagates unchanged
    - anything raised by a statement becomes StorageOperationError(operation, id)
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        *,
        op_timeout_seconds: float = 10.0,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._provider = provider
        self._op_timeout = float(op_timeout_seconds)
        self._clock = clock

    # ---- low-level helpers ----

    async def _run(
        self,
        operation: str,
        record_id: int | None,
        fn: Callable[[Any], Awaitable[T]],
    ) -> T:
        conn = await self._provider.get_connection()
        try:
            return await asyncio.wait_for(fn(conn), timeout=self._op_timeout)
        except (sqlite3.Error, ValueError, TimeoutError) as e:
            logger.error("Storage %s failed id=%s: %r", operation, record_id, e)
            raise StorageOperationError(operation, record_id) from e

    @staticmethod
    def _validate(data: NewRecord) -> None:
        if not data.title or not data.title.strip():
            raise ValueError("title is required")

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> Record:
        return Record(
            id=int(row["id"]),
            title=str(row["title"]),
            description=row["description"],
            is_done=bool(row["is_done"]),
            updated_at=int(row["updated_at"] or 0),
            due_at=int(row["datetime_at"]) if row["datetime_at"] is not None else None,
        )

    # ---- public API ----

    async def count(self) -> int:
        async def q(conn) -> int:
            async with conn.execute(f"SELECT COUNT(*) FROM {TABLE}") as cur:
                (n,) = await cur.fetchone()
            return int(n)

        return await self._run("count", None, q)

    async def list_all(self) -> list[Record]:
        async def q(conn) -> list[Record]:
            async with conn.execute(
                f"""
                SELECT {_COLUMNS}
                FROM {TABLE}
                ORDER BY datetime_at IS NULL ASC, datetime_at ASC, id ASC
                """
            ) as cur:
                rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

        return await self._run("list_all", None, q)

    async def get_by_id(self, record_id: int) -> Record | None:
        async def q(conn) -> Record | None:
            async with conn.execute(
                f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = ?",
                (int(record_id),),
            ) as cur:
                row = await cur.fetchone()
            return self._row_to_record(row) if row else None

        return await self._run("get_by_id", record_id, q)

    async def insert(self, data: NewRecord) -> int:
        self._validate(data)

        async def q(conn) -> int:
            async with conn.execute(
                f"""
                INSERT INTO {TABLE}(title, description, is_done, updated_at, datetime_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    data.title.strip(),
                    data.description,
                    1 if data.is_done else 0,
                    self._clock(),
                    data.due_at,
                ),
            ) as cur:
                rowid = cur.lastrowid
            if rowid is None:
                raise sqlite3.OperationalError("SQLite did not return lastrowid for items insert")
            return int(rowid)

        record_id = await self._run("insert", None, q)
        logger.debug("Record added id=%s due_at=%s", record_id, data.due_at)
        return record_id

    async def update(self, record_id: int, data: NewRecord) -> int:
        self._validate(data)

        async def q(conn) -> int:
            async with conn.execute(
                f"""
                UPDATE {TABLE}
                SET title = ?,
                    description = ?,
                    is_done = ?,
                    updated_at = ?,
                    datetime_at = ?
                WHERE id = ?
                """,
                (
                    data.title.strip(),
                    data.description,
                    1 if data.is_done else 0,
                    self._clock(),
                    data.due_at,
                    int(record_id),
                ),
            ) as cur:
                return int(cur.rowcount)

        changed = await self._run("update", record_id, q)
        logger.debug("Record updated id=%s changed=%s", record_id, changed)
        return changed

    async def delete(self, record_id: int) -> int:
        async def q(conn) -> int:
            async with conn.execute(f"DELETE FROM {TABLE} WHERE id = ?", (int(record_id),)) as cur:
                return int(cur.rowcount)

        changed = await self._run("delete", record_id, q)
        logger.debug("Record deleted id=%s changed=%s", record_id, changed)
        return changed

    async def clear_all(self) -> None:
        async def q(conn) -> None:
            async with conn.execute(f"DELETE FROM {TABLE}"):
                pass

        await self._run("clear_all", None, q)
        logger.info("All records cleared")
