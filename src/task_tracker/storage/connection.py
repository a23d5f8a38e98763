# src/task_tracker/storage/connection.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any

import aiosqlite

from ..core.errors import InitializationError

logger = logging.getLogger(__name__)

TABLE = "items"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    is_done INTEGER NOT NULL DEFAULT 0,
    title TEXT NOT NULL,
    description TEXT,
    updated_at INTEGER NOT NULL,
    datetime_at INTEGER
)
"""

INDEX_SQL = f"CREATE INDEX IF NOT EXISTS idx_{TABLE}_datetime_at ON {TABLE}(datetime_at)"


class ConnectionProvider:
    """
    Owns the single aiosqlite handle for the process.

    States:
    - uninitialized: no handle, nothing pending
    - initializing: one shared asyncio.Task opens the file and creates the schema;
      every caller that arrives meanwhile awaits that same task
    - ready: handle cached, returned without touching storage

    A failed attempt goes back to uninitialized, so the next call retries.
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        timeout_seconds: float = 30.0,
        connect: Callable[..., Any] = aiosqlite.connect,
    ) -> None:
        self._db_path = Path(db_path)
        self._timeout = float(timeout_seconds)
        self._connect = connect
        self._conn: aiosqlite.Connection | None = None
        self._pending: asyncio.Task[aiosqlite.Connection] | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_ready(self) -> bool:
        return self._conn is not None

    async def get_connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn

        if self._pending is None:
            self._pending = asyncio.create_task(self._initialize())

        # shield: a cancelled caller must not abort the attempt others are waiting on
        return await asyncio.shield(self._pending)

    async def _initialize(self) -> aiosqlite.Connection:
        conn: aiosqlite.Connection | None = None
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = await self._connect(
                str(self._db_path),
                timeout=self._timeout,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            await self._configure_conn(conn)
            await self._ensure_schema(conn)
        except Exception as e:
            if conn is not None:
                with contextlib.suppress(Exception):
                    await conn.close()
            logger.exception("Database initialization failed db=%s", self._db_path)
            # cleared only now: callers arriving during cleanup join this failing attempt
            self._pending = None
            raise InitializationError(
                f"Failed to initialize database connection: {self._db_path}"
            ) from e

        self._conn = conn
        self._pending = None
        logger.info("Database ready db=%s", self._db_path)
        return conn

    @staticmethod
    async def _configure_conn(conn: aiosqlite.Connection) -> None:
        with contextlib.suppress(Exception):
            await conn.execute("PRAGMA journal_mode=WAL")

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(SCHEMA_SQL)
        await conn.execute(INDEX_SQL)

    async def close(self) -> None:
        """Close the handle (if any). A later get_connection() opens a new one."""
        pending = self._pending
        if pending is not None:
            # let an in-flight attempt settle so its handle is not leaked
            with contextlib.suppress(Exception):
                await pending

        conn, self._conn = self._conn, None
        if conn is None:
            return
        await conn.close()
        logger.debug("Database closed db=%s", self._db_path)
