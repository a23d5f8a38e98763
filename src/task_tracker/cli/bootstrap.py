# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the connection provider, record store and records manager into AppState,
- tears them down again on shutdown.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..storage.connection import ConnectionProvider
from ..storage.record_store import RecordStore
from ..sync.records_manager import RecordsManager

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().

    Nothing touches the database here: the provider opens it lazily on first use.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    provider = ConnectionProvider(
        settings.db_path,
        timeout_seconds=settings.db_timeout_seconds,
    )
    store = RecordStore(provider, op_timeout_seconds=settings.op_timeout_seconds)
    manager = RecordsManager(store)

    return AppState(settings=settings, provider=provider, store=store, manager=manager)


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.manager.close()
    except Exception:
        logger.exception("Records manager close failed.")

    try:
        await state.provider.close()
    except Exception:
        logger.exception("Database close failed.")
