# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from task_tracker.cli.bootstrap import create_initial_state, shutdown_state
from task_tracker.core.state import AppState
from task_tracker.storage.connection import ConnectionProvider
from task_tracker.storage.record_store import RecordStore
from task_tracker.sync.records_manager import RecordsManager


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasks-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "app_database.db",
        db_timeout_seconds=5.0,
        op_timeout_seconds=5.0,
    )


@pytest_asyncio.fixture()
async def provider(tmp_path: Path):
    p = ConnectionProvider(tmp_path / "records.db", timeout_seconds=5.0)
    yield p
    await p.close()


@pytest.fixture()
def store(provider: ConnectionProvider) -> RecordStore:
    return RecordStore(provider, op_timeout_seconds=5.0)


@pytest.fixture()
def manager(store: RecordStore) -> RecordsManager:
    return RecordsManager(store)


@pytest_asyncio.fixture()
async def state(settings: SimpleNamespace):
    """
    AppState wired by the real composition root.

    NOTE: real SQLite under tmp_path; correctness of the store is part of what we test.
    """
    st: AppState = create_initial_state(settings=settings)
    yield st
    await shutdown_state(st)
