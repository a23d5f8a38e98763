# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..storage.connection import ConnectionProvider
from ..storage.record_store import RecordStore
from ..sync.records_manager import RecordsManager


@dataclass
class AppState:
    """
    Process-wide services, built once by cli.bootstrap and passed by reference.

    There is exactly one provider/store/manager per AppState; tests build their own.
    """

    settings: object

    provider: ConnectionProvider
    store: RecordStore
    manager: RecordsManager
