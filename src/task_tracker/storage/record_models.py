# src/task_tracker/storage/record_models.py

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date, datetime


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def local_midnight_ms(day: date) -> int:
    """Epoch ms of local midnight at the start of day."""
    return int(datetime(day.year, day.month, day.day).timestamp() * 1000)


@dataclass(frozen=True, slots=True)
class Record:
    id: int
    title: str
    description: str | None
    is_done: bool
    updated_at: int  # epoch ms, refreshed on every write
    due_at: int | None  # epoch ms


@dataclass(frozen=True, slots=True)
class NewRecord:
    """
    Input shape for create/update.

    id and updated_at are derived by storage and are not accepted here.
    """

    title: str
    description: str | None = None
    is_done: bool = False
    due_at: int | None = None

    @classmethod
    def from_record(cls, record: Record) -> NewRecord:
        return cls(
            title=record.title,
            description=record.description,
            is_done=record.is_done,
            due_at=record.due_at,
        )
