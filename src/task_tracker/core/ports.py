# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the sync layer and the adapters.

The manager depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier (fakes in tests/fakes.py).
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from ..storage.record_models import NewRecord, Record, local_midnight_ms

Snapshot = tuple[Record, ...]
# Ordered by due_at ascending, null due_at last.

RecordsListener = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


class RecordRepo(Protocol):
    """Record access layer as seen by RecordsManager."""

    async def list_all(self) -> list[Record]: ...
    async def get_by_id(self, record_id: int) -> Record | None: ...
    async def insert(self, data: NewRecord) -> int: ...
    async def update(self, record_id: int, data: NewRecord) -> int: ...
    async def delete(self, record_id: int) -> int: ...
    async def clear_all(self) -> None: ...
    async def count(self) -> int: ...


@dataclass(frozen=True, slots=True)
class ExtractedTodo:
    """A todo candidate produced by an extractor (due date as 'YYYY-MM-DD' or None)."""

    task: str
    deadline: str | None
    description: str | None = None

    def to_new_record(self) -> NewRecord:
        """Deadline becomes local midnight of that day; an unparsable deadline is dropped."""
        due_at: int | None = None
        if self.deadline:
            try:
                day = date.fromisoformat(self.deadline.strip())
            except ValueError:
                day = None
            if day is not None:
                due_at = local_midnight_ms(day)
        return NewRecord(title=self.task.strip(), description=self.description, due_at=due_at)


class TodoExtractor(Protocol):
    """
    External collaborator: turns free text (e.g. a voice transcript) into todo candidates.

    No implementation ships with this package; adapters convert the result to NewRecord.
    """

    def extract(self, text: str) -> Awaitable[list[ExtractedTodo]]: ...


class Transcriber(Protocol):
    """External collaborator: speech-to-text."""

    def transcribe(self, audio_path: Path) -> Awaitable[str]: ...
