# src/task_tracker/core/errors.py

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for errors raised by the persistence/sync layer."""


class InitializationError(TaskTrackerError):
    """
    Storage could not be opened or the schema could not be created.

    Always retryable: the connection provider clears its pending state on failure,
    so calling get_connection() again starts a fresh attempt.
    """


class StorageOperationError(TaskTrackerError):
    """A single CRUD statement failed. Never retried automatically."""

    def __init__(self, operation: str, record_id: int | None = None) -> None:
        self.operation = operation
        self.record_id = record_id
        if record_id is None:
            msg = f"Storage operation failed: {operation}"
        else:
            msg = f"Storage operation failed: {operation} (id={record_id})"
        super().__init__(msg)
