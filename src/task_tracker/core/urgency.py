# src/task_tracker/core/urgency.py

from __future__ import annotations

from datetime import date, datetime
from enum import IntEnum

from ..storage.record_models import Record


class Urgency(IntEnum):
    DONE = 0
    LOW = 1  # no due date, or more than a week away
    SOON = 2  # within 7 days
    URGENT = 3  # within 3 days, or overdue


def days_until(due_at_ms: int, today: date | None = None) -> int:
    """Whole local calendar days from today to the due day (negative when overdue)."""
    if today is None:
        today = date.today()
    due_day = datetime.fromtimestamp(due_at_ms / 1000).date()
    return (due_day - today).days


def urgency_level(record: Record, today: date | None = None) -> Urgency:
    if record.is_done:
        return Urgency.DONE
    if record.due_at is None:
        return Urgency.LOW

    diff = days_until(record.due_at, today)
    if diff <= 3:
        return Urgency.URGENT
    if diff <= 7:
        return Urgency.SOON
    return Urgency.LOW
