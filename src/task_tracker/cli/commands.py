# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import date, datetime

from ..core.state import AppState
from ..core.urgency import Urgency, urgency_level
from ..storage.record_models import NewRecord, Record, local_midnight_ms

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

_URGENCY_MARK = {
    Urgency.DONE: "",
    Urgency.LOW: "",
    Urgency.SOON: " !",
    Urgency.URGENT: " !!!",
}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Storage errors are not caught here; the connector decides how to show them.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_due(text: str) -> int:
    """'YYYY-MM-DD' -> epoch ms at local midnight."""
    return local_midnight_ms(date.fromisoformat(text))


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def format_record(r: Record, today: date | None = None) -> str:
    box = "[x]" if r.is_done else "[ ]"
    due = ""
    if r.due_at is not None:
        due = f" (due {datetime.fromtimestamp(r.due_at / 1000).date().isoformat()})"
    mark = _URGENCY_MARK[urgency_level(r, today)]
    return f"{box} #{r.id} {r.title}{due}{mark}"


async def _lookup(state: AppState, record_id: int) -> Record | None:
    found = state.manager.find(record_id)
    if found is not None:
        return found
    return await state.store.get_by_id(record_id)


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    db = "ready" if state.provider.is_ready else "not opened"
    return (
        "Status:\n"
        f"  Database: {state.provider.db_path} ({db})\n"
        f"  Cached records: {len(state.manager.snapshot)}\n"
        f"  Subscribers: {state.manager.subscriber_count}"
    )


async def cmd_list(state: AppState, args: list[str]) -> str:
    records = state.manager.snapshot
    if not records:
        return "No tasks."
    return "\n".join(format_record(r) for r in records)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk              -> task without due date
    /add Pay rent @2026-11-01  -> task due that day
    """
    due_at: int | None = None
    words: list[str] = []
    for a in args:
        if a.startswith("@") and len(a) > 1:
            try:
                due_at = parse_due(a[1:])
            except ValueError:
                return f"Bad date: {a[1:]} (expected YYYY-MM-DD)."
            continue
        words.append(a)

    title = " ".join(words).strip()
    if not title:
        return "Usage: /add <title> [@YYYY-MM-DD]"

    await state.manager.create(NewRecord(title=title, due_at=due_at))
    return f"Added: {title}"


async def _set_done(state: AppState, args: list[str], done: bool) -> str:
    record_id = _parse_id(args)
    if record_id is None:
        return "Usage: /done <id> or /undo <id>"
    record = await _lookup(state, record_id)
    if record is None:
        return f"No task #{record_id}."
    data = replace(NewRecord.from_record(record), is_done=done)
    await state.manager.update_by_id(record_id, data)
    return f"Task #{record_id} marked {'done' if done else 'open'}."


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_done(state, args, True)


async def cmd_undo(state: AppState, args: list[str]) -> str:
    return await _set_done(state, args, False)


async def cmd_rename(state: AppState, args: list[str]) -> str:
    record_id = _parse_id(args)
    title = " ".join(args[1:]).strip()
    if record_id is None or not title:
        return "Usage: /rename <id> <title>"
    record = await _lookup(state, record_id)
    if record is None:
        return f"No task #{record_id}."
    data = replace(NewRecord.from_record(record), title=title)
    await state.manager.update_by_id(record_id, data)
    return f"Task #{record_id} renamed."


async def cmd_del(state: AppState, args: list[str]) -> str:
    record_id = _parse_id(args)
    if record_id is None:
        return "Usage: /del <id>"
    if await _lookup(state, record_id) is None:
        return f"No task #{record_id}."
    await state.manager.delete_by_id(record_id)
    return f"Task #{record_id} deleted."


async def cmd_clear(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() != "yes":
        return "This removes every task. Confirm with: /clear yes"
    await state.manager.clear_all()
    logger.debug("Clear requested from console")
    return "All tasks removed."


async def cmd_reload(state: AppState, args: list[str]) -> str:
    await state.manager.reload()
    return f"Reloaded {len(state.manager.snapshot)} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database/cache status.")
registry.register("list", cmd_list, help_text="List tasks (due date order).", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [@YYYY-MM-DD].")
registry.register("done", cmd_done, help_text="Mark a task done: /done <id>.")
registry.register("undo", cmd_undo, help_text="Reopen a task: /undo <id>.")
registry.register("rename", cmd_rename, help_text="Rename a task: /rename <id> <title>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete all tasks: /clear yes.")
registry.register("reload", cmd_reload, help_text="Reload tasks from the database.")
