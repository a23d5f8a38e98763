# tests/test_console_connector.py

from __future__ import annotations

import pytest

from task_tracker.cli.commands import registry
from task_tracker.connectors.console_connector import run_console_loop


def _feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    it = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


@pytest.mark.asyncio
async def test_console_adds_plain_text_and_exits(state, monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["Buy bread", "/add Call mom @2026-12-24", "/list", "/exit", "/add never"])

    await run_console_loop(state)

    titles = [r.title for r in state.manager.snapshot]
    assert titles == ["Call mom", "Buy bread"]
    # listener is removed when the loop ends
    assert state.manager.subscriber_count == 0

    out = capsys.readouterr().out
    assert "[SYNC] 0 tasks (0 open)" in out
    assert "[SYNC] 2 tasks (2 open)" in out
    assert "Added: Buy bread" in out


@pytest.mark.asyncio
async def test_console_reports_storage_errors(state, monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["/add first", "/drop", "/done 1"])

    async def drop_table(st, args):
        conn = await st.provider.get_connection()
        await conn.execute("DROP TABLE items")
        return "dropped"

    registry.register("drop", drop_table, help_text="test only")
    try:
        await run_console_loop(state)
    finally:
        registry._handlers.pop("drop", None)
        registry._help.pop("drop", None)

    out = capsys.readouterr().out
    assert "[DB] Storage operation failed:" in out
