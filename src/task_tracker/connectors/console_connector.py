# src/task_tracker/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import InitializationError, StorageOperationError
from ..core.ports import Snapshot
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def run_console_loop(state: AppState) -> None:
    """
    Console view-binding adapter.

    Subscribes to the records manager (prints a line on every snapshot change),
    performs the initial load, then reads commands until /exit or EOF.
    Storage errors are shown to the user here and nowhere else.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands. Use /exit to quit.\n")

    def on_change(records: Snapshot) -> None:
        open_count = sum(1 for r in records if not r.is_done)
        _print_ts(f"[SYNC] {len(records)} tasks ({open_count} open)")

    unsubscribe = state.manager.subscribe(on_change)

    try:
        await state.manager.reload()
    except InitializationError:
        logger.exception("Initial load failed.")
        _print_ts("[DB] Could not open the database. Commands will retry.")
    except StorageOperationError:
        logger.exception("Initial load failed.")
        _print_ts("[DB] Could not load tasks. Try /reload.")

    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not line.startswith("/"):
                line = "/add " + line

            try:
                response = await command_registry.handle(state, line)
            except InitializationError:
                logger.exception("Database unavailable.")
                response = "[DB] Could not open the database. Try again."
            except StorageOperationError as e:
                logger.exception("Command failed: %s", line)
                response = f"[DB] {e}"
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                _print_ts(response)
    finally:
        unsubscribe()
        logger.info("Console connector finished.")
