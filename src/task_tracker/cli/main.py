# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the console connector on one
asyncio loop, then closes the manager and the database.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    try:
        if state.settings.console_enabled:
            await run_console_loop(state)
        else:
            # headless: open the database and load once, so misconfiguration shows up in logs
            await state.manager.reload()
            logger.info("Console disabled. Loaded %d tasks.", len(state.manager.snapshot))
    finally:
        await shutdown_state(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
