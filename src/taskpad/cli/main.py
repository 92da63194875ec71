# src/taskpad/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState and the controller, then runs the
console loop on one asyncio event loop until /exit or EOF.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_controller, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.controller import TaskListController

logger = logging.getLogger(__name__)


async def _shutdown(ctl: TaskListController) -> None:
    """Best-effort shutdown: flush the editor, close the HTTP client."""
    try:
        await ctl.aclose()
    except Exception:
        logger.exception("Shutdown failed.")


def console_level(settings: object) -> int:
    """Console handler level from settings.log_level; unknown names fall back to WARNING."""
    level = logging.getLevelName(str(getattr(settings, "log_level", "WARNING")).strip().upper())
    return level if isinstance(level, int) else logging.WARNING


async def _run(ctl: TaskListController, *, console_enabled: bool) -> None:
    try:
        if console_enabled:
            await run_console_loop(ctl)
        else:
            ok = await ctl.refresh()
            logger.info("Console disabled; one-shot sync %s.", "ok" if ok else "failed")
    finally:
        await _shutdown(ctl)


def main() -> None:
    settings = get_settings()

    setup_logging(log_dir=settings.data_dir, console_level=console_level(settings))
    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)
    ctl = create_controller(state)

    try:
        asyncio.run(_run(ctl, console_enabled=settings.console_enabled))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
