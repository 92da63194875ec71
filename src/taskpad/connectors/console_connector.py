# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.render import render_view
from ..tasks.controller import TaskListController

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def handle_line(ctl: TaskListController, line: str) -> str | None:
    """
    One line of console input.

    Slash commands go to the registry. Plain text edits the open task's content
    or, with no task open, quick-adds a task with that text as content.
    """
    line = line.strip()
    if not line:
        return None

    reply = await command_registry.handle(ctl, line)
    if reply is not None:
        return reply

    if ctl.autosave.session is not None:
        ctl.edit_content(line)
        return "Content updated (saving...)."

    task = await ctl.create_task("", line)
    if task is None:
        return f"Error: {ctl.state.error}"
    return render_view(ctl)


async def run_console_loop(ctl: TaskListController) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands, plain text to add a task. Use /exit to quit.\n")

    await ctl.refresh()
    print(render_view(ctl))

    while True:
        try:
            # Read in a worker thread so autosave timers keep running while we wait.
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await handle_line(ctl, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            print(reply)

    logger.info("Console connector finished.")
