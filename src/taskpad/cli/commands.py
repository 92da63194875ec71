# src/taskpad/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable

from ..tasks.controller import TaskListController
from ..tasks.selection import SelectionMode
from .render import render_view, view_ids

CommandHandler = Callable[[TaskListController, list[str]], Awaitable[str] | str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    async def handle(self, ctl: TaskListController, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        result = handler(ctl, args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve(ctl: TaskListController, token: str) -> str:
    """Screen number (1-based, current view) -> task id; anything else is taken as an id."""
    if token.isdigit():
        ids = view_ids(ctl)
        n = int(token)
        if 1 <= n <= len(ids):
            return ids[n - 1]
    return token


def _after(ctl: TaskListController, ok: bool | object) -> str:
    if not ok and ctl.state.error:
        return f"Error: {ctl.state.error}"
    return render_view(ctl)


def cmd_help(ctl: TaskListController, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(ctl: TaskListController, args: list[str]) -> str:
    s = ctl.state
    counts = ctl.counts()
    session = ctl.autosave.session
    editing = session.task.display_title if session else "-"
    mode = ctl.selection.mode.value if ctl.selection.mode else "off"
    return (
        "Status:\n"
        f"  Service: {getattr(s.settings, 'api_base_url', '?')}\n"
        f"  Tasks: {counts.all} (active {counts.active}, completed {counts.completed})\n"
        f"  Trash: {len(ctl.trash)}\n"
        f"  Tab: {s.tab.value}  Search: {s.query.strip() or '-'}\n"
        f"  Selection: {mode} ({len(ctl.selection)} selected)\n"
        f"  Editing: {editing} [{ctl.autosave.state.value}]\n"
        f"  Dark mode: {'ON' if s.dark_mode else 'OFF'}"
    )


async def cmd_refresh(ctl: TaskListController, args: list[str]) -> str:
    return _after(ctl, await ctl.refresh())


def cmd_list(ctl: TaskListController, args: list[str]) -> str:
    return render_view(ctl)


def cmd_tab(ctl: TaskListController, args: list[str]) -> str:
    if not args:
        return f"Current tab: {ctl.state.tab.value}. Use /tab all | active | completed."
    ctl.set_tab(args[0])
    return render_view(ctl)


def cmd_search(ctl: TaskListController, args: list[str]) -> str:
    ctl.set_query(" ".join(args))
    return render_view(ctl)


async def cmd_add(ctl: TaskListController, args: list[str]) -> str:
    """
    /add title            -> title only
    /add title | content  -> title and content
    /add | content        -> content only (title becomes "Untitled")
    """
    raw = " ".join(args)
    title, sep, content = raw.partition("|")
    if not sep:
        content = ""
    return _after(ctl, await ctl.create_task(title, content))


async def cmd_open(ctl: TaskListController, args: list[str]) -> str:
    if not args:
        return "Usage: /open <n>"
    session = await ctl.open_editor(_resolve(ctl, args[0]))
    if session is None:
        return f"Error: {ctl.state.error}"
    return (
        f"Editing: {session.task.display_title}\n"
        f"  {session.content}\n"
        "Use /title <text>, /content <text>, /close."
    )


def cmd_title(ctl: TaskListController, args: list[str]) -> str:
    if ctl.autosave.session is None:
        return "No task is open. Use /open <n> first."
    ctl.edit_title(" ".join(args))
    return "Title updated (saving...)."


def cmd_content(ctl: TaskListController, args: list[str]) -> str:
    if ctl.autosave.session is None:
        return "No task is open. Use /open <n> first."
    ctl.edit_content(" ".join(args))
    return "Content updated (saving...)."


async def cmd_close(ctl: TaskListController, args: list[str]) -> str:
    if ctl.autosave.session is None:
        return "No task is open."
    await ctl.close_editor()
    return render_view(ctl)


async def cmd_done(ctl: TaskListController, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n>"
    return _after(ctl, await ctl.toggle_completed(_resolve(ctl, args[0])))


async def cmd_pin(ctl: TaskListController, args: list[str]) -> str:
    if not args:
        return "Usage: /pin <n>"
    return _after(ctl, await ctl.toggle_pinned(_resolve(ctl, args[0])))


async def cmd_rm(ctl: TaskListController, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <n>"
    return _after(ctl, await ctl.delete_task(_resolve(ctl, args[0])))


async def cmd_rmall(ctl: TaskListController, args: list[str]) -> str:
    return _after(ctl, await ctl.delete_all())


def cmd_trash(ctl: TaskListController, args: list[str]) -> str:
    ctl.show_trash()
    return render_view(ctl)


def cmd_back(ctl: TaskListController, args: list[str]) -> str:
    if ctl.selection.active:
        ctl.exit_selection()
    else:
        ctl.show_list()
    return render_view(ctl)


async def cmd_restore(ctl: TaskListController, args: list[str]) -> str:
    if not args:
        return "Usage: /restore <n> (numbers from /trash)"
    if not ctl.state.trash_view:
        ctl.show_trash()
    return _after(ctl, await ctl.restore(_resolve(ctl, args[0])))


def cmd_select(ctl: TaskListController, args: list[str]) -> str:
    mode = SelectionMode.TRASH if ctl.state.trash_view else SelectionMode.LIVE
    ctl.enter_selection(mode)
    return render_view(ctl) + "\nSelection mode: /toggle <n>..., /all, /rmsel or /restoresel, /back."


def cmd_toggle(ctl: TaskListController, args: list[str]) -> str:
    if not ctl.selection.active:
        return "Not in selection mode. Use /select first."
    for token in args:
        ctl.toggle_selection(_resolve(ctl, token))
    return render_view(ctl)


def cmd_all(ctl: TaskListController, args: list[str]) -> str:
    if not ctl.selection.active:
        return "Not in selection mode. Use /select first."
    ctl.select_all()
    return render_view(ctl)


async def cmd_rmsel(ctl: TaskListController, args: list[str]) -> str:
    return _after(ctl, await ctl.delete_selected())


async def cmd_restoresel(ctl: TaskListController, args: list[str]) -> str:
    return _after(ctl, await ctl.restore_selected())


def cmd_purge(ctl: TaskListController, args: list[str]) -> str:
    return _after(ctl, ctl.clear_trash())


def cmd_dark(ctl: TaskListController, args: list[str]) -> str:
    before = ctl.state.dark_mode
    if ctl.toggle_dark_mode() == before:
        return f"Error: {ctl.state.error}"
    return f"Dark mode {'ON' if ctl.state.dark_mode else 'OFF'}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show service, counts, selection and editor state.")
registry.register("refresh", cmd_refresh, help_text="Reload the list from the service.", aliases=["r"])
registry.register("list", cmd_list, help_text="Show the current view.", aliases=["ls"])
registry.register("tab", cmd_tab, help_text="Filter: /tab all | active | completed.")
registry.register("search", cmd_search, help_text="Search titles and content: /search <text> (empty clears).")
registry.register("add", cmd_add, help_text="Add a task: /add title | content.")
registry.register("open", cmd_open, help_text="Open a task in the editor: /open <n>.")
registry.register("title", cmd_title, help_text="Edit the open task's title (autosaves).")
registry.register("content", cmd_content, help_text="Edit the open task's content (autosaves).")
registry.register("close", cmd_close, help_text="Close the editor (saves pending edits).")
registry.register("done", cmd_done, help_text="Toggle completed: /done <n>.")
registry.register("pin", cmd_pin, help_text="Toggle pinned: /pin <n>.")
registry.register("rm", cmd_rm, help_text="Move a task to the trash: /rm <n>.")
registry.register("rmall", cmd_rmall, help_text="Move every task to the trash.")
registry.register("trash", cmd_trash, help_text="Show the trash.")
registry.register("restore", cmd_restore, help_text="Restore from the trash: /restore <n>.")
registry.register("select", cmd_select, help_text="Enter selection mode for the current view.")
registry.register("toggle", cmd_toggle, help_text="Toggle selection: /toggle <n> [<n> ...].")
registry.register("all", cmd_all, help_text="Select all / deselect all.")
registry.register("rmsel", cmd_rmsel, help_text="Move selected tasks to the trash.")
registry.register("restoresel", cmd_restoresel, help_text="Restore selected trash entries.")
registry.register("back", cmd_back, help_text="Leave selection mode, or go back from the trash.")
registry.register("purge", cmd_purge, help_text="Empty the trash for good.")
registry.register("dark", cmd_dark, help_text="Toggle dark mode.")
