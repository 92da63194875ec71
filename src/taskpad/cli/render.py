# src/taskpad/cli/render.py

"""Plain-text rendering of the controller's view for the console."""

from __future__ import annotations

from datetime import datetime

from ..tasks.controller import TaskListController
from ..tasks.projection import Segment, format_edited

MATCH_OPEN = "["
MATCH_CLOSE = "]"


def _segments(parts: tuple[Segment, ...]) -> str:
    return "".join(f"{MATCH_OPEN}{p.text}{MATCH_CLOSE}" if p.match else p.text for p in parts)


def _preview(text: str, limit: int = 60) -> str:
    line = " ".join(text.split())
    return line if len(line) <= limit else line[: limit - 3] + "..."


def view_ids(ctl: TaskListController) -> list[str]:
    """Ids in the order they are numbered on screen."""
    if ctl.state.trash_view:
        return [d.id for d in ctl.trash.sorted_by_deleted_at_desc()]
    return [item.task.id for item in ctl.visible()]


def render_list(ctl: TaskListController, *, now: datetime | None = None) -> str:
    now = now or datetime.now().astimezone()
    state = ctl.state
    counts = ctl.counts()
    lines = [
        f"Tab: {state.tab.value}  (all {counts.all} / active {counts.active} / completed {counts.completed})"
    ]
    if state.query.strip():
        lines.append(f"Search: {state.query.strip()!r}")
    if state.error:
        lines.append(f"Error: {state.error}  (use /refresh to retry)")

    items = ctl.visible()
    if not items:
        lines.append("No results." if state.query.strip() else "No tasks.")
        return "\n".join(lines)

    selecting = ctl.selection.active
    for i, item in enumerate(items, start=1):
        t = item.task
        box = "[x]" if t.completed else "[ ]"
        pin = "*" if t.pinned else " "
        mark = ""
        if selecting:
            mark = "(+) " if t.id in ctl.selection else "( ) "
        edited = format_edited(t.updated_at or t.created_at, now)
        lines.append(f"{i:>3}. {mark}{box}{pin} {_segments(item.title)}  {edited}".rstrip())
        if t.content:
            body = _segments(item.content) if state.query.strip() else _preview(t.content)
            lines.append(f"       {body}")
    return "\n".join(lines)


def render_trash(ctl: TaskListController) -> str:
    entries = ctl.trash.sorted_by_deleted_at_desc()
    lines = [f"Trash: {len(entries)} item(s)"]
    if ctl.state.error:
        lines.append(f"Error: {ctl.state.error}")
    if not entries:
        lines.append("Trash is empty.")
        return "\n".join(lines)

    selecting = ctl.selection.active
    for i, d in enumerate(entries, start=1):
        mark = ""
        if selecting:
            mark = "(+) " if d.id in ctl.selection else "( ) "
        deleted = d.deleted_at.astimezone().strftime("%Y-%m-%d %H:%M") if d.deleted_at else "?"
        lines.append(f"{i:>3}. {mark}{d.task.display_title}  (deleted {deleted})")
    return "\n".join(lines)


def render_view(ctl: TaskListController) -> str:
    return render_trash(ctl) if ctl.state.trash_view else render_list(ctl)
