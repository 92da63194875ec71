# src/taskpad/tasks/projection.py

"""
Pure view computation over the raw task list.

project() = tab filter -> search filter -> sort -> highlight.
Nothing here holds state; equal inputs give equal outputs.

Sort order:
- tab "all": active+pinned, active, completed+pinned, completed
- other tabs: pinned before unpinned
- ties: newest createdAt first (missing createdAt counts as oldest)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from .task_models import Tab, Task


@dataclass(slots=True, frozen=True)
class Segment:
    text: str
    match: bool = False


@dataclass(slots=True, frozen=True)
class DisplayItem:
    task: Task
    title: tuple[Segment, ...]
    content: tuple[Segment, ...]


@dataclass(slots=True, frozen=True)
class TabCounts:
    all: int
    active: int
    completed: int


def _query_pattern(query: str | None) -> re.Pattern[str] | None:
    q = (query or "").strip()
    if not q:
        return None
    return re.compile(re.escape(q), re.IGNORECASE)


def highlight(text: str, query: str | None) -> list[Segment]:
    """
    Split `text` into plain and matched segments, left to right.

    Matches are case-insensitive and non-overlapping; matched segments keep the
    original casing. Concatenating all segment texts gives back `text`.
    """
    pattern = _query_pattern(query)
    if pattern is None or not text:
        return [Segment(text)] if text else []

    parts: list[Segment] = []
    last = 0
    for m in pattern.finditer(text):
        if m.start() > last:
            parts.append(Segment(text[last : m.start()]))
        parts.append(Segment(m.group(0), match=True))
        last = m.end()
    if last < len(text):
        parts.append(Segment(text[last:]))
    return parts


def matches_tab(task: Task, tab: Tab) -> bool:
    if tab is Tab.ACTIVE:
        return task.completed is not True
    if tab is Tab.COMPLETED:
        return task.completed is True
    return True


def _priority(task: Task, tab: Tab) -> int:
    if tab is Tab.ALL:
        return (0 if task.pinned else 1) + (2 if task.completed else 0)
    return 0 if task.pinned else 1


def _created_key(task: Task) -> float:
    # Negated for newest-first within an ascending sort.
    if task.created_at is None:
        return float("inf")
    return -task.created_at.timestamp()


def project(tasks: Iterable[Task], tab: Tab | str = Tab.ALL, query: str | None = "") -> list[DisplayItem]:
    tab = Tab.parse(tab)
    pattern = _query_pattern(query)

    visible = [t for t in tasks if matches_tab(t, tab)]
    if pattern is not None:
        visible = [t for t in visible if pattern.search(t.title or "") or pattern.search(t.content or "")]

    visible.sort(key=lambda t: (_priority(t, tab), _created_key(t)))

    return [
        DisplayItem(
            task=t,
            title=tuple(highlight(t.display_title, query)),
            content=tuple(highlight(t.content or "", query)),
        )
        for t in visible
    ]


def tab_counts(tasks: Sequence[Task]) -> TabCounts:
    completed = sum(1 for t in tasks if t.completed is True)
    return TabCounts(all=len(tasks), active=len(tasks) - completed, completed=completed)


def format_edited(ts: datetime | None, now: datetime) -> str:
    """Relative "Edited ..." label for a task timestamp."""
    if ts is None:
        return ""
    if now.tzinfo is None:
        now = now.astimezone()
    local = ts.astimezone(now.tzinfo)
    minutes = int((now - local).total_seconds() // 60)

    if minutes < 60:
        if minutes < 1:
            return "Edited just now"
        return f"Edited {minutes} minute{'s' if minutes != 1 else ''} ago"

    if local.date() == now.date():
        hour = local.hour % 12 or 12
        ampm = "AM" if local.hour < 12 else "PM"
        return f"Edited {hour}:{local.minute:02d} {ampm}"

    if local.year == now.year:
        return f"Edited {local.strftime('%b')} {local.day}"

    return f"Edited {local.strftime('%b')} {local.day}, {local.year}"
