# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

UNTITLED = "Untitled"


class Tab(StrEnum):
    """Fixed filter over completion state."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> Tab:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


def parse_ts(raw: Any) -> datetime | None:
    """
    Parse a service/persisted timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (with or without a trailing "Z"), epoch seconds,
    or datetimes. Anything unparseable becomes None.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(float(raw), tz=UTC)
    elif isinstance(raw, str):
        try:
            dt = datetime.fromisoformat(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_ts(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    return ts.astimezone(UTC).isoformat().replace("+00:00", "Z")


def normalize_title(title: str | None) -> str:
    """Trimmed title, or the "Untitled" placeholder when nothing is left."""
    t = (title or "").strip()
    return t or UNTITLED


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """
    Fields sent to the service on create/update.

    The draft is what actually goes over the wire; building one never invents
    content beyond the title placeholder.
    """

    title: str
    content: str = ""
    pinned: bool = False
    completed: bool = False

    @classmethod
    def for_create(cls, title: str | None, content: str | None) -> TaskDraft:
        """
        Draft for a new task typed by the user.

        Both empty (after trimming) is rejected by the caller; here an empty
        title just becomes "Untitled" and content stays as typed.
        """
        return cls(title=normalize_title(title), content=(content or "").strip())

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "pinned": bool(self.pinned),
            "completed": bool(self.completed),
        }


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    content: str
    pinned: bool
    completed: bool
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Build a Task from a service record (Mongo-style "_id" or plain "id")."""
        raw_id = data.get("_id", data.get("id"))
        if raw_id is None or str(raw_id) == "":
            raise ValueError("task record has no id")
        return cls(
            id=str(raw_id),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            pinned=data.get("pinned") is True,
            completed=data.get("completed") is True,
            created_at=parse_ts(data.get("createdAt")),
            updated_at=parse_ts(data.get("updatedAt")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "content": self.content,
            "pinned": self.pinned,
            "completed": self.completed,
            "createdAt": format_ts(self.created_at),
            "updatedAt": format_ts(self.updated_at),
        }

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED

    def to_draft(self, **changes: Any) -> TaskDraft:
        """Current fields as an update draft, with optional overrides."""
        draft = TaskDraft(
            title=self.title or UNTITLED,
            content=self.content or "",
            pinned=self.pinned,
            completed=self.completed,
        )
        return replace(draft, **changes) if changes else draft


@dataclass(slots=True, frozen=True)
class DeletedTask:
    """Snapshot of a removed task, kept in the local trash until restored."""

    task: Task
    deleted_at: datetime | None

    @property
    def id(self) -> str:
        return self.task.id

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeletedTask:
        return cls(task=Task.from_dict(data), deleted_at=parse_ts(data.get("deletedAt")))

    def to_dict(self) -> dict[str, Any]:
        out = self.task.to_dict()
        out["deletedAt"] = format_ts(self.deleted_at)
        return out

    def restore_draft(self) -> TaskDraft:
        t = self.task
        return TaskDraft(
            title=normalize_title(t.title),
            content=t.content or "",
            pinned=t.pinned,
            completed=t.completed,
        )
