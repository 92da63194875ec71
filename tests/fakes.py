# tests/fakes.py

from __future__ import annotations

import asyncio
import sqlite3
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

from taskpad.core.errors import NetworkError, ServiceError
from taskpad.tasks.task_models import Task, TaskDraft

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def make_task(
    task_id: str,
    *,
    title: str = "",
    content: str = "",
    pinned: bool = False,
    completed: bool = False,
    minute: int | None = 0,
) -> Task:
    created = None if minute is None else BASE_TIME + timedelta(minutes=minute)
    return Task(
        id=task_id,
        title=title or task_id,
        content=content,
        pinned=pinned,
        completed=completed,
        created_at=created,
        updated_at=created,
    )


class FakeTaskService:
    """
    In-memory TaskService used by controller/autosave tests.

    - Captures calls for assertions
    - Every call yields to the event loop once, like a real network await
    - Failures can be injected per operation or per task id / title
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[str, Task] = {t.id: t for t in tasks or []}
        self.calls: list[tuple[str, object]] = []
        self.fail_ops: dict[str, Exception] = {}
        self.fail_delete_ids: set[str] = set()
        self.fail_create_titles: set[str] = set()
        self.closed = False
        self._seq = len(self.tasks)

    def _check(self, op: str) -> None:
        exc = self.fail_ops.get(op)
        if exc is not None:
            raise exc

    async def list_all(self) -> list[Task]:
        await asyncio.sleep(0)
        self.calls.append(("list", None))
        self._check("list")
        return list(self.tasks.values())

    async def create(self, draft: TaskDraft) -> Task:
        await asyncio.sleep(0)
        self.calls.append(("create", draft))
        self._check("create")
        if draft.title in self.fail_create_titles:
            raise ServiceError(500, "Server error: 500", path="/api/todos")
        self._seq += 1
        now = BASE_TIME + timedelta(hours=1, minutes=self._seq)
        task = Task(
            id=f"new{self._seq}",
            title=draft.title,
            content=draft.content,
            pinned=draft.pinned,
            completed=draft.completed,
            created_at=now,
            updated_at=now,
        )
        self.tasks[task.id] = task
        return task

    async def update(self, task_id: str, draft: TaskDraft) -> Task:
        await asyncio.sleep(0)
        self.calls.append(("update", (task_id, draft)))
        self._check("update")
        old = self.tasks.get(task_id)
        if old is None:
            raise ServiceError(404, "Todo not found", path=f"/api/todos/{task_id}")
        task = replace(
            old,
            title=draft.title,
            content=draft.content,
            pinned=draft.pinned,
            completed=draft.completed,
            updated_at=(old.updated_at or BASE_TIME) + timedelta(seconds=1),
        )
        self.tasks[task_id] = task
        return task

    async def delete(self, task_id: str) -> None:
        await asyncio.sleep(0)
        self.calls.append(("delete", task_id))
        self._check("delete")
        if task_id in self.fail_delete_ids:
            raise NetworkError(f"DELETE {task_id}: ConnectError")
        self.tasks.pop(task_id, None)

    async def aclose(self) -> None:
        self.closed = True

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    def network_calls(self) -> list[tuple[str, object]]:
        return [c for c in self.calls if c[0] != "list"]


class BrokenPrefs:
    """
    PrefsRepo wrapper whose writes fail while `broken` is set.

    Reads go to the wrapped store so a controller can start up normally.
    """

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.broken = True

    def get_json(self, key: str, default: Any = None) -> Any:
        return self.inner.get_json(key, default)

    def set_json(self, key: str, value: Any) -> None:
        if self.broken:
            raise sqlite3.OperationalError("database is locked")
        self.inner.set_json(key, value)

    def delete(self, key: str) -> None:
        if self.broken:
            raise sqlite3.OperationalError("database is locked")
        self.inner.delete(key)
