# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on Protocols instead of concrete implementations,
so the HTTP client and the SQLite key-value store can be swapped for fakes in tests.
"""

from typing import Any, Protocol

from ..tasks.task_models import Task, TaskDraft


class TaskService(Protocol):
    """Remote CRUD contract for tasks. Every call may raise NetworkError / ServiceError."""

    async def list_all(self) -> list[Task]: ...
    async def create(self, draft: TaskDraft) -> Task: ...
    async def update(self, task_id: str, draft: TaskDraft) -> Task: ...
    async def delete(self, task_id: str) -> None: ...
    async def aclose(self) -> None: ...


class PrefsRepo(Protocol):
    """Durable key-value store with JSON values."""

    def get_json(self, key: str, default: Any = None) -> Any: ...
    def set_json(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...
