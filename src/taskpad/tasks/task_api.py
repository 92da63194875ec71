# src/taskpad/tasks/task_api.py

"""
HTTP client for the remote task service.

Contract:
    GET    /api/todos        -> [Task]
    POST   /api/todos        -> Task
    PUT    /api/todos/{id}   -> Task
    DELETE /api/todos/{id}   -> empty (404 is treated as already deleted)

No retries here: a failed call raises and the caller decides what to do.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import LIST_PATH, NetworkError, ServiceError, ValidationError
from .task_models import Task, TaskDraft

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Service-provided {"error": "..."} when present, else a generic status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("error")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return f"Server error: {response.status_code}"


class RemoteStore:
    """Async CRUD client over httpx. One AsyncClient per store; close with aclose()."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds)),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.debug("%s %s failed: %s", method, path, e.__class__.__name__)
            raise NetworkError(f"{method} {path}: {e.__class__.__name__}") from e
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        if response.is_success:
            return
        raise ServiceError(response.status_code, _error_message(response), path=path)

    @staticmethod
    def _task_from(response: httpx.Response, path: str) -> Task:
        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("expected an object")
            return Task.from_dict(data)
        except ValueError as e:
            raise ServiceError(response.status_code, f"Malformed task record: {e}", path=path) from e

    @staticmethod
    def _check_draft(draft: TaskDraft) -> None:
        if not draft.title or not draft.title.strip():
            raise ValidationError("Title is required.")

    # ---- public API ----

    async def list_all(self) -> list[Task]:
        response = await self._request("GET", LIST_PATH)
        self._raise_for_status(response, LIST_PATH)
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, list):
            logger.warning("List response is not an array; treating as empty.")
            return []

        tasks: list[Task] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                tasks.append(Task.from_dict(item))
            except ValueError:
                logger.warning("Skipping task record without id: %r", item)
        return tasks

    async def create(self, draft: TaskDraft) -> Task:
        self._check_draft(draft)
        response = await self._request("POST", LIST_PATH, json=draft.to_payload())
        self._raise_for_status(response, LIST_PATH)
        task = self._task_from(response, LIST_PATH)
        logger.info("Task created id=%s", task.id)
        return task

    async def update(self, task_id: str, draft: TaskDraft) -> Task:
        self._check_draft(draft)
        path = f"{LIST_PATH}/{task_id}"
        response = await self._request("PUT", path, json=draft.to_payload())
        self._raise_for_status(response, path)
        task = self._task_from(response, path)
        logger.info("Task updated id=%s", task.id)
        return task

    async def delete(self, task_id: str) -> None:
        path = f"{LIST_PATH}/{task_id}"
        response = await self._request("DELETE", path)
        if response.status_code == 404:
            logger.debug("Task %s already gone on the service", task_id)
            return
        self._raise_for_status(response, path)
        logger.info("Task deleted id=%s", task_id)
