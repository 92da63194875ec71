# src/taskpad/tasks/autosave.py

from __future__ import annotations

"""
Debounced autosave for the task open in the editor.

    Idle --edit--> PendingSave --(quiet period | flush)--> Idle

Each edit restarts the timer, so a burst of edits produces one update
carrying the last values. Closing the editor flushes a pending save first;
a failed save is reported through on_error and the editor still closes.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from ..core.ports import TaskService
from .task_models import UNTITLED, Task, TaskDraft

logger = logging.getLogger(__name__)

SavedHook = Callable[[Task], Awaitable[None]]
ErrorHook = Callable[[Exception], None]


class DebounceTimer:
    """Cancellable one-shot timer that runs an async callback after a quiet period."""

    def __init__(self, delay_seconds: float, callback: Callable[[], Awaitable[None]]) -> None:
        self.delay_seconds = max(0.0, float(delay_seconds))
        self._callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def restart(self) -> None:
        """Cancel any scheduled run and start the quiet period over. Needs a running loop."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        await asyncio.sleep(self.delay_seconds)
        # Detach before firing: cancel() from inside the callback must not kill it.
        self._task = None
        try:
            await self._callback()
        except Exception:
            logger.exception("Debounced callback failed")


class AutosaveState(StrEnum):
    IDLE = "idle"
    PENDING = "pending_save"


@dataclass(slots=True)
class EditSession:
    """Draft title/content for one task while its editor is open."""

    task: Task
    title: str
    content: str


class AutosaveController:
    def __init__(
        self,
        service: TaskService,
        *,
        delay_seconds: float = 0.5,
        on_saved: SavedHook | None = None,
        on_error: ErrorHook | None = None,
    ) -> None:
        self._service = service
        self._on_saved = on_saved
        self._on_error = on_error
        self._timer = DebounceTimer(delay_seconds, self.flush)
        self._lock = asyncio.Lock()
        self._session: EditSession | None = None
        self._state = AutosaveState.IDLE

    @property
    def session(self) -> EditSession | None:
        return self._session

    @property
    def state(self) -> AutosaveState:
        return self._state

    @property
    def timer_pending(self) -> bool:
        return self._timer.pending

    async def open(self, task: Task) -> EditSession:
        """Start editing `task`. An already open session is flushed and closed first."""
        if self._session is not None:
            await self.close()
        self._session = EditSession(task=task, title=task.title or "", content=task.content or "")
        self._state = AutosaveState.IDLE
        logger.debug("Edit session opened id=%s", task.id)
        return self._session

    def edit(self, *, title: str | None = None, content: str | None = None) -> None:
        session = self._session
        if session is None:
            raise RuntimeError("No edit session is open")
        if title is not None:
            session.title = title
        if content is not None:
            session.content = content
        self._state = AutosaveState.PENDING
        self._timer.restart()

    def reconcile(self, task: Task) -> None:
        """Replace the session snapshot with the service's record for the same task."""
        if self._session is not None and self._session.task.id == task.id:
            self._session.task = task

    async def flush(self) -> Task | None:
        """Persist pending edits now. Returns the updated task, or None if nothing was saved."""
        self._timer.cancel()
        async with self._lock:
            session = self._session
            if session is None or self._state is not AutosaveState.PENDING:
                return None
            self._state = AutosaveState.IDLE

            title = session.title.strip()
            content = session.content.strip()
            if not title and not content:
                logger.debug("Autosave skipped for id=%s: title and content are empty", session.task.id)
                return None

            final_title = title or UNTITLED
            draft = TaskDraft(
                title=final_title,
                content=content or final_title,
                pinned=session.task.pinned,
                completed=session.task.completed,
            )
            try:
                saved = await self._service.update(session.task.id, draft)
            except Exception as e:
                logger.warning("Autosave failed id=%s: %s", session.task.id, e)
                if self._on_error is not None:
                    self._on_error(e)
                return None

            if self._session is session:
                session.task = saved
            logger.debug("Autosaved id=%s", saved.id)

        if self._on_saved is not None:
            await self._on_saved(saved)
        return saved

    async def close(self) -> Task | None:
        """Flush pending edits (if any) and end the session. Never leaves a timer behind."""
        try:
            return await self.flush()
        finally:
            self._timer.cancel()
            self._session = None
            self._state = AutosaveState.IDLE

    def discard(self) -> None:
        """End the session without saving (the task is gone)."""
        self._timer.cancel()
        self._session = None
        self._state = AutosaveState.IDLE
