# src/taskpad/tasks/trash.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from ..core.errors import StorageError
from ..core.ports import PrefsRepo
from .task_models import DeletedTask, Task

logger = logging.getLogger(__name__)

TRASH_KEY = "deletedTodos"

_EPOCH = datetime.fromtimestamp(0, tz=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TrashBuffer:
    """
    Locally persisted soft-deleted tasks, newest first.

    Every mutation is written through to the prefs store immediately; when
    the write fails StorageError is raised and the in-memory list is untouched.
    Entries are only ever removed explicitly (restore, clear); there is no expiry.
    """

    def __init__(self, prefs: PrefsRepo, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._prefs = prefs
        self._clock = clock
        self._items: list[DeletedTask] = self._load()
        logger.info("TrashBuffer ready entries=%d", len(self._items))

    def _load(self) -> list[DeletedTask]:
        try:
            raw = self._prefs.get_json(TRASH_KEY, [])
        except Exception:
            logger.warning("Failed to read trash; starting empty.", exc_info=True)
            return []
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning("Trash is not a list; starting empty.")
            return []

        out: list[DeletedTask] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                out.append(DeletedTask.from_dict(item))
            except ValueError:
                logger.warning("Dropping unreadable trash entry: %r", item)
        return out

    def _save(self, items: list[DeletedTask]) -> None:
        """Persist `items`, then make them current. A failed write changes nothing."""
        try:
            self._prefs.set_json(TRASH_KEY, [d.to_dict() for d in items])
        except Exception as e:
            logger.warning("Failed to write trash (%d entries kept): %s", len(self._items), e)
            raise StorageError(f"Failed to write trash: {e}") from e
        self._items = items

    # ---- mutations (write-through) ----

    def add(self, task: Task) -> DeletedTask:
        entry = DeletedTask(task=task, deleted_at=self._clock())
        self._save([entry, *(d for d in self._items if d.id != task.id)])
        logger.debug("Trashed task id=%s", task.id)
        return entry

    def add_many(self, tasks: Iterable[Task]) -> list[DeletedTask]:
        now = self._clock()
        entries = [DeletedTask(task=t, deleted_at=now) for t in tasks]
        if not entries:
            return []
        ids = {e.id for e in entries}
        self._save([*entries, *(d for d in self._items if d.id not in ids)])
        logger.debug("Trashed %d tasks", len(entries))
        return entries

    def remove(self, task_id: str) -> None:
        self.remove_many([task_id])

    def remove_many(self, task_ids: Iterable[str]) -> None:
        ids = set(task_ids)
        kept = [d for d in self._items if d.id not in ids]
        if len(kept) == len(self._items):
            return
        self._save(kept)

    def clear(self) -> None:
        self._save([])
        logger.info("Trash cleared")

    # ---- reads ----

    def all(self) -> list[DeletedTask]:
        return list(self._items)

    def get(self, task_id: str) -> DeletedTask | None:
        for d in self._items:
            if d.id == task_id:
                return d
        return None

    def ids(self) -> list[str]:
        return [d.id for d in self._items]

    def sorted_by_deleted_at_desc(self) -> list[DeletedTask]:
        return sorted(self._items, key=lambda d: d.deleted_at or _EPOCH, reverse=True)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, task_id: object) -> bool:
        return any(d.id == task_id for d in self._items)
