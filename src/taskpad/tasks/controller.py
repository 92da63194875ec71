# src/taskpad/tasks/controller.py

"""
Task list orchestration.

The controller owns the raw task list (AppState.tasks), the trash, the
selection and the editor's autosave. Rules it keeps:

- every successful mutation is followed by a full re-list; the service's
  answer is never merged into the raw list by hand (the open editor's
  snapshot is the one exception),
- deleted tasks go into the trash before the delete call is issued; when
  the trash cannot be written the delete is not issued at all,
- batch actions fan out one call per task and wait for all of them; a batch
  with any failure is reported once, and calls that did succeed stay done,
- failures end up as a single message in AppState.error, loading is always
  reset, nothing is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import Any

from ..core.errors import BatchError, StorageError, TaskpadError, ValidationError, describe_error
from ..core.ports import PrefsRepo, TaskService
from ..core.state import AppState
from .autosave import AutosaveController, EditSession
from .projection import DisplayItem, TabCounts, project, tab_counts
from .selection import SelectionManager, SelectionMode
from .task_models import Tab, Task, TaskDraft
from .trash import TrashBuffer

logger = logging.getLogger(__name__)

DARK_MODE_KEY = "darkMode"


class TaskListController:
    def __init__(
        self,
        state: AppState,
        service: TaskService,
        trash: TrashBuffer,
        prefs: PrefsRepo,
        *,
        autosave_delay_seconds: float = 0.5,
        base_url: str = "",
    ) -> None:
        self.state = state
        self.trash = trash
        self.selection = SelectionManager()
        self._service = service
        self._prefs = prefs
        self._base_url = base_url
        self.autosave = AutosaveController(
            service,
            delay_seconds=autosave_delay_seconds,
            on_saved=self._after_autosave,
            on_error=lambda e: self._report(e, "autosave"),
        )
        state.dark_mode = self._load_dark_mode()

    # ---- helpers ----

    def _load_dark_mode(self) -> bool:
        try:
            return self._prefs.get_json(DARK_MODE_KEY, False) is True
        except Exception:
            logger.warning("Failed to read dark mode flag; using light mode.", exc_info=True)
            return False

    def _report(self, exc: BaseException, action: str) -> None:
        self.state.error = describe_error(exc, base_url=self._base_url)
        if isinstance(exc, TaskpadError):
            logger.warning("%s failed: %s", action, exc)
        else:
            logger.error("%s failed unexpectedly", action, exc_info=exc)

    def find(self, task_id: str) -> Task | None:
        for t in self.state.tasks:
            if t.id == task_id:
                return t
        return None

    def _require(self, task_id: str) -> Task:
        task = self.find(task_id)
        if task is None:
            raise ValidationError(f"Task not found: {task_id}")
        return task

    @staticmethod
    async def _fan_out(calls: Iterable[Awaitable[Any]]) -> list[Any]:
        """Run all calls concurrently and wait for every one of them to settle."""
        return list(await asyncio.gather(*calls, return_exceptions=True))

    @staticmethod
    def _batch_error(results: list[Any]) -> BatchError | None:
        failures = [r for r in results if isinstance(r, BaseException)]
        if not failures:
            return None
        return BatchError(failed=len(failures), total=len(results), first=failures[0])

    async def _after_autosave(self, task: Task) -> None:
        await self.refresh()

    # ---- sync with the service ----

    async def refresh(self) -> bool:
        """Replace the raw list with the service's current list."""
        self.state.loading = True
        try:
            tasks = await self._service.list_all()
        except Exception as e:
            self._report(e, "list")
            self.state.tasks = []
            return False
        finally:
            self.state.loading = False
        self.state.tasks = tasks
        self.state.error = None
        logger.debug("Re-listed %d tasks", len(tasks))
        return True

    async def create_task(self, title: str | None, content: str | None) -> Task | None:
        if not (title or "").strip() and not (content or "").strip():
            self._report(ValidationError("Enter a title or some content."), "create")
            return None
        try:
            task = await self._service.create(TaskDraft.for_create(title, content))
        except Exception as e:
            self._report(e, "create")
            return None
        await self.refresh()
        return task

    async def update_task(self, task_id: str, draft: TaskDraft) -> Task | None:
        try:
            task = await self._service.update(task_id, draft)
        except Exception as e:
            self._report(e, "update")
            return None
        self.autosave.reconcile(task)
        await self.refresh()
        return task

    async def toggle_completed(self, task_id: str) -> Task | None:
        try:
            task = self._require(task_id)
        except ValidationError as e:
            self._report(e, "toggle completed")
            return None
        return await self.update_task(task_id, task.to_draft(completed=not task.completed))

    async def toggle_pinned(self, task_id: str) -> Task | None:
        try:
            task = self._require(task_id)
        except ValidationError as e:
            self._report(e, "toggle pinned")
            return None
        return await self.update_task(task_id, task.to_draft(pinned=not task.pinned))

    # ---- delete / trash ----

    async def delete_task(self, task_id: str) -> bool:
        try:
            task = self._require(task_id)
        except ValidationError as e:
            self._report(e, "delete")
            return False

        session = self.autosave.session
        if session is not None and session.task.id == task_id:
            self.autosave.discard()

        try:
            self.trash.add(task)
        except StorageError as e:
            self._report(e, "delete")
            return False
        try:
            await self._service.delete(task_id)
        except Exception as e:
            self._report(e, "delete")
            return False
        await self.refresh()
        return True

    async def delete_all(self) -> bool:
        snapshot = list(self.state.tasks)
        if not snapshot:
            return True
        return await self._delete_batch([t.id for t in snapshot], snapshot, action="delete all")

    async def delete_selected(self) -> bool:
        ids = self.selection.selected if self.selection.mode is SelectionMode.LIVE else []
        if not ids:
            self._report(ValidationError("No tasks selected."), "delete selected")
            return False
        wanted = set(ids)
        snapshot = [t for t in self.state.tasks if t.id in wanted]
        return await self._delete_batch(ids, snapshot, action="delete selected")

    async def _delete_batch(self, ids: list[str], snapshot: list[Task], *, action: str) -> bool:
        session = self.autosave.session
        if session is not None and session.task.id in set(ids):
            self.autosave.discard()

        try:
            self.trash.add_many(snapshot)
        except StorageError as e:
            self._report(e, action)
            return False
        results = await self._fan_out(self._service.delete(i) for i in ids)
        err = self._batch_error(results)
        await self.refresh()
        if err is not None:
            self._report(err, action)
            return False
        self.selection.exit()
        logger.info("%s: removed %d tasks", action, len(ids))
        return True

    async def restore(self, task_id: str) -> Task | None:
        entry = self.trash.get(task_id)
        if entry is None:
            self._report(ValidationError(f"Not in trash: {task_id}"), "restore")
            return None
        try:
            task = await self._service.create(entry.restore_draft())
        except Exception as e:
            self._report(e, "restore")
            return None
        await self._drop_restored([task_id], "restore")
        return task

    async def restore_selected(self) -> bool:
        ids = self.selection.selected if self.selection.mode is SelectionMode.TRASH else []
        entries = [e for e in (self.trash.get(i) for i in ids) if e is not None]
        if not entries:
            self._report(ValidationError("No tasks selected."), "restore selected")
            return False

        results = await self._fan_out(self._service.create(e.restore_draft()) for e in entries)
        restored = [e.id for e, r in zip(entries, results) if not isinstance(r, BaseException)]
        err = self._batch_error(results)
        if not await self._drop_restored(restored, "restore selected"):
            return False
        if err is not None:
            self._report(err, "restore selected")
            return False
        self.selection.exit()
        logger.info("restore selected: restored %d tasks", len(restored))
        return True

    async def _drop_restored(self, ids: list[str], action: str) -> bool:
        """Re-list, then take the restored ids out of the trash (reported after the re-list)."""
        await self.refresh()
        try:
            self.trash.remove_many(ids)
        except StorageError as e:
            self._report(e, action)
            return False
        return True

    def clear_trash(self) -> bool:
        try:
            self.trash.clear()
        except StorageError as e:
            self._report(e, "purge")
            return False
        if self.selection.mode is SelectionMode.TRASH:
            self.selection.clear()
        return True

    def show_trash(self) -> None:
        self.state.trash_view = True
        self.selection.exit()

    def show_list(self) -> None:
        self.state.trash_view = False
        self.selection.exit()

    # ---- selection ----

    def enter_selection(self, mode: SelectionMode) -> None:
        self.selection.enter(mode)

    def exit_selection(self) -> None:
        self.selection.exit()

    def toggle_selection(self, task_id: str) -> bool:
        return self.selection.toggle(task_id)

    def _candidate_ids(self) -> list[str]:
        if self.selection.mode is SelectionMode.TRASH:
            return self.trash.ids()
        return [t.id for t in self.state.tasks]

    def select_all(self) -> list[str]:
        return self.selection.select_all(self._candidate_ids())

    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected(self._candidate_ids())

    # ---- editor ----

    async def open_editor(self, task_id: str) -> EditSession | None:
        try:
            task = self._require(task_id)
        except ValidationError as e:
            self._report(e, "open")
            return None
        return await self.autosave.open(task)

    def edit_title(self, title: str) -> None:
        self.autosave.edit(title=title)

    def edit_content(self, content: str) -> None:
        self.autosave.edit(content=content)

    async def close_editor(self) -> Task | None:
        return await self.autosave.close()

    # ---- view ----

    def set_tab(self, tab: Tab | str) -> Tab:
        self.state.tab = Tab.parse(tab)
        return self.state.tab

    def set_query(self, query: str) -> None:
        self.state.query = query or ""
        if self.state.query.strip():
            self.state.tab = Tab.ALL

    def visible(self) -> list[DisplayItem]:
        return project(self.state.tasks, self.state.tab, self.state.query)

    def counts(self) -> TabCounts:
        return tab_counts(self.state.tasks)

    def toggle_dark_mode(self) -> bool:
        """Flip and persist the dark mode flag; an unsaved flip is not applied."""
        wanted = not self.state.dark_mode
        try:
            self._prefs.set_json(DARK_MODE_KEY, wanted)
        except Exception as e:
            self._report(StorageError(f"Failed to write dark mode: {e}"), "dark mode")
            return self.state.dark_mode
        self.state.dark_mode = wanted
        return wanted

    async def aclose(self) -> None:
        """Flush the editor and close the HTTP client."""
        try:
            await self.autosave.close()
        finally:
            await self._service.aclose()
