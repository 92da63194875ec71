# src/taskpad/tasks/selection.py

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class SelectionMode(StrEnum):
    LIVE = "live"
    TRASH = "trash"


class SelectionManager:
    """
    Selected task ids for batch actions.

    The selection belongs to one mode at a time (live list or trash).
    Switching modes or leaving selection mode always starts from an empty set.
    Insertion order is kept so batch calls go out in the order ids were picked.
    """

    def __init__(self) -> None:
        self._mode: SelectionMode | None = None
        self._ids: dict[str, None] = {}

    @property
    def mode(self) -> SelectionMode | None:
        return self._mode

    @property
    def active(self) -> bool:
        return self._mode is not None

    @property
    def selected(self) -> list[str]:
        return list(self._ids)

    def enter(self, mode: SelectionMode) -> None:
        self._mode = SelectionMode(mode)
        self._ids.clear()

    def exit(self) -> None:
        self._mode = None
        self._ids.clear()

    def clear(self) -> None:
        self._ids.clear()

    def toggle(self, task_id: str) -> bool:
        """Flip membership of one id. Returns True if it is now selected."""
        if task_id in self._ids:
            del self._ids[task_id]
            return False
        self._ids[task_id] = None
        return True

    def is_all_selected(self, all_ids: Iterable[str]) -> bool:
        ids = list(all_ids)
        if not ids:
            return False
        return len(ids) == len(self._ids) and all(i in self._ids for i in ids)

    def select_all(self, all_ids: Iterable[str]) -> list[str]:
        """
        Toggle between "everything" and "nothing".

        Already all selected -> clear; otherwise (none or partial) -> select all_ids.
        """
        ids = list(all_ids)
        if self.is_all_selected(ids):
            self._ids.clear()
        else:
            self._ids = dict.fromkeys(ids)
        return self.selected

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
