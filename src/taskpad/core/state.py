# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import Tab, Task


@dataclass
class AppState:
    """
    Everything the presentation layer reads.

    Owned by one TaskListController; `tasks` is the raw list as last returned
    by the service and is only ever replaced wholesale by a re-list.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: Any

    tasks: list[Task] = field(default_factory=list)
    loading: bool = False
    error: str | None = None

    tab: Tab = Tab.ALL
    query: str = ""
    dark_mode: bool = False

    # True while the trash (restore view) is shown instead of the live list.
    trash_view: bool = False
