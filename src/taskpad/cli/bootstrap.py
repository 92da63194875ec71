# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the HTTP client, the prefs store and the trash into one TaskListController.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskService
from ..core.state import AppState
from ..storage.prefs_store import PrefsStore
from ..tasks.controller import TaskListController
from ..tasks.task_api import RemoteStore
from ..tasks.trash import TrashBuffer

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.prefs_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    return AppState(settings=settings)


def create_controller(state: AppState, *, service: TaskService | None = None) -> TaskListController:
    settings = state.settings
    if service is None:
        service = RemoteStore(
            settings.api_base_url,
            timeout_seconds=float(getattr(settings, "request_timeout_seconds", 10.0)),
        )

    prefs = PrefsStore(settings.prefs_db_path)
    controller = TaskListController(
        state,
        service,
        TrashBuffer(prefs),
        prefs,
        autosave_delay_seconds=float(getattr(settings, "autosave_delay_seconds", 0.5)),
        base_url=str(getattr(settings, "api_base_url", "")),
    )
    logger.info("Controller ready (service=%s)", getattr(settings, "api_base_url", "?"))
    return controller
