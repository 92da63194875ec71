# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.core.state import AppState
from taskpad.storage.prefs_store import PrefsStore
from taskpad.tasks.controller import TaskListController
from taskpad.tasks.trash import TrashBuffer

from .fakes import FakeTaskService, make_task

AUTOSAVE_DELAY = 0.05


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        api_base_url="http://test.local",
        request_timeout_seconds=1.0,
        autosave_delay_seconds=AUTOSAVE_DELAY,
        console_enabled=False,
        data_dir=tmp_path,
        prefs_db_path=tmp_path / "prefs.sqlite3",
    )


@pytest.fixture()
def prefs(settings: SimpleNamespace) -> PrefsStore:
    return PrefsStore(settings.prefs_db_path)


@pytest.fixture()
def service() -> FakeTaskService:
    return FakeTaskService(
        [
            make_task("a", title="Buy milk", content="2 liters", minute=1),
            make_task("b", title="Call mom", pinned=True, minute=2),
            make_task("c", title="Pay rent", completed=True, minute=3),
        ]
    )


@pytest.fixture()
def controller(settings: SimpleNamespace, service: FakeTaskService, prefs: PrefsStore) -> TaskListController:
    """
    Controller wired with the in-memory service.

    NOTE: the trash and prefs use the real SQLite store, since write-through
    persistence is part of what we want to test.
    """
    return TaskListController(
        AppState(settings=settings),
        service,
        TrashBuffer(prefs),
        prefs,
        autosave_delay_seconds=AUTOSAVE_DELAY,
        base_url=settings.api_base_url,
    )
