# tests/test_task_models.py

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from taskpad.config import Settings
from taskpad.tasks.task_models import DeletedTask, Tab, Task, TaskDraft, parse_ts


def test_task_from_service_record() -> None:
    task = Task.from_dict(
        {
            "_id": "65a1",
            "title": "Buy milk",
            "content": None,
            "pinned": "yes",
            "completed": True,
            "createdAt": "2024-01-01T12:00:00.000Z",
        }
    )
    assert task.id == "65a1"
    assert task.content == ""
    assert task.pinned is False  # only a real boolean true counts
    assert task.completed is True
    assert task.created_at == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    assert task.updated_at is None


def test_task_without_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        Task.from_dict({"title": "x"})


def test_draft_for_create_normalizes_title_only() -> None:
    assert TaskDraft.for_create("", "Buy milk") == TaskDraft(title="Untitled", content="Buy milk")
    assert TaskDraft.for_create("  Milk ", "") == TaskDraft(title="Milk", content="")


def test_deleted_task_keeps_snapshot_and_timestamp() -> None:
    raw = {
        "_id": "x",
        "title": "",
        "content": "body",
        "pinned": True,
        "completed": True,
        "deletedAt": "2024-02-03T04:05:06Z",
    }
    entry = DeletedTask.from_dict(raw)
    assert entry.deleted_at == datetime(2024, 2, 3, 4, 5, 6, tzinfo=UTC)
    assert entry.to_dict()["deletedAt"] == "2024-02-03T04:05:06Z"
    assert entry.restore_draft() == TaskDraft(title="Untitled", content="body", pinned=True, completed=True)


def test_parse_ts_variants() -> None:
    assert parse_ts(None) is None
    assert parse_ts("not a date") is None
    assert parse_ts(0) == datetime(1970, 1, 1, tzinfo=UTC)
    assert parse_ts("2024-01-01T00:00:00").tzinfo is not None


def test_tab_parse_defaults_to_all() -> None:
    assert Tab.parse("Completed") is Tab.COMPLETED
    assert Tab.parse("bogus") is Tab.ALL
    assert Tab.parse(None) is Tab.ALL


def test_settings_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TASKPAD_API_BASE_URL", "http://api.example:8080")
    monkeypatch.setenv("TASKPAD_AUTOSAVE_DELAY_SECONDS", "oops")
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKPAD_PREFS_DB_PATH", raising=False)

    s = Settings.from_env()
    assert s.api_base_url == "http://api.example:8080"
    assert s.autosave_delay_seconds == 0.5
    assert s.prefs_db_path == tmp_path / "prefs.sqlite3"
