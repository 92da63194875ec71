# tests/test_autosave.py

from __future__ import annotations

import asyncio

import pytest

from taskpad.core.errors import NetworkError
from taskpad.tasks.autosave import AutosaveController, AutosaveState

from .fakes import FakeTaskService, make_task

DELAY = 0.05


def _setup(**kwargs) -> tuple[FakeTaskService, AutosaveController]:
    task = make_task("a", title="Buy milk", content="2 liters", pinned=True)
    service = FakeTaskService([task])
    return service, AutosaveController(service, delay_seconds=DELAY, **kwargs)


@pytest.mark.asyncio
async def test_burst_of_edits_collapses_into_one_update() -> None:
    service, autosave = _setup()
    await autosave.open(service.tasks["a"])

    autosave.edit(content="3 liters")
    await asyncio.sleep(DELAY / 5)
    autosave.edit(content="4 liters")
    await asyncio.sleep(DELAY / 5)
    autosave.edit(content="5 liters")
    assert autosave.state is AutosaveState.PENDING

    await asyncio.sleep(DELAY * 4)

    assert service.count("update") == 1
    _, (task_id, draft) = service.calls[-1]
    assert task_id == "a"
    assert draft.content == "5 liters"
    assert draft.pinned is True
    assert autosave.state is AutosaveState.IDLE
    assert autosave.session.task.content == "5 liters"


@pytest.mark.asyncio
async def test_empty_title_and_content_are_never_saved() -> None:
    service, autosave = _setup()
    await autosave.open(service.tasks["a"])

    autosave.edit(title="  ", content="")
    assert await autosave.flush() is None
    assert service.count("update") == 0


@pytest.mark.asyncio
async def test_title_and_content_fallbacks() -> None:
    service, autosave = _setup()
    await autosave.open(service.tasks["a"])

    autosave.edit(title="", content=" body ")
    saved = await autosave.flush()
    assert saved is not None
    assert (saved.title, saved.content) == ("Untitled", "body")

    autosave.edit(title=" Only title ", content="")
    saved = await autosave.flush()
    assert (saved.title, saved.content) == ("Only title", "Only title")


@pytest.mark.asyncio
async def test_close_flushes_pending_edit_immediately() -> None:
    service, autosave = _setup()
    await autosave.open(service.tasks["a"])

    autosave.edit(title="Buy oat milk")
    saved = await autosave.close()

    assert saved is not None and saved.title == "Buy oat milk"
    assert service.count("update") == 1
    assert autosave.session is None
    assert autosave.timer_pending is False

    # No timer left behind to fire after the session ended.
    await asyncio.sleep(DELAY * 3)
    assert service.count("update") == 1


@pytest.mark.asyncio
async def test_close_without_edits_does_not_save() -> None:
    service, autosave = _setup()
    await autosave.open(service.tasks["a"])
    assert await autosave.close() is None
    assert service.count("update") == 0


@pytest.mark.asyncio
async def test_failed_flush_is_reported_and_session_still_closes() -> None:
    errors: list[Exception] = []
    service, autosave = _setup(on_error=errors.append)
    service.fail_ops["update"] = NetworkError("down")
    await autosave.open(service.tasks["a"])

    autosave.edit(content="lost?")
    assert await autosave.close() is None

    assert len(errors) == 1 and isinstance(errors[0], NetworkError)
    assert autosave.session is None
    assert autosave.state is AutosaveState.IDLE


@pytest.mark.asyncio
async def test_on_saved_hook_receives_service_record() -> None:
    seen = []

    async def on_saved(task) -> None:
        seen.append(task)

    service, autosave = _setup(on_saved=on_saved)
    await autosave.open(service.tasks["a"])
    autosave.edit(title="New")
    await asyncio.sleep(DELAY * 3)

    assert [t.title for t in seen] == ["New"]


@pytest.mark.asyncio
async def test_edit_without_session_is_an_error() -> None:
    _, autosave = _setup()
    with pytest.raises(RuntimeError):
        autosave.edit(title="x")
