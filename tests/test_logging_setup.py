# tests/test_logging_setup.py

from __future__ import annotations

import logging
from types import SimpleNamespace

from taskpad.cli.main import console_level
from taskpad.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_hides_per_call_chatter_but_not_warnings() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("taskpad.tasks.controller", logging.INFO))
    assert not f.filter(_record("taskpad.storage.prefs_store", logging.DEBUG))
    assert not f.filter(_record("taskpad.tasks.trash", logging.INFO))
    assert not f.filter(_record("taskpad.tasks.autosave", logging.DEBUG))
    assert f.filter(_record("taskpad.storage.prefs_store", logging.WARNING))
    assert f.filter(_record("taskpad.tasks.trash", logging.WARNING))


def test_console_filter_keeps_third_party_at_error_only() -> None:
    f = _ConsoleNoiseFilter()

    assert not f.filter(_record("httpx", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("taskpadx", logging.INFO))
    assert f.filter(_record("asyncio", logging.ERROR))


def test_console_level_honours_setting() -> None:
    assert console_level(SimpleNamespace(log_level="debug")) == logging.DEBUG
    assert console_level(SimpleNamespace(log_level="INFO")) == logging.INFO
    assert console_level(SimpleNamespace(log_level="ERROR")) == logging.ERROR
    assert console_level(SimpleNamespace(log_level="chatty")) == logging.WARNING
    assert console_level(SimpleNamespace()) == logging.WARNING
