# tests/test_selection.py

from __future__ import annotations

from taskpad.tasks.selection import SelectionManager, SelectionMode


def test_toggle_adds_and_removes() -> None:
    sel = SelectionManager()
    sel.enter(SelectionMode.LIVE)
    assert sel.toggle("1") is True
    assert sel.toggle("2") is True
    assert sel.toggle("1") is False
    assert sel.selected == ["2"]


def test_select_all_is_an_involution_between_all_and_none() -> None:
    sel = SelectionManager()
    sel.enter(SelectionMode.LIVE)
    ids = ["1", "2", "3"]

    assert sel.select_all(ids) == ["1", "2", "3"]
    assert sel.is_all_selected(ids)
    assert sel.select_all(ids) == []
    assert sel.select_all(ids) == ["1", "2", "3"]


def test_select_all_from_partial_selects_everything() -> None:
    sel = SelectionManager()
    sel.enter(SelectionMode.LIVE)
    sel.toggle("2")
    assert sel.select_all(["1", "2", "3"]) == ["1", "2", "3"]


def test_all_selected_requires_matching_sizes_and_non_empty_candidates() -> None:
    sel = SelectionManager()
    sel.enter(SelectionMode.TRASH)
    assert sel.is_all_selected([]) is False

    sel.toggle("1")
    sel.toggle("stale")
    assert sel.is_all_selected(["1"]) is False


def test_mode_switch_and_exit_clear_selection() -> None:
    sel = SelectionManager()
    sel.enter(SelectionMode.LIVE)
    sel.toggle("1")

    sel.enter(SelectionMode.TRASH)
    assert sel.mode is SelectionMode.TRASH
    assert len(sel) == 0

    sel.toggle("9")
    sel.exit()
    assert sel.mode is None
    assert sel.active is False
    assert "9" not in sel
