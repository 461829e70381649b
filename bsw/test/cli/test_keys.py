"""Tests for cli/keys.py key-to-intent mapping."""

from __future__ import annotations

import pytest

from bsw.cli.keys import intent_for_key
from bsw.cli.state import (
    AppendChar,
    Back,
    Confirm,
    DeleteChar,
    Mode,
    MoveCursor,
    Quit,
    ToggleAll,
    ToggleOne,
)


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("up", MoveCursor(-1)),
        ("k", MoveCursor(-1)),
        ("down", MoveCursor(1)),
        ("j", MoveCursor(1)),
        ("enter", Confirm()),
        ("q", Quit()),
        ("ctrl+c", Quit()),
        ("space", None),
        ("x", None),
    ],
)
def test_choose_action_keys(key: str, expected: object) -> None:
    assert intent_for_key(Mode.CHOOSE_ACTION, key) == expected


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("space", ToggleOne()),
        ("a", ToggleAll()),
        ("esc", Back()),
        ("enter", Confirm()),
        ("down", MoveCursor(1)),
        ("q", Quit()),
    ],
)
def test_choose_repositories_keys(key: str, expected: object) -> None:
    assert intent_for_key(Mode.CHOOSE_REPOSITORIES, key) == expected


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("q", AppendChar("q")),
        ("a", AppendChar("a")),
        ("/", AppendChar("/")),
        ("space", AppendChar(" ")),
        ("backspace", DeleteChar()),
        ("enter", Confirm()),
        ("esc", Back()),
        ("ctrl+c", Quit()),
        ("up", None),
    ],
)
def test_enter_branch_name_keys(key: str, expected: object) -> None:
    assert intent_for_key(Mode.ENTER_BRANCH_NAME, key) == expected


def test_processing_ignores_everything_but_ctrl_c() -> None:
    assert intent_for_key(Mode.PROCESSING, "q") == Quit()
    assert intent_for_key(Mode.PROCESSING, "enter") is None


def test_results_screen_quits_on_enter() -> None:
    assert intent_for_key(Mode.SHOW_RESULTS, "enter") == Quit()
    assert intent_for_key(Mode.SHOW_RESULTS, "down") is None
