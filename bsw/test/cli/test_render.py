"""Tests for cli/render.py."""

from __future__ import annotations

import io
from dataclasses import replace
from pathlib import Path

from rich.console import Console

from bsw.cli.render import render
from bsw.cli.state import ActionKind, Mode, UIState
from bsw.core.model import (
    BatchEntry,
    BatchResult,
    Failure,
    RepositoryDescriptor,
    Stage,
    Success,
)

REPOS = [
    RepositoryDescriptor(name="api", path=Path("/w/api")),
    RepositoryDescriptor(name="web", path=Path("/w/web")),
]


def _text(state: UIState) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None, force_terminal=False)
    console.print(render(state, REPOS))
    return buffer.getvalue()


class TestRender:
    def test_action_menu(self) -> None:
        text = _text(UIState(cursor=1))

        assert "Branch Switcher" in text
        assert "  Switch to main and pull latest" in text
        assert "> Switch to main, pull latest, and create new branch" in text

    def test_repository_list(self) -> None:
        state = UIState(
            mode=Mode.CHOOSE_REPOSITORIES,
            action=ActionKind.SWITCH,
            selected=frozenset({1}),
            cursor=0,
        )

        text = _text(state)

        assert "Select repositories to switch to main" in text
        assert "> [ ] api" in text
        assert "  [x] web" in text
        assert "Selected: 1/2" in text

    def test_error_is_shown(self) -> None:
        state = UIState(mode=Mode.CHOOSE_REPOSITORIES, error="No repositories selected")
        assert "error: No repositories selected" in _text(state)

    def test_branch_input(self) -> None:
        state = UIState(mode=Mode.ENTER_BRANCH_NAME, branch_name="feature/x")
        assert "> feature/x_" in _text(state)

    def test_processing(self) -> None:
        state = UIState(mode=Mode.PROCESSING, selected=frozenset({0, 1}))
        assert "Processing 2 repositories..." in _text(state)

    def test_results(self) -> None:
        result = BatchResult(
            entries=(
                BatchEntry(REPOS[0], Success()),
                BatchEntry(REPOS[1], Failure(stage=Stage.FETCH, message="no such remote")),
            )
        )
        state = replace(UIState(), mode=Mode.SHOW_RESULTS, result=result)

        text = _text(state)

        assert "api" in text and "OK" in text
        assert "FAILED" in text
        assert "fetch" in text
        assert "no such remote" in text
        assert "1 succeeded, 1 failed" in text

    def test_render_is_pure(self) -> None:
        state = UIState(mode=Mode.CHOOSE_REPOSITORIES, error="x")
        _text(state)
        assert state.error == "x"
