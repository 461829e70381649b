"""Tests for bsw.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from bsw.core.result import Err, Ok
from bsw.platform.process import ProcessError, SubprocessRunner, run


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("git", "-C", "/repo", "fetch", "origin"),
            returncode=128,
            stdout="",
            stderr="",
        )
        assert str(error) == "git -C /repo ... failed (exit 128)"

    def test_detail_prefers_stderr(self) -> None:
        error = ProcessError(("git",), 1, stdout="out", stderr="  err\n")
        assert error.detail == "err"

    def test_detail_falls_back_to_stdout_then_summary(self) -> None:
        assert ProcessError(("git",), 1, stdout="out", stderr="").detail == "out"
        assert ProcessError(("git",), 2, stdout="", stderr="").detail == "git failed (exit 2)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('bad things'); sys.exit(42)"
        result = run([sys.executable, "-c", code], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert "bad things" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert Path(result.value.strip()).resolve() == tmp_path.resolve()


class TestSubprocessRunner:
    def test_disables_git_prompt(self, tmp_path: Path) -> None:
        code = "import os; print(os.environ.get('GIT_TERMINAL_PROMPT'))"
        result = SubprocessRunner().run([sys.executable, "-c", code], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert result.value.strip() == "0"

    def test_extra_env_layered_over_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BSW_TEST_INHERITED", "yes")
        code = "import os; print(os.environ['BSW_TEST_INHERITED'], os.environ['BSW_EXTRA'])"
        runner = SubprocessRunner(extra_env={"BSW_EXTRA": "1"})

        result = runner.run([sys.executable, "-c", code], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert result.value.split() == ["yes", "1"]
