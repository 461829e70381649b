"""Subprocess execution with Result-based error handling.

Wraps subprocess.run so that non-zero exits, timeouts and missing
executables all come back as a ProcessError value:

    result = run(["git", "fetch", "origin"], cwd=repo_path, timeout=180)
    match result:
        case Ok(stdout):
            ...
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from bsw.core.result import Err, Ok, Result

__all__ = ["CommandRunner", "ProcessError", "SubprocessRunner", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process never completed.
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def detail(self) -> str:
        """Best diagnostic text: stderr, else stdout, else the summary."""
        return self.stderr.strip() or self.stdout.strip() or str(self)


class CommandRunner(Protocol):
    """Anything that can run an external command and report its outcome."""

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]: ...


def run(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            stdin=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        stdout = e.stdout if isinstance(e.stdout, str) else ""
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=stdout,
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def _no_prompt_env() -> dict[str, str]:
    return {"GIT_TERMINAL_PROMPT": "0"}


@dataclass(frozen=True, slots=True)
class SubprocessRunner:
    """CommandRunner backed by `run`.

    `extra_env` is layered over the current environment for every call.
    The default disables git's credential prompt; commands run on worker
    threads while the UI owns the terminal.
    """

    extra_env: Mapping[str, str] = field(default_factory=_no_prompt_env)

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        env = {**os.environ, **self.extra_env} if self.extra_env else None
        return run(cmd, cwd=cwd, env=env, timeout=timeout)
