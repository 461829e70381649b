"""Test doubles shared across test modules."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

from bsw.core.result import Err, Ok, Result
from bsw.platform.process import ProcessError


@dataclass(frozen=True, slots=True)
class _Rule:
    repo: str | None
    prefix: tuple[str, ...]
    stderr: str
    returncode: int


@dataclass
class FakeRunner:
    """CommandRunner that records git calls and fails the ones it is told to.

    Commands look like ["git", "-C", <path>, *args]; rules match on the
    repository directory name and a prefix of args.
    """

    rules: list[_Rule] = field(default_factory=list)
    delays: dict[str, float] = field(default_factory=dict)
    calls: list[tuple[str, tuple[str, ...]]] = field(default_factory=list)
    timeouts: list[float | None] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def fail(
        self,
        *prefix: str,
        repo: str | None = None,
        stderr: str = "fatal: simulated failure",
        returncode: int = 1,
    ) -> None:
        self.rules.append(_Rule(repo=repo, prefix=prefix, stderr=stderr, returncode=returncode))

    def delay(self, repo: str, seconds: float) -> None:
        """Slow down every command run in `repo`."""
        self.delays[repo] = seconds

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        args = tuple(cmd[3:])
        with self._lock:
            self.calls.append((cwd.name, args))
            self.timeouts.append(timeout)
        if cwd.name in self.delays:
            time.sleep(self.delays[cwd.name])
        for rule in self.rules:
            if rule.repo is not None and rule.repo != cwd.name:
                continue
            if args[: len(rule.prefix)] == rule.prefix:
                return Err(
                    ProcessError(
                        command=tuple(cmd),
                        returncode=rule.returncode,
                        stdout="",
                        stderr=rule.stderr,
                    )
                )
        return Ok("")

    def args_for(self, repo: str) -> list[tuple[str, ...]]:
        return [args for name, args in self.calls if name == repo]


