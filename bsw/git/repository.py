"""Git repository abstraction.

One method per git sub-operation the branch switch needs. Every method
returns a Result; the command's own diagnostic text ends up in
GitError.message.

Usage:
    repo = Repository(Path("/path/to/repo"), runner=SubprocessRunner())

    match repo.fetch("origin"):
        case Ok(_):
            ...
        case Err(e):
            print(f"{e.command}: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bsw.core.config import TimeoutsConfig
from bsw.core.result import Err, Ok, Result
from bsw.platform.process import CommandRunner, ProcessError, SubprocessRunner

__all__ = ["GitError", "Repository"]

_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand line that failed (e.g. "fetch origin")
        message: Diagnostic text from git
        returncode: Process return code (-1 for timeouts and launch errors)
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """Git operations on a single working tree.

    Attributes:
        path: Path to the repository root
    """

    def __init__(
        self,
        path: Path,
        *,
        runner: CommandRunner | None = None,
        timeouts: TimeoutsConfig | None = None,
    ) -> None:
        self.path = path
        self._runner: CommandRunner = runner or SubprocessRunner()
        self._timeouts = timeouts or TimeoutsConfig()

    def stash(self) -> Result[str, GitError]:
        """Stash uncommitted changes."""
        return self._git(["stash"])

    def fetch(self, remote: str) -> Result[str, GitError]:
        return self._git(["fetch", remote])

    def delete_branch(self, branch: str) -> Result[str, GitError]:
        """Force-delete a local branch (`branch -D`)."""
        return self._git(["branch", "-D", branch])

    def checkout_tracking(self, branch: str, remote: str) -> Result[str, GitError]:
        """Check out `branch` tracking `remote/branch`.

        Uses `-B` so the branch is reset to the remote one even when it
        still exists locally, e.g. because it is the current branch and
        could not be deleted.
        """
        return self._git(["checkout", "-B", branch, "--track", f"{remote}/{branch}"])

    def pull(self, remote: str, branch: str) -> Result[str, GitError]:
        return self._git(["pull", remote, branch])

    def create_branch(self, branch: str) -> Result[str, GitError]:
        """Create and check out a new branch from HEAD (`checkout -b`)."""
        return self._git(["checkout", "-b", branch])

    def _git(self, args: list[str]) -> Result[str, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_to_git_error(args, e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            self._timeouts.network if command in _NETWORK_COMMANDS else self._timeouts.local
        )
        return self._runner.run(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


def _to_git_error(args: list[str], error: ProcessError) -> GitError:
    return GitError(
        command=" ".join(args),
        message=error.detail,
        returncode=error.returncode,
    )
