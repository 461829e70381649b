"""Branch switch for a single repository.

Sequence (strictly in order, each step a git command in the repository):

1. stash                          best-effort
2. fetch <remote>                 Failure(FETCH)
3. branch -D <main>               best-effort
4. checkout -B <main> --track <remote>/<main>   Failure(CHECKOUT)
   pull <remote> <main>           Failure(PULL)
5. checkout -b <new branch>       Failure(BRANCH_CREATE), only for
                                  SwitchToMainAndBranch

Nothing is rolled back when a later step fails; the Failure names the
step so the operator can pick up from there.
"""

from __future__ import annotations

from bsw.core.config import Config
from bsw.core.model import (
    Failure,
    OperationSpec,
    RepositoryDescriptor,
    RepositoryOutcome,
    Stage,
    Success,
    SwitchToMainAndBranch,
)
from bsw.core.result import Err, Ok, Result
from bsw.git.repository import GitError, Repository
from bsw.output.console import ConsoleProtocol, RichConsole
from bsw.platform.process import CommandRunner, SubprocessRunner

__all__ = ["BranchSwitcher"]

# Lower-cased fragments of git diagnostics that mean "nothing to do" for a
# best-effort step. Anything else is reported as a warning.
_STASH_NOOP = ("no local changes", "do not have the initial commit")
_DELETE_NOOP = ("not found", "checked out at", "currently on", "used by worktree")


class BranchSwitcher:
    """Runs the switch sequence against one repository at a time.

    Safe to share between threads: it holds no per-call state.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner | None = None,
        config: Config | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._runner: CommandRunner = runner or SubprocessRunner()
        self._config = config or Config()
        self._console: ConsoleProtocol = console or RichConsole()

    def execute(self, repo: RepositoryDescriptor, op: OperationSpec) -> RepositoryOutcome:
        remote = self._config.git.remote
        main = self._config.git.main_branch
        git = Repository(repo.path, runner=self._runner, timeouts=self._config.timeouts)
        warnings: list[str] = []

        self._debug(repo, f"stash ({op.label})")
        self._best_effort(repo, git.stash(), _STASH_NOOP, warnings)

        self._debug(repo, f"fetch {remote}")
        match git.fetch(remote):
            case Err(e):
                return _failure(Stage.FETCH, e)
            case Ok(_):
                pass

        self._debug(repo, f"branch -D {main}")
        self._best_effort(repo, git.delete_branch(main), _DELETE_NOOP, warnings)

        self._debug(repo, f"checkout {main} tracking {remote}/{main}")
        match git.checkout_tracking(main, remote):
            case Err(e):
                return _failure(Stage.CHECKOUT, e)
            case Ok(_):
                pass

        self._debug(repo, f"pull {remote} {main}")
        match git.pull(remote, main):
            case Err(e):
                return _failure(Stage.PULL, e)
            case Ok(_):
                pass

        if isinstance(op, SwitchToMainAndBranch):
            self._debug(repo, f"checkout -b {op.new_branch_name}")
            match git.create_branch(op.new_branch_name):
                case Err(e):
                    return _failure(Stage.BRANCH_CREATE, e)
                case Ok(_):
                    pass

        return Success(warnings=tuple(warnings))

    def _best_effort(
        self,
        repo: RepositoryDescriptor,
        result: Result[str, GitError],
        noop_markers: tuple[str, ...],
        warnings: list[str],
    ) -> None:
        if not isinstance(result, Err):
            return
        error = result.error
        lowered = error.message.lower()
        if any(marker in lowered for marker in noop_markers):
            self._debug(repo, f"{error.command}: skipped ({error.message})")
            return
        warning = f"{error.command}: {error.message}"
        warnings.append(warning)
        self._debug(repo, f"warning: {warning}")

    def _debug(self, repo: RepositoryDescriptor, message: str) -> None:
        self._console.debug(f"{repo.name}: {message}")


def _failure(stage: Stage, error: GitError) -> Failure:
    return Failure(stage=stage, message=f"git {error.command} failed: {error.message}")
