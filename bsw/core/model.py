from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RepositoryDescriptor:
    """A discovered repository: display name and absolute path."""

    name: str
    path: Path


@dataclass(frozen=True, slots=True)
class SwitchToMain:
    """Stash, fetch, recreate main from the remote and pull."""

    @property
    def label(self) -> str:
        return "switch to main"


@dataclass(frozen=True, slots=True)
class SwitchToMainAndBranch:
    """SwitchToMain followed by creating a new branch from main."""

    new_branch_name: str

    def __post_init__(self) -> None:
        if not self.new_branch_name.strip():
            raise ValueError("new_branch_name must not be blank")

    @property
    def label(self) -> str:
        return f"switch to main and create {self.new_branch_name}"


OperationSpec = SwitchToMain | SwitchToMainAndBranch


class Stage(StrEnum):
    """Step of the branch switch at which a repository failed."""

    FETCH = "fetch"
    CHECKOUT = "checkout"
    PULL = "pull"
    BRANCH_CREATE = "branch-create"
    # Work for the repository never ran to completion (internal error).
    LAUNCH = "launch"


@dataclass(frozen=True, slots=True)
class Success:
    # Diagnostics from best-effort steps that failed unexpectedly.
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Failure:
    stage: Stage
    message: str


RepositoryOutcome = Success | Failure


@dataclass(frozen=True, slots=True)
class BatchEntry:
    repository: RepositoryDescriptor
    outcome: RepositoryOutcome

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcomes of one batch, in the order repositories were submitted."""

    entries: tuple[BatchEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[BatchEntry]:
        return iter(self.entries)

    @property
    def succeeded(self) -> list[BatchEntry]:
        return [e for e in self.entries if e.ok]

    @property
    def failed(self) -> list[BatchEntry]:
        return [e for e in self.entries if not e.ok]

    @property
    def ok(self) -> bool:
        """True if every repository succeeded (vacuously true when empty)."""
        return all(e.ok for e in self.entries)
