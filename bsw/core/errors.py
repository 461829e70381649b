"""Error records and process exit codes.

Errors are plain frozen dataclasses passed around inside `Err(...)` or
stored on UI state; nothing here is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

__all__ = [
    "DiscoveryError",
    "EmptyBranchNameError",
    "EmptySelectionError",
    "ErrorCode",
]


class ErrorCode(IntEnum):
    """Exit codes for the bsw command.

    - 0: Success
    - 1: User error (bad config, nothing to work on)
    - 2: Environment error (no interactive terminal)
    - 5: I/O error (base directory unreadable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    IO_ERROR = 5


@dataclass(frozen=True, slots=True)
class DiscoveryError:
    """The base directory could not be scanned for repositories."""

    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class EmptySelectionError:
    message: str = "No repositories selected"


@dataclass(frozen=True, slots=True)
class EmptyBranchNameError:
    message: str = "Branch name cannot be empty"
