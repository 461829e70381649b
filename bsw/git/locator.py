"""Repository discovery.

Finds the git repositories sitting directly under a base directory,
typically the parent of the directory the tool was started from:

    match discover(default_base_dir()):
        case Ok(repos):
            for repo in repos:
                print(repo.name, repo.path)
        case Err(error):
            print(error.message)
"""

from __future__ import annotations

import os
from pathlib import Path

from bsw.core.errors import DiscoveryError
from bsw.core.model import RepositoryDescriptor
from bsw.core.result import Err, Ok, Result

__all__ = ["default_base_dir", "discover", "is_repository"]


def default_base_dir() -> Path:
    """Parent of the current working directory."""
    return Path.cwd().resolve().parent


def is_repository(path: Path) -> bool:
    """True if path is a directory that directly contains a .git directory.

    Worktrees and submodules, whose .git is a file, do not count.
    """
    return path.is_dir() and (path / ".git").is_dir()


def discover(base_dir: Path) -> Result[list[RepositoryDescriptor], DiscoveryError]:
    """Find all git repositories one level below base_dir.

    Args:
        base_dir: Directory whose children are scanned

    Returns:
        Ok(descriptors) sorted by name using byte-wise comparison (possibly
        empty), or Err(DiscoveryError) if base_dir cannot be listed.
    """
    base = base_dir.resolve()
    try:
        children = list(base.iterdir())
    except FileNotFoundError:
        return Err(DiscoveryError(path=base, message=f"directory not found: {base}"))
    except NotADirectoryError:
        return Err(DiscoveryError(path=base, message=f"not a directory: {base}"))
    except OSError as e:
        return Err(DiscoveryError(path=base, message=f"cannot read {base}: {e.strerror or e}"))

    repos = [
        RepositoryDescriptor(name=child.name, path=child)
        for child in children
        if is_repository(child)
    ]
    repos.sort(key=lambda r: os.fsencode(r.name))
    return Ok(repos)
