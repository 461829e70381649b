"""Git layer.

- Repository: one working tree, one method per git sub-operation
- discover: find the repositories under a base directory

Usage:
    from bsw.git import Repository, discover

    match discover(base_dir):
        case Ok(descriptors):
            repos = [Repository(d.path) for d in descriptors]
"""

from bsw.git.locator import default_base_dir, discover, is_repository
from bsw.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
    "default_base_dir",
    "discover",
    "is_repository",
]
