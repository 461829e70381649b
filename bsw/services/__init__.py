"""Services: the per-repository branch switch and the batch that runs it."""

from bsw.services.batch import BatchOrchestrator, RepositoryExecutor
from bsw.services.switcher import BranchSwitcher

__all__ = ["BatchOrchestrator", "BranchSwitcher", "RepositoryExecutor"]
