from __future__ import annotations

import queue
from collections.abc import Sequence

from bsw.cli.state import BatchCompleted, Intent, Mode, StartBatch, UIState, reduce
from bsw.core.model import BatchResult, RepositoryDescriptor
from bsw.services.batch import BatchOrchestrator

__all__ = ["SelectionController"]


class SelectionController:
    """Owns the UIState and runs the effects the reducer asks for.

    Intents are applied one at a time on the caller's thread. A StartBatch
    effect hands the work to the orchestrator's background thread; the
    finished BatchResult comes back through a queue and is applied by
    `poll`/`wait`, again on the caller's thread.
    """

    def __init__(
        self,
        repositories: Sequence[RepositoryDescriptor],
        orchestrator: BatchOrchestrator,
    ) -> None:
        self._repositories = tuple(repositories)
        self._orchestrator = orchestrator
        self._state = UIState()
        self._completions: queue.Queue[BatchResult] = queue.Queue()

    @property
    def state(self) -> UIState:
        return self._state

    @property
    def repositories(self) -> tuple[RepositoryDescriptor, ...]:
        return self._repositories

    def dispatch(self, intent: Intent) -> UIState:
        transition = reduce(self._state, intent, len(self._repositories))
        self._state = transition.state
        if isinstance(transition.effect, StartBatch):
            repos = [self._repositories[i] for i in transition.effect.indices]
            self._orchestrator.start_batch(repos, transition.effect.op, self._completions.put)
        return self._state

    def poll(self, timeout: float | None = 0) -> bool:
        """Apply a finished batch if one is available.

        Args:
            timeout: Seconds to wait; 0 checks without blocking, None waits
                indefinitely.

        Returns:
            True if a completion was applied.
        """
        try:
            if timeout == 0:
                result = self._completions.get_nowait()
            else:
                result = self._completions.get(timeout=timeout)
        except queue.Empty:
            return False
        self.dispatch(BatchCompleted(result))
        return True

    def wait(self) -> UIState:
        """Block until the running batch has been applied."""
        while self._state.mode is Mode.PROCESSING:
            self.poll(timeout=None)
        return self._state
