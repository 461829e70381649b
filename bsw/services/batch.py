"""Run the branch switch across many repositories at once.

Each selected repository gets its own worker. A worker that fails, or
raises, only affects its own entry; the batch always comes back complete
and in submission order:

    orchestrator = BatchOrchestrator(BranchSwitcher())
    result = orchestrator.run_batch(repos, SwitchToMain())
    for entry in result:
        print(entry.repository.name, entry.outcome)
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from bsw.core.model import (
    BatchEntry,
    BatchResult,
    Failure,
    OperationSpec,
    RepositoryDescriptor,
    RepositoryOutcome,
    Stage,
)
from bsw.output.console import ConsoleProtocol, RichConsole

__all__ = ["BatchOrchestrator", "RepositoryExecutor", "DEFAULT_MAX_WORKERS"]

DEFAULT_MAX_WORKERS = 32


class RepositoryExecutor(Protocol):
    def execute(self, repo: RepositoryDescriptor, op: OperationSpec) -> RepositoryOutcome: ...


class BatchOrchestrator:
    """Fan out one executor call per repository, fan the outcomes back in.

    Args:
        executor: Runs the sequence for one repository (BranchSwitcher)
        max_workers: Cap on concurrently running repositories. None means
            one worker per repository, up to DEFAULT_MAX_WORKERS.
        console: Receives debug output about worker progress
    """

    def __init__(
        self,
        executor: RepositoryExecutor,
        *,
        max_workers: int | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._executor = executor
        self._max_workers = max_workers
        self._console: ConsoleProtocol = console or RichConsole()
        self._background: ThreadPoolExecutor | None = None

    def run_batch(
        self, selected: Sequence[RepositoryDescriptor], op: OperationSpec
    ) -> BatchResult:
        """Run op on every selected repository and wait for all of them.

        Returns:
            BatchResult with exactly one entry per repository, in the order
            of `selected` regardless of completion order.
        """
        if not selected:
            return BatchResult()

        workers = min(self._max_workers or DEFAULT_MAX_WORKERS, len(selected))
        self._console.debug(f"running {op.label} on {len(selected)} repositories ({workers} workers)")

        slots = _OutcomeSlots(len(selected))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bsw-repo") as pool:
            for index, repo in enumerate(selected):
                try:
                    pool.submit(self._run_slot, slots, index, repo, op)
                except RuntimeError as e:
                    # A failed thread start leaves the item queued; whoever
                    # claims the slot first reports it.
                    if slots.claim(index):
                        slots.fill(
                            index,
                            Failure(stage=Stage.LAUNCH, message=f"could not start worker: {e}"),
                        )

        entries = tuple(
            BatchEntry(repository=repo, outcome=outcome)
            for repo, outcome in zip(selected, slots.outcomes(), strict=True)
        )
        return BatchResult(entries=entries)

    def start_batch(
        self,
        selected: Sequence[RepositoryDescriptor],
        op: OperationSpec,
        on_complete: Callable[[BatchResult], None],
    ) -> Future[BatchResult]:
        """Run the batch on a background thread.

        on_complete is called exactly once, from the background thread,
        with the finished BatchResult.
        """
        if self._background is None:
            self._background = ThreadPoolExecutor(max_workers=1, thread_name_prefix="bsw-batch")
        repos = tuple(selected)
        future = self._background.submit(self._run_guarded, repos, op)
        future.add_done_callback(lambda f: on_complete(f.result()))
        return future

    def close(self) -> None:
        """Release the background thread; waits for a running batch."""
        if self._background is not None:
            self._background.shutdown(wait=True)
            self._background = None

    def _run_guarded(
        self, selected: tuple[RepositoryDescriptor, ...], op: OperationSpec
    ) -> BatchResult:
        try:
            return self.run_batch(selected, op)
        except Exception as e:  # noqa: BLE001
            failure = Failure(stage=Stage.LAUNCH, message=f"batch aborted: {e}")
            return BatchResult(entries=tuple(BatchEntry(repo, failure) for repo in selected))

    def _run_slot(
        self,
        slots: _OutcomeSlots,
        index: int,
        repo: RepositoryDescriptor,
        op: OperationSpec,
    ) -> None:
        if slots.claim(index):
            slots.fill(index, self._execute_one(repo, op))

    def _execute_one(self, repo: RepositoryDescriptor, op: OperationSpec) -> RepositoryOutcome:
        try:
            outcome = self._executor.execute(repo, op)
        except Exception as e:  # noqa: BLE001
            outcome = Failure(stage=Stage.LAUNCH, message=f"{type(e).__name__}: {e}")
        self._console.debug(f"{repo.name}: done ({_describe(outcome)})")
        return outcome


def _describe(outcome: RepositoryOutcome) -> str:
    if isinstance(outcome, Failure):
        return f"failed at {outcome.stage}"
    return "ok"


class _OutcomeSlots:
    """One outcome per submitted repository; the first claim on a slot wins."""

    def __init__(self, size: int) -> None:
        self._outcomes: list[RepositoryOutcome | None] = [None] * size
        self._claimed: set[int] = set()
        self._lock = threading.Lock()

    def claim(self, index: int) -> bool:
        with self._lock:
            if index in self._claimed:
                return False
            self._claimed.add(index)
            return True

    def fill(self, index: int, outcome: RepositoryOutcome) -> None:
        self._outcomes[index] = outcome

    def outcomes(self) -> list[RepositoryOutcome]:
        missing = [i for i, outcome in enumerate(self._outcomes) if outcome is None]
        if missing:
            raise RuntimeError(f"no outcome recorded for slots {missing}")
        return [outcome for outcome in self._outcomes if outcome is not None]
