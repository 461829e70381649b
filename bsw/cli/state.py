"""Selection state machine.

`reduce` is pure: given the current UIState and one intent it returns the
next state plus an optional effect for the caller to run. Nothing here
touches git, threads or the terminal.

    choose-action --confirm--> choose-repositories --confirm--> processing
                                  |        ^                       ^
                         (branch) |        | back                  |
                                  v        |                       |
                              enter-branch-name -----confirm-------+
    processing --batch completed--> show-results

Quit is accepted everywhere except while processing.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum

from bsw.core.errors import EmptyBranchNameError, EmptySelectionError
from bsw.core.model import BatchResult, OperationSpec, SwitchToMain, SwitchToMainAndBranch

__all__ = [
    "ACTIONS",
    "ActionKind",
    "AppendChar",
    "Back",
    "BatchCompleted",
    "Confirm",
    "DeleteChar",
    "Effect",
    "ExitProgram",
    "Intent",
    "Mode",
    "MoveCursor",
    "Quit",
    "StartBatch",
    "ToggleAll",
    "ToggleOne",
    "Transition",
    "UIState",
    "reduce",
]


class Mode(StrEnum):
    CHOOSE_ACTION = "choose-action"
    CHOOSE_REPOSITORIES = "choose-repositories"
    ENTER_BRANCH_NAME = "enter-branch-name"
    PROCESSING = "processing"
    SHOW_RESULTS = "show-results"


class ActionKind(StrEnum):
    SWITCH = "switch"
    SWITCH_AND_BRANCH = "switch-and-branch"

    @property
    def description(self) -> str:
        if self is ActionKind.SWITCH:
            return "Switch to main and pull latest"
        return "Switch to main, pull latest, and create new branch"


# Display order of the action menu.
ACTIONS: tuple[ActionKind, ...] = (ActionKind.SWITCH, ActionKind.SWITCH_AND_BRANCH)


@dataclass(frozen=True, slots=True)
class UIState:
    """Everything the screen needs to draw itself.

    Attributes:
        mode: Active screen
        cursor: Highlighted row on the active screen
        action: Chosen action, once past choose-action
        selected: Indices of included repositories (absent == not selected)
        branch_name: Text typed so far on enter-branch-name
        error: Transient message, cleared by the next intent
        result: Batch outcome, set on show-results
        quit: The user asked to leave
    """

    mode: Mode = Mode.CHOOSE_ACTION
    cursor: int = 0
    action: ActionKind | None = None
    selected: frozenset[int] = frozenset()
    branch_name: str = ""
    error: str | None = None
    result: BatchResult | None = None
    quit: bool = False

    def is_selected(self, index: int) -> bool:
        return index in self.selected


# -----------------------------------------------------------------------------
# Intents
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MoveCursor:
    delta: int


@dataclass(frozen=True, slots=True)
class ToggleOne:
    pass


@dataclass(frozen=True, slots=True)
class ToggleAll:
    pass


@dataclass(frozen=True, slots=True)
class Confirm:
    pass


@dataclass(frozen=True, slots=True)
class Back:
    pass


@dataclass(frozen=True, slots=True)
class Quit:
    pass


@dataclass(frozen=True, slots=True)
class AppendChar:
    char: str


@dataclass(frozen=True, slots=True)
class DeleteChar:
    pass


@dataclass(frozen=True, slots=True)
class BatchCompleted:
    result: BatchResult


Intent = (
    MoveCursor
    | ToggleOne
    | ToggleAll
    | Confirm
    | Back
    | Quit
    | AppendChar
    | DeleteChar
    | BatchCompleted
)


# -----------------------------------------------------------------------------
# Effects
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StartBatch:
    """Run op on the repositories at these indices (ascending)."""

    indices: tuple[int, ...]
    op: OperationSpec


@dataclass(frozen=True, slots=True)
class ExitProgram:
    pass


Effect = StartBatch | ExitProgram


@dataclass(frozen=True, slots=True)
class Transition:
    state: UIState
    effect: Effect | None = None


Handler = Callable[[UIState, Intent, int], Transition]


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))


def _start(state: UIState, op: OperationSpec) -> Transition:
    return Transition(
        state=replace(state, mode=Mode.PROCESSING),
        effect=StartBatch(indices=tuple(sorted(state.selected)), op=op),
    )


def _choose_action(state: UIState, intent: Intent, count: int) -> Transition:
    match intent:
        case MoveCursor(delta=delta):
            return Transition(replace(state, cursor=_clamp(state.cursor + delta, len(ACTIONS) - 1)))
        case Confirm():
            return Transition(
                replace(
                    state,
                    mode=Mode.CHOOSE_REPOSITORIES,
                    action=ACTIONS[state.cursor],
                    selected=frozenset(range(count)),
                    cursor=0,
                )
            )
        case _:
            return Transition(state)


def _choose_repositories(state: UIState, intent: Intent, count: int) -> Transition:
    match intent:
        case MoveCursor(delta=delta):
            return Transition(replace(state, cursor=_clamp(state.cursor + delta, count - 1)))
        case ToggleOne():
            if count == 0:
                return Transition(state)
            return Transition(replace(state, selected=state.selected ^ {state.cursor}))
        case ToggleAll():
            everything = frozenset(range(count))
            selected = frozenset() if state.selected == everything else everything
            return Transition(replace(state, selected=selected))
        case Confirm():
            if not state.selected:
                return Transition(replace(state, error=EmptySelectionError().message))
            if state.action is ActionKind.SWITCH_AND_BRANCH:
                return Transition(replace(state, mode=Mode.ENTER_BRANCH_NAME, branch_name=""))
            return _start(state, SwitchToMain())
        case Back():
            return Transition(
                replace(state, mode=Mode.CHOOSE_ACTION, selected=frozenset(), cursor=0)
            )
        case _:
            return Transition(state)


def _enter_branch_name(state: UIState, intent: Intent, count: int) -> Transition:
    match intent:
        case AppendChar(char=char):
            if len(char) != 1 or not char.isprintable():
                return Transition(state)
            return Transition(replace(state, branch_name=state.branch_name + char))
        case DeleteChar():
            return Transition(replace(state, branch_name=state.branch_name[:-1]))
        case Confirm():
            name = state.branch_name.strip()
            if not name:
                return Transition(replace(state, error=EmptyBranchNameError().message))
            return _start(replace(state, branch_name=name), SwitchToMainAndBranch(name))
        case Back():
            return Transition(replace(state, mode=Mode.CHOOSE_REPOSITORIES))
        case _:
            return Transition(state)


def _processing(state: UIState, intent: Intent, count: int) -> Transition:
    match intent:
        case BatchCompleted(result=result):
            return Transition(replace(state, mode=Mode.SHOW_RESULTS, result=result, cursor=0))
        case _:
            return Transition(state)


def _show_results(state: UIState, intent: Intent, count: int) -> Transition:
    return Transition(state)


_HANDLERS: Mapping[Mode, Handler] = {
    Mode.CHOOSE_ACTION: _choose_action,
    Mode.CHOOSE_REPOSITORIES: _choose_repositories,
    Mode.ENTER_BRANCH_NAME: _enter_branch_name,
    Mode.PROCESSING: _processing,
    Mode.SHOW_RESULTS: _show_results,
}


def reduce(state: UIState, intent: Intent, repository_count: int) -> Transition:
    """Apply one intent.

    Args:
        state: Current state
        intent: What the user (or the finished batch) asked for
        repository_count: Number of discovered repositories

    Returns:
        The next state and the effect to run, if any. Intents that make no
        sense in the current mode leave the state as is (minus the error).
    """
    if state.error is not None:
        state = replace(state, error=None)

    if isinstance(intent, Quit):
        if state.mode is Mode.PROCESSING:
            return Transition(state)
        return Transition(replace(state, quit=True), effect=ExitProgram())

    return _HANDLERS[state.mode](state, intent, repository_count)
