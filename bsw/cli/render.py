"""Screen rendering.

`render` is a pure function of the UIState and the repository list; the
caller decides how to put the result on a terminal.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from bsw.cli.state import ACTIONS, ActionKind, Mode, UIState
from bsw.core.model import BatchResult, Failure, RepositoryDescriptor, Success

__all__ = ["render", "results_table"]

TITLE = "Branch Switcher"

_SELECTED = "bold cyan"
_UNSELECTED = "grey50"
_HELP = "dim"
_ERROR = "bold red"

_HELP_TEXT = {
    Mode.CHOOSE_ACTION: "Up/Down to navigate, Enter to select, q to quit",
    Mode.CHOOSE_REPOSITORIES: "Space to toggle, a for all, Enter to continue, Esc to go back, q to quit",
    Mode.ENTER_BRANCH_NAME: "Type branch name, Enter to continue, Esc to go back",
    Mode.PROCESSING: "Working, please wait",
    Mode.SHOW_RESULTS: "Enter or q to quit",
}


def _action_menu(state: UIState) -> RenderableType:
    lines = [Text("What would you like to do?"), Text()]
    for i, action in enumerate(ACTIONS):
        if i == state.cursor:
            lines.append(Text(f"> {action.description}", style=_SELECTED))
        else:
            lines.append(Text(f"  {action.description}", style=_UNSELECTED))
    return Group(*lines)


def _repository_list(state: UIState, repositories: Sequence[RepositoryDescriptor]) -> RenderableType:
    verb = "create new branch" if state.action is ActionKind.SWITCH_AND_BRANCH else "switch to main"
    lines = [Text(f"Select repositories to {verb} (all auto-selected):"), Text()]
    for i, repo in enumerate(repositories):
        cursor = ">" if i == state.cursor else " "
        checked = state.is_selected(i)
        box = "[x]" if checked else "[ ]"
        lines.append(Text(f"{cursor} {box} {repo.name}", style=_SELECTED if checked else _UNSELECTED))
    lines.append(Text())
    lines.append(Text(f"Selected: {len(state.selected)}/{len(repositories)}"))
    return Group(*lines)


def _branch_input(state: UIState) -> RenderableType:
    return Group(Text("Enter branch name:"), Text(), Text(f"> {state.branch_name}_"))


def _processing(state: UIState) -> RenderableType:
    count = len(state.selected)
    noun = "repository" if count == 1 else "repositories"
    return Text(f"Processing {count} {noun}...")


def results_table(result: BatchResult) -> Table:
    """One row per repository: name, status, failing stage, message."""
    table = Table(show_header=True, header_style="bold magenta", expand=False)
    table.add_column("Repository", style="bold")
    table.add_column("Status")
    table.add_column("Stage")
    table.add_column("Message", overflow="fold")

    for entry in result:
        outcome = entry.outcome
        match outcome:
            case Failure(stage=stage, message=message):
                table.add_row(entry.repository.name, Text("FAILED", style="red"), str(stage), message)
            case Success(warnings=warnings):
                note = "; ".join(warnings)
                table.add_row(entry.repository.name, Text("OK", style="green"), "", note)
    return table


def _summary(result: BatchResult) -> Text:
    failed = len(result.failed)
    text = Text(f"{len(result.succeeded)} succeeded", style="green")
    text.append(", ")
    text.append(f"{failed} failed", style="red" if failed else "green")
    return text


def _results(state: UIState) -> RenderableType:
    if state.result is None:
        return Text("No results.")
    return Group(results_table(state.result), Text(), _summary(state.result))


def render(state: UIState, repositories: Sequence[RepositoryDescriptor]) -> RenderableType:
    parts: list[RenderableType] = [Text(f" {TITLE} ", style="bold white on dark_violet"), Text()]

    if state.error:
        parts.append(Text(f"error: {state.error}", style=_ERROR))
        parts.append(Text())

    match state.mode:
        case Mode.CHOOSE_ACTION:
            parts.append(_action_menu(state))
        case Mode.CHOOSE_REPOSITORIES:
            parts.append(_repository_list(state, repositories))
        case Mode.ENTER_BRANCH_NAME:
            parts.append(_branch_input(state))
        case Mode.PROCESSING:
            parts.append(_processing(state))
        case Mode.SHOW_RESULTS:
            parts.append(_results(state))

    parts.append(Text())
    parts.append(Text(_HELP_TEXT[state.mode], style=_HELP))
    return Group(*parts)
