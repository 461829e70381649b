from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console

from bsw import __version__
from bsw.cli.context import build_context
from bsw.cli.controller import SelectionController
from bsw.cli.keys import intent_for_key, is_interactive_terminal, read_key
from bsw.cli.render import render
from bsw.cli.state import Mode
from bsw.core.errors import ErrorCode
from bsw.core.result import Err, Ok
from bsw.git.locator import default_base_dir, discover
from bsw.services.batch import BatchOrchestrator
from bsw.services.switcher import BranchSwitcher

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def run_interactive(
    controller: SelectionController,
    screen: Console,
    *,
    read: Callable[[], str] = read_key,
    clear: bool = True,
) -> None:
    """Drive the controller until the user quits.

    Redraws after every intent. While a batch runs, the loop blocks on the
    controller (no keys are read) and shows a spinner. Ctrl+C only prints a
    notice; the batch cannot be cancelled.
    """
    interrupted = False
    while True:
        state = controller.state
        if state.quit:
            return
        if clear:
            screen.clear()
        screen.print(render(state, controller.repositories))

        if state.mode is Mode.PROCESSING:
            if interrupted:
                screen.print("Waiting for running git commands to finish...")
            try:
                with screen.status("Running git in selected repositories..."):
                    controller.wait()
            except KeyboardInterrupt:
                interrupted = True
            continue

        intent = intent_for_key(state.mode, read())
        if intent is not None:
            controller.dispatch(intent)


@app.command()
def switch(
    base_dir: Path | None = typer.Option(
        None,
        "--base-dir",
        help="Directory whose child repositories are offered (default: parent of cwd).",
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to config TOML."),
    max_workers: int | None = typer.Option(
        None, "--max-workers", min=1, help="Max repositories processed at once."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", envvar="BSW_DEBUG", help="Show git commands and warnings."
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Switch sibling repositories to an up-to-date main, optionally branching off it."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    ctx = build_context(config_path=config, verbose=verbose)
    console = ctx.console

    base = base_dir.expanduser() if base_dir is not None else default_base_dir()
    match discover(base):
        case Err(error):
            console.error(error.message)
            raise typer.Exit(code=int(ErrorCode.IO_ERROR))
        case Ok(repos):
            pass

    if not repos:
        typer.echo(f"No Git repositories found in {base.resolve()}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    console.debug(f"found {len(repos)} repositories in {base.resolve()}")

    if not is_interactive_terminal():
        console.error("bsw needs an interactive terminal")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    switcher = BranchSwitcher(config=ctx.config, console=console)
    orchestrator = BatchOrchestrator(
        switcher,
        max_workers=max_workers or ctx.config.batch.max_workers,
        console=console,
    )
    controller = SelectionController(repos, orchestrator)
    try:
        # Keep debug lines on screen in verbose mode.
        run_interactive(controller, console.rich, clear=not console.verbose)
    finally:
        orchestrator.close()


def main() -> None:
    app()
