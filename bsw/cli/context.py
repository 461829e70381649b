from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from bsw.core.config import Config, default_config_path, load_config
from bsw.core.errors import ErrorCode
from bsw.core.result import Err
from bsw.output.console import RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: RichConsole


def build_context(*, config_path: Path | None = None, verbose: bool = False) -> CLIContext:
    """Load config and build the console.

    An explicitly passed config file must load; the default location is
    only used when it exists.
    """
    console = RichConsole(verbose=verbose)

    path = config_path or default_config_path()
    config = Config()
    if config_path is not None or path.exists():
        result = load_config(path)
        if isinstance(result, Err):
            console.error(result.error.message)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = result.value
        console.debug(f"loaded config from {path}")

    return CLIContext(config=config, console=console)
