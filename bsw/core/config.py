"""Typed configuration loading and access.

The config file is optional TOML:

    [git]
    remote = "origin"
    main_branch = "main"

    [batch]
    max_workers = 8

    [timeouts]
    local = 30
    network = 180
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_number, get_str, get_table

__all__ = [
    "BatchConfig",
    "Config",
    "ConfigError",
    "GitConfig",
    "TimeoutsConfig",
    "default_config_path",
    "load_config",
    "DEFAULT_REMOTE",
    "DEFAULT_MAIN_BRANCH",
    "LOCAL_TIMEOUT_SECONDS",
    "NETWORK_TIMEOUT_SECONDS",
]

DEFAULT_REMOTE = "origin"
DEFAULT_MAIN_BRANCH = "main"

LOCAL_TIMEOUT_SECONDS = 30.0
NETWORK_TIMEOUT_SECONDS = 3 * 60.0

CONFIG_ENV_VAR = "BSW_CONFIG"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Which remote and branch the switch targets."""

    remote: str = DEFAULT_REMOTE
    main_branch: str = DEFAULT_MAIN_BRANCH


@dataclass(frozen=True, slots=True)
class BatchConfig:
    """Worker pool sizing. None means one worker per selected repository (capped at 32)."""

    max_workers: int | None = None


@dataclass(frozen=True, slots=True)
class TimeoutsConfig:
    """Wall-clock limits for a single git invocation, in seconds."""

    local: float = LOCAL_TIMEOUT_SECONDS
    network: float = NETWORK_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    git: GitConfig = field(default_factory=GitConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    timeouts: TimeoutsConfig = field(default_factory=TimeoutsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML.

        Raises:
            ValueError: If a numeric setting is out of range.
        """
        git: StrDict = get_table(data, "git") or {}
        batch: StrDict = get_table(data, "batch") or {}
        timeouts: StrDict = get_table(data, "timeouts") or {}

        max_workers = get_int(batch, "max_workers")
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"batch.max_workers must be >= 1, got {max_workers}")

        local = get_number(timeouts, "local")
        if local is None:
            local = LOCAL_TIMEOUT_SECONDS
        network = get_number(timeouts, "network")
        if network is None:
            network = NETWORK_TIMEOUT_SECONDS
        if local <= 0 or network <= 0:
            raise ValueError("timeouts must be positive")

        return cls(
            git=GitConfig(
                remote=get_str(git, "remote") or DEFAULT_REMOTE,
                main_branch=get_str(git, "main_branch") or DEFAULT_MAIN_BRANCH,
            ),
            batch=BatchConfig(max_workers=max_workers),
            timeouts=TimeoutsConfig(local=local, network=network),
        )


def default_config_path() -> Path:
    """Config location: $BSW_CONFIG, else ~/.config/bsw/config.toml."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "bsw" / "config.toml"


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except IsADirectoryError:
        return Err(ConfigError(f"Config path is a directory: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

