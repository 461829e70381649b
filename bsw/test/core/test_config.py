"""Tests for bsw.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from bsw.core.config import (
    Config,
    GitConfig,
    TimeoutsConfig,
    default_config_path,
    load_config,
)
from bsw.core.result import Err, Ok


class TestDefaults:
    def test_git_defaults(self) -> None:
        config = GitConfig()
        assert config.remote == "origin"
        assert config.main_branch == "main"

    def test_timeouts_defaults(self) -> None:
        config = TimeoutsConfig()
        assert config.local == 30.0
        assert config.network == 180.0

    def test_config_defaults(self) -> None:
        config = Config()
        assert config.batch.max_workers is None
        assert config.git == GitConfig()

    def test_frozen(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.git = GitConfig(remote="upstream")  # type: ignore[misc]


class TestFromDict:
    def test_empty_dict_gives_defaults(self) -> None:
        assert Config.from_dict({}) == Config()

    def test_overrides(self) -> None:
        config = Config.from_dict(
            {
                "git": {"remote": "upstream", "main_branch": "trunk"},
                "batch": {"max_workers": 4},
                "timeouts": {"local": 5, "network": 60.5},
            }
        )
        assert config.git.remote == "upstream"
        assert config.git.main_branch == "trunk"
        assert config.batch.max_workers == 4
        assert config.timeouts.local == 5.0
        assert config.timeouts.network == 60.5

    def test_blank_strings_fall_back(self) -> None:
        config = Config.from_dict({"git": {"remote": "   "}})
        assert config.git.remote == "origin"

    def test_wrong_types_are_ignored(self) -> None:
        config = Config.from_dict({"batch": {"max_workers": "many"}, "git": "oops"})
        assert config.batch.max_workers is None
        assert config.git.remote == "origin"

    def test_zero_workers_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            Config.from_dict({"batch": {"max_workers": 0}})

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValueError, match="timeouts"):
            Config.from_dict({"timeouts": {"network": -1}})

    def test_zero_timeout_rejected(self) -> None:
        with pytest.raises(ValueError, match="timeouts"):
            Config.from_dict({"timeouts": {"local": 0}})


class TestLoadConfig:
    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[git]\nremote = "upstream"\n\n[batch]\nmax_workers = 2\n')

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.git.remote == "upstream"
        assert result.value.batch.max_workers == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message
        assert result.error.path == tmp_path / "missing.toml"

    def test_directory_is_an_error(self, tmp_path: Path) -> None:
        result = load_config(tmp_path)

        assert isinstance(result, Err)
        assert result.error.path == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[git\nremote = ")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_out_of_range_value(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[batch]\nmax_workers = 0\n")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message


class TestDefaultConfigPath:
    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BSW_CONFIG", str(tmp_path / "custom.toml"))
        assert default_config_path() == tmp_path / "custom.toml"

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BSW_CONFIG", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_config_path() == tmp_path / ".config" / "bsw" / "config.toml"
