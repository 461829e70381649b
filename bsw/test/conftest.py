from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from bsw.core.model import RepositoryDescriptor
from bsw.test.fakes import FakeRunner


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_repos(tmp_path: Path) -> Callable[..., list[RepositoryDescriptor]]:
    """Factory: descriptors for the given names under tmp_path (dirs created)."""

    def _make(*names: str) -> list[RepositoryDescriptor]:
        repos: list[RepositoryDescriptor] = []
        for name in names:
            path = tmp_path / name
            path.mkdir(exist_ok=True)
            repos.append(RepositoryDescriptor(name=name, path=path))
        return repos

    return _make
