"""Shared test fixtures for snapgit."""

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

from snapgit import Repository, Settings


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env file or SNAPGIT_* variables."""
    return Settings(
        _env_file=None,
        repo_dir=".snapgit",
        default_branch="master",
        initial_message="initial commit",
    )


@pytest.fixture
def clock() -> Callable[[], int]:
    """A clock that ticks one second per call, so commit ids never collide."""
    return itertools.count(1_700_000_000).__next__


@pytest.fixture
def repo(tmp_path: Path, settings: Settings, clock) -> Repository:
    """An initialized repository in a temp directory."""
    repository = Repository(tmp_path / "work", settings, clock=clock)
    repository.root.mkdir()
    repository.init()
    return repository


@pytest.fixture
def commit_files(repo: Repository) -> Callable[..., str]:
    """Write FILES, stage them and the REMOVED paths, then commit."""

    def _commit(message, files=None, removed=()):
        for path, text in (files or {}).items():
            full = repo.root / path
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_text(text)
            repo.add(path)
        for path in removed:
            repo.rm(path)
        return repo.commit(message)

    return _commit
