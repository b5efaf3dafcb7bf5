"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest

from taskflow.github.client import GitHubClient
from taskflow.manager import AppState, TaskManager
from taskflow.models import Configuration, Repository
from taskflow.store import ConfigStore, TaskStore

FIXED_NOW = datetime(2026, 10, 19, 9, 30)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user settings and root logging handlers out of every test."""
    for name in (
        "TASKFLOW_DATA_DIR",
        "TASKFLOW_LOG_LEVEL",
        "TASKFLOW_LOG_FILE",
        "TASKFLOW_GITHUB_BASE_URL",
        "TASKFLOW_GITHUB_WEB_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Provide a temporary data directory."""
    path = tmp_path / "taskflow"
    path.mkdir()
    return path


@pytest.fixture
def config_store(data_dir: Path) -> ConfigStore:
    return ConfigStore(data_dir / "config.json")


@pytest.fixture
def task_store(data_dir: Path) -> TaskStore:
    return TaskStore(data_dir / "tasks.json")


@pytest.fixture
def repository() -> Repository:
    return Repository(owner="octo-org", name="octo-repo", display_name="Octo")


@pytest.fixture
def mock_github() -> Mock:
    """Provide a mocked GitHub client."""
    github = Mock(spec=GitHubClient)
    github.projects_url.return_value = "https://github.com/octo-org/octo-repo/projects"
    return github


@pytest.fixture
def make_manager(
    config_store: ConfigStore, task_store: TaskStore
) -> Callable[..., TaskManager]:
    """Build a TaskManager around an explicit state, without touching the network."""

    def _make(
        *,
        github: GitHubClient | None = None,
        repositories: list[Repository] | None = None,
        current: Repository | None = None,
        credential: str | None = None,
        connector: Callable[[str], GitHubClient | None] | None = None,
    ) -> TaskManager:
        config = Configuration(credential=credential, repositories=list(repositories or []))
        state = AppState(config=config, github=github, current_repository=current)
        return TaskManager(
            state=state,
            config_store=config_store,
            task_store=task_store,
            connector=connector or (lambda token: None),
            clock=lambda: FIXED_NOW,
        )

    return _make
