import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from spec_planner_git.config import RepositoryServiceConfig
from spec_planner_git.executor import GitExecutor
from spec_planner_git.service import RepositoryService


@pytest.fixture(autouse=True)
def git_env(monkeypatch, tmp_path):
    """Give git a fixed identity and keep it away from user/system config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Spec Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Spec Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))


@pytest.fixture
def project_dir(tmp_path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def make_service(project_dir):
    """Factory for services bound to the temporary project directory."""
    created = []

    def _make(**overrides) -> RepositoryService:
        config = RepositoryServiceConfig(cwd=project_dir, **overrides)
        service = RepositoryService(config)
        created.append(service)
        return service

    yield _make
    for service in created:
        service.dispose()


@pytest.fixture
def mock_executor():
    """GitExecutor double with awaitable run/run_silent."""
    executor = MagicMock(spec=GitExecutor)
    executor.run = AsyncMock(return_value="")
    executor.run_silent = AsyncMock(return_value=None)
    executor.cwd = Path("/tmp/mock-repo")
    return executor


@pytest.fixture
def mocked_service(project_dir, mock_executor) -> RepositoryService:
    service = RepositoryService(RepositoryServiceConfig(cwd=project_dir))
    service.executor = mock_executor
    yield service
    service.dispose()
