"""Pytest configuration and shared fixtures."""

import os
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from tfplan_commenter.providers.base import CommentStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Variables read by the CLI and CommenterSettings; cleared so the host CI
# environment cannot leak into tests.
SETTINGS_ENV_VARS = [
    "GITHUB_BASE_URL",
    "GITHUB_PASSWORD",
    "GITHUB_RELEASE_API_KEY",
    "GITHUB_TOKEN",
    "GITHUB_USERNAME",
    "DRONE_COMMIT_SHA",
    "DRONE_NETRC_PASSWORD",
    "DRONE_NETRC_USERNAME",
    "DRONE_PULL_REQUEST",
    "DRONE_REPO_NAME",
    "DRONE_REPO_OWNER",
]


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove plugin and CI variables from the environment."""
    for name in list(os.environ):
        if name.startswith("PLUGIN_") or name in SETTINGS_ENV_VARS:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding plan text fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def plan_text() -> str:
    """Plan output with three resources to add."""
    return (FIXTURES_DIR / "plan_3_to_add.txt").read_text()


@pytest.fixture
def no_changes_text() -> str:
    """Plan output for an empty plan."""
    return (FIXTURES_DIR / "plan_no_changes.txt").read_text()


@pytest.fixture
def mock_store() -> AsyncMock:
    """Comment store double with every method as an AsyncMock."""
    return AsyncMock(spec=CommentStore)
