"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import yaml

from hoist.clients.git_cli import GitCLI
from hoist.core.config import UpgraderConfig
from hoist.core.models import PullRequestSpec
from hoist.interfaces.scm_provider import PullRequestInfo, RepositoryInfo

VERSIONS_URL = "https://github.com/jenkins-x/jenkins-x-versions.git"


@pytest.fixture
def upgrader_config() -> UpgraderConfig:
    """Provide the default configuration."""
    return UpgraderConfig()


@pytest.fixture
def mock_git() -> MagicMock:
    """Mock git wrapper for testing."""
    return MagicMock(spec=GitCLI)


@pytest.fixture
def sample_requirements() -> dict[str, Any]:
    """Sample jx-requirements.yml content."""
    return {
        "cluster": {"provider": "gke", "clusterName": "dev-cluster", "project": "jx-dev"},
        "environments": [{"key": "dev"}, {"key": "staging"}, {"key": "production"}],
        "versionStream": {"url": VERSIONS_URL, "ref": "master"},
        "webhook": "lighthouse",
    }


@pytest.fixture
def gitops_dir(tmp_path: Path, sample_requirements: dict[str, Any]) -> Path:
    """Create a GitOps directory holding a requirements file."""
    work_dir = tmp_path / "environment-dev"
    work_dir.mkdir()
    with (work_dir / "jx-requirements.yml").open("w") as f:
        yaml.safe_dump(sample_requirements, f, sort_keys=False)
    return work_dir


@pytest.fixture
def sample_repository() -> RepositoryInfo:
    """Sample provider repository."""
    return RepositoryInfo(
        full_name="acme/environment-dev",
        clone_url="https://github.com/acme/environment-dev.git",
        default_branch="master",
        web_url="https://github.com/acme/environment-dev",
    )


@pytest.fixture
def sample_pull_request() -> PullRequestInfo:
    """Sample open upgrade pull request."""
    return PullRequestInfo(
        number=42,
        title="feat(config): upgrade configuration",
        description="Upgrade configuration",
        source_branch="hoist_boot_upgrade_branch",
        target_branch="master",
        state="open",
        web_url="https://github.com/acme/environment-dev/pull/42",
        labels=["jx-boot-upgrade"],
    )


@pytest.fixture
def pull_request_spec() -> PullRequestSpec:
    """Pull request spec built from the default configuration."""
    return PullRequestSpec(
        branch_name="hoist_boot_upgrade_branch",
        title="feat(config): upgrade configuration",
        message="Upgrade configuration",
        labels={"jx-boot-upgrade"},
    )


# ==============================================================================
# Pytest Markers
# ==============================================================================


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
