"""Tests for custom exceptions."""

import pytest

from hoist.core.exceptions import (
    CherryPickError,
    ConfigurationError,
    GitError,
    HoistError,
    KubernetesError,
    NoopError,
    PublishError,
    ReplayError,
    RequirementsError,
    ResolutionError,
    ScmError,
    UpgradeStepError,
)
from hoist.interfaces.exceptions import InterfaceError, ScmProviderError


@pytest.mark.parametrize(
    "exc_class",
    [
        ConfigurationError,
        RequirementsError,
        GitError,
        ResolutionError,
        ReplayError,
        PublishError,
        ScmError,
        KubernetesError,
    ],
)
def test_errors_inherit_from_hoist_error(exc_class):
    """Test every domain error is a HoistError."""
    error = exc_class("boom")
    assert isinstance(error, HoistError)
    assert str(error) == "boom"


def test_git_error_attributes():
    """Test GitError keeps command details."""
    error = GitError("failed", command=["status"], returncode=128, stderr="fatal: not a repo")

    assert error.command == ["status"]
    assert error.returncode == 128
    assert error.stderr == "fatal: not a repo"


def test_git_error_defaults():
    """Test GitError defaults."""
    error = GitError("failed")

    assert error.command == []
    assert error.returncode is None
    assert error.stderr == ""


def test_cherry_pick_error_is_git_error():
    """Test CherryPickError carries sha and kind."""
    error = CherryPickError("failed", sha="abc123", kind=CherryPickError.MERGE_COMMIT)

    assert isinstance(error, GitError)
    assert error.sha == "abc123"
    assert error.kind == "merge_commit"


def test_noop_error_is_git_error():
    """Test NoopError can be caught as GitError."""
    with pytest.raises(GitError):
        raise NoopError("nothing to commit")


def test_upgrade_step_error_state():
    """Test UpgradeStepError records the failing state."""
    error = UpgradeStepError("on-branch", "failed to update boot configuration: conflict")

    assert error.state == "on-branch"
    assert "conflict" in str(error)


def test_upgrade_step_error_chains_cause():
    """Test the underlying error is reachable through __cause__."""
    cause = ReplayError("cherry-picking abc")
    try:
        try:
            raise cause
        except ReplayError as e:
            raise UpgradeStepError("on-branch", "failed") from e
    except UpgradeStepError as error:
        assert error.__cause__ is cause


def test_scm_provider_error_hierarchy():
    """Test interface errors are separate from HoistError."""
    error = ScmProviderError("api down")

    assert isinstance(error, InterfaceError)
    assert not isinstance(error, HoistError)
