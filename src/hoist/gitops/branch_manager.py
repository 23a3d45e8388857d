"""Ephemeral working branch handling."""

import uuid
from pathlib import Path

from hoist.clients.git_cli import GitCLI
from hoist.core.exceptions import GitError
from hoist.utils.logging import get_logger

logger = get_logger(__name__)


class BranchManager:
    """Creates the throwaway branch an upgrade is staged on and removes it afterwards."""

    def __init__(self, git: GitCLI, work_dir: str | Path, trunk_branch: str = "master"):
        """Initialize branch manager.

        Args:
            git: Git command wrapper
            work_dir: GitOps repository working tree
            trunk_branch: Branch to return to when done
        """
        self.git = git
        self.work_dir = work_dir
        self.trunk_branch = trunk_branch

    def begin(self) -> str:
        """Create and check out a branch with a random name.

        Returns:
            Branch name

        Raises:
            GitError: If the branch cannot be created or checked out
        """
        branch = str(uuid.uuid4())

        try:
            self.git.create_branch(self.work_dir, branch)
        except GitError as e:
            raise GitError(f"failed to create local branch {branch}: {e}") from e

        try:
            self.git.checkout(self.work_dir, branch)
        except GitError as e:
            raise GitError(f"failed to checkout local branch {branch}: {e}") from e

        logger.info("working_branch_created", branch=branch)
        return branch

    def end(self, branch: str) -> None:
        """Return to trunk and delete the working branch.

        Raises:
            GitError: If trunk cannot be checked out or the branch cannot be deleted
        """
        try:
            self.git.checkout(self.work_dir, self.trunk_branch)
        except GitError as e:
            raise GitError(f"failed to checkout {self.trunk_branch} branch: {e}") from e

        try:
            self.git.delete_local_branch(self.work_dir, branch)
        except GitError as e:
            raise GitError(f"failed to delete local branch {branch}: {e}") from e

        logger.info("working_branch_deleted", branch=branch, trunk=self.trunk_branch)
