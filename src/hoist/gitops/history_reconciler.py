"""Replays boot config history onto the GitOps working branch."""

from pathlib import Path

from hoist.clients.git_cli import GitCLI
from hoist.core.exceptions import CherryPickError, GitError, NoopError, ReplayError
from hoist.core.models import ReplayReport
from hoist.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_EXCLUDED_PATHS = ("OWNERS",)
EXCLUDE_COMMIT_MESSAGE = "chore: exclude files from upgrade"
BOOT_CONFIG_REF_NAMESPACE = "refs/hoist/boot-config"


class HistoryReconciler:
    """Cherry-picks a boot config commit range onto the working branch.

    Commits are applied one at a time, oldest first, preferring the incoming
    side on conflicting hunks. Paths that belong to the fork (``OWNERS`` by
    default) are put back to their pre-upgrade content in a separate commit
    afterwards.

    Nothing is rolled back on failure: applied commits and a conflicted
    cherry-pick stay on the branch so the run can be inspected and resumed.
    """

    def __init__(self, git: GitCLI):
        """Initialize reconciler.

        Args:
            git: Git command wrapper
        """
        self.git = git

    def reconcile(
        self,
        boot_config_dir: str | Path,
        from_sha: str,
        to_sha: str,
        work_dir: str | Path,
        excluded_paths: list[str] | tuple[str, ...] = DEFAULT_EXCLUDED_PATHS,
    ) -> ReplayReport:
        """Replay ``(from_sha, to_sha]`` onto the current branch of work_dir.

        Args:
            boot_config_dir: Clone of the boot config repository
            from_sha: Boot config commit the working branch is based on
            to_sha: Boot config commit to upgrade to
            work_dir: GitOps repository working tree
            excluded_paths: Paths restored from from_sha after the replay

        Returns:
            Applied and skipped commits

        Raises:
            ReplayError: If a commit other than an unmarked merge fails to apply
        """
        report = ReplayReport()
        paths = list(excluded_paths)

        try:
            self._import_history(boot_config_dir, work_dir)
            self._replay(boot_config_dir, from_sha, to_sha, work_dir, report)
        except ReplayError:
            # excluded paths are restored even when the replay stops early
            try:
                self.exclude_files(work_dir, from_sha, paths)
            except ReplayError as e:
                logger.warning("exclude_files_after_failed_replay", error=str(e))
            raise

        report.exclusions_committed = self.exclude_files(work_dir, from_sha, paths)
        return report

    def _import_history(self, boot_config_dir: str | Path, work_dir: str | Path) -> None:
        """Make boot config commits reachable from the working repository."""
        try:
            self.git.fetch(
                work_dir,
                str(boot_config_dir),
                [
                    f"+refs/heads/*:{BOOT_CONFIG_REF_NAMESPACE}/heads/*",
                    f"+refs/tags/*:{BOOT_CONFIG_REF_NAMESPACE}/tags/*",
                ],
            )
        except GitError as e:
            raise ReplayError(f"failed to fetch boot config history from {boot_config_dir}: {e}") from e

    def _replay(
        self,
        boot_config_dir: str | Path,
        from_sha: str,
        to_sha: str,
        work_dir: str | Path,
        report: ReplayReport,
    ) -> None:
        try:
            commits = self.git.get_commits(boot_config_dir, from_sha, to_sha)
        except GitError as e:
            raise ReplayError(f"failed to get commits from {boot_config_dir}: {e}") from e

        logger.info(
            "cherry_picking_commits",
            range=f"{from_sha}..{to_sha}",
            count=len(commits),
        )

        # git lists newest first
        for commit in reversed(commits):
            try:
                self.git.cherry_pick_theirs(work_dir, commit.sha)
            except CherryPickError as e:
                if e.kind != CherryPickError.MERGE_COMMIT:
                    logger.error("cherry_pick_failed", sha=commit.sha, subject=commit.subject)
                    raise ReplayError(f"cherry-picking {commit.sha}: {e}") from e
                logger.info("cherry_pick_merge_commit_skipped", sha=commit.sha, subject=commit.subject)
                report.skipped.append(commit)
                continue

            logger.info("cherry_picked", sha=commit.sha, subject=commit.subject)
            report.applied.append(commit)

    def exclude_files(self, work_dir: str | Path, commit: str, paths: list[str]) -> bool:
        """Restore paths from a commit and commit the restoration.

        Returns:
            True if a commit was created, False if nothing changed

        Raises:
            ReplayError: If the checkout or commit fails
        """
        if not paths:
            return False

        try:
            self.git.checkout_commit_files(work_dir, commit, paths)
        except GitError as e:
            raise ReplayError(f"failed to checkout files {paths}: {e}") from e

        try:
            self.git.add_commit_files(work_dir, EXCLUDE_COMMIT_MESSAGE, paths)
        except NoopError:
            logger.debug("excluded_files_unchanged", paths=paths)
            return False
        except GitError as e:
            raise ReplayError(f"failed to commit excluded files {paths}: {e}") from e

        logger.info("excluded_files_restored", paths=paths, commit=commit)
        return True
