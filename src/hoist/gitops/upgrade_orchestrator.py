"""Upgrade workflow orchestrator.

Runs one upgrade of a jx boot GitOps repository:

    working dir -> version stream ref -> upgrade SHA (or no-op) -> working branch
    -> boot config replay (or skip) -> version stream ref update -> pull request
    -> working branch cleanup

Steps run strictly in order. A failing step raises UpgradeStepError tagged
with the state the workflow had reached, chained to the underlying error.
There is no rollback: a branch or partially applied replay left behind by a
failure is kept so the run can be inspected and resumed by hand.
"""

import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from hoist.clients.git_cli import GitCLI, redact
from hoist.core.config import UpgraderConfig
from hoist.core.exceptions import GitError, HoistError, ResolutionError, UpgradeStepError
from hoist.core.models import (
    BootConfigUpgrade,
    PullRequestSpec,
    ReplayReport,
    UpgradeResult,
    VersionStreamRef,
    WorkflowState,
)
from hoist.gitops.branch_manager import BranchManager
from hoist.gitops.change_publisher import ChangePublisher
from hoist.gitops.history_reconciler import HistoryReconciler
from hoist.gitops.requirements import RequirementsFile
from hoist.gitops.upgrade_gates import BootConfigGate, VersionStreamGate
from hoist.gitops.version_resolver import VersionStreamResolver
from hoist.utils.logging import bind_run_context, clear_run_context, get_logger
from hoist.utils.tempdirs import scoped_temp_dir

logger = get_logger(__name__)

VERSION_STREAM_COMMIT_MESSAGE = "feat: upgrade version stream"


class UpgradeOrchestrator:
    """Sequences the upgrade steps for one GitOps repository."""

    def __init__(
        self,
        config: UpgraderConfig,
        git: GitCLI,
        publisher: ChangePublisher,
        dev_env_locator: Callable[[], str] | None = None,
        version_stream_gate: VersionStreamGate | None = None,
        boot_config_gate: BootConfigGate | None = None,
        reconciler: HistoryReconciler | None = None,
    ):
        """Initialize orchestrator.

        Args:
            config: HOIST configuration
            git: Git command wrapper
            publisher: Pull request publisher
            dev_env_locator: Returns the dev environment repository URL when no
                working directory is given
            version_stream_gate: Override for the version stream check
            boot_config_gate: Override for the boot config check
            reconciler: Override for the history replay
        """
        self.config = config
        self.git = git
        self.publisher = publisher
        self.dev_env_locator = dev_env_locator

        resolver = VersionStreamResolver(git)
        self.version_stream_gate = version_stream_gate or VersionStreamGate(resolver)
        self.boot_config_gate = boot_config_gate or BootConfigGate(resolver)
        self.reconciler = reconciler or HistoryReconciler(git)

        self.state = WorkflowState.START
        logger.debug("upgrade_orchestrator_initialized")

    @contextmanager
    def _step(self, message: str) -> Iterator[None]:
        try:
            yield
        except HoistError as e:
            failed_in = self.state
            self.state = WorkflowState.FAILED
            logger.error("upgrade_step_failed", state=failed_in.value, error=str(e))
            raise UpgradeStepError(failed_in.value, f"{message}: {e}") from e
        except Exception as e:
            failed_in = self.state
            self.state = WorkflowState.FAILED
            logger.error(
                "upgrade_step_failed",
                state=failed_in.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpgradeStepError(failed_in.value, f"{message}: {e}") from e

    def _transition(self, state: WorkflowState) -> None:
        logger.debug("workflow_state_changed", previous=self.state.value, state=state.value)
        self.state = state

    def run(self, work_dir: str | Path | None = None) -> UpgradeResult:
        """Run the upgrade.

        Args:
            work_dir: GitOps repository clone; the dev environment repository is
                cloned into a temporary directory when omitted

        Returns:
            UpgradeResult with state DONE or DONE_NO_OP

        Raises:
            UpgradeStepError: If any step fails
        """
        self.state = WorkflowState.START
        clear_run_context()
        trunk = self.config.git.trunk_branch

        if work_dir is None:
            with self._step("failed to clone dev environment repo"):
                work_dir = self.clone_dev_env()
        work_dir = Path(work_dir)
        bind_run_context(work_dir=str(work_dir))
        self._transition(WorkflowState.HAVE_WORKING_DIR)

        with self._step("failed to get requirements version stream"):
            stream = self.requirements_version_stream(work_dir)
        self._transition(WorkflowState.HAVE_VERSION_STREAM_REF)

        with self._step("failed to check for available update"):
            upgrade_sha = self.version_stream_gate.upgrade_available(stream.url, stream.ref, trunk)
        if upgrade_sha is None:
            self._transition(WorkflowState.DONE_NO_OP)
            return UpgradeResult(state=WorkflowState.DONE_NO_OP, work_dir=str(work_dir))
        self._transition(WorkflowState.HAVE_UPGRADE_SHA)

        branches = BranchManager(self.git, work_dir, trunk)
        with self._step("failed to checkout upgrade branch"):
            branch = branches.begin()
        self._transition(WorkflowState.ON_BRANCH)

        with self._step("failed to update boot configuration"):
            upgrade, report = self.update_boot_config(work_dir, stream, upgrade_sha)
        self._transition(
            WorkflowState.BOOT_CONFIG_UPDATED if upgrade else WorkflowState.BOOT_CONFIG_SKIPPED
        )

        with self._step("failed to update version stream ref"):
            self.update_version_stream_ref(work_dir, upgrade_sha)
        self._transition(WorkflowState.VERSION_STREAM_UPDATED)

        with self._step("failed to raise pr"):
            pr = self.publisher.publish(work_dir, self.pull_request_spec(), trunk)
        self._transition(WorkflowState.PR_PUBLISHED)

        with self._step(f"failed to delete local branch {branch}"):
            branches.end(branch)
        self._transition(WorkflowState.BRANCH_CLEANED_UP)

        self._transition(WorkflowState.DONE)
        return UpgradeResult(
            state=WorkflowState.DONE,
            work_dir=str(work_dir),
            upgrade_sha=upgrade_sha,
            boot_config_upgraded=upgrade is not None,
            from_version=upgrade.current.version if upgrade else None,
            to_version=upgrade.candidate.version if upgrade else None,
            replayed=report.applied if report else [],
            skipped=report.skipped if report else [],
            pull_request_url=pr.web_url,
        )

    def clone_dev_env(self) -> Path:
        """Clone the dev environment repository into a new temporary directory.

        The directory is not removed so the upgrade can be inspected afterwards.
        """
        if self.dev_env_locator is None:
            raise HoistError("no working directory given and no way to find the dev environment")

        url = self.dev_env_locator()
        clone_dir = Path(tempfile.mkdtemp(prefix="hoist-dev-env-"))
        try:
            self.git.clone(url, clone_dir)
        except GitError as e:
            raise GitError(f"failed to clone git URL {redact(url)} to directory {clone_dir}: {e}") from e

        logger.info("dev_environment_cloned", directory=str(clone_dir))
        return clone_dir

    def requirements_version_stream(self, work_dir: Path) -> VersionStreamRef:
        """Read the version stream recorded in the requirements file."""
        requirements = RequirementsFile.load(work_dir, self.config.git.requirements_file)
        return requirements.version_stream

    def update_boot_config(
        self, work_dir: Path, stream: VersionStreamRef, upgrade_sha: str
    ) -> tuple[BootConfigUpgrade | None, ReplayReport | None]:
        """Replay boot config changes between the current and upgraded version stream.

        Returns:
            The boot config upgrade and replay report, or (None, None) if the
            boot config pin did not change
        """
        boot_config_url = self.config.boot_config_url_for(stream.url)

        with scoped_temp_dir("hoist-boot-config-") as tmp:
            clone_dir = tmp / "boot-config"
            try:
                self.git.clone_bare(boot_config_url, clone_dir)
            except GitError as e:
                raise ResolutionError(
                    f"failed to clone boot config repo {redact(boot_config_url)}: {e}"
                ) from e

            upgrade = self.boot_config_gate.check(
                stream.url, stream.ref, upgrade_sha, boot_config_url, clone_dir
            )
            if upgrade is None:
                return None, None

            logger.info(
                "upgrading_boot_config",
                from_version=f"v{upgrade.current.version}",
                to_version=f"v{upgrade.candidate.version}",
            )
            report = self.reconciler.reconcile(
                clone_dir,
                upgrade.current.sha,
                upgrade.candidate.sha,
                work_dir,
                self.config.git.excluded_paths,
            )
            return upgrade, report

    def update_version_stream_ref(self, work_dir: Path, upgrade_ref: str) -> bool:
        """Record the upgraded version stream ref and commit it.

        Returns:
            True if the requirements file changed
        """
        requirements = RequirementsFile.load(work_dir, self.config.git.requirements_file)
        if not requirements.set_version_stream_ref(upgrade_ref):
            logger.info("version_stream_ref_unchanged", ref=upgrade_ref)
            return False

        logger.info("upgrading_version_stream_ref", ref=upgrade_ref)
        requirements.save()
        self.git.add_commit_files(work_dir, VERSION_STREAM_COMMIT_MESSAGE, [str(requirements.path)])
        return True

    def pull_request_spec(self) -> PullRequestSpec:
        """Build the pull request description from configuration."""
        pr = self.config.pull_request
        return PullRequestSpec(
            branch_name=pr.branch_name,
            title=pr.title,
            message=pr.message,
            labels=set(pr.labels),
        )
