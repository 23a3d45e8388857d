"""Custom exceptions for HOIST."""


class HoistError(Exception):
    """Base exception for all HOIST errors."""


class ConfigurationError(HoistError):
    """Configuration-related errors."""


class RequirementsError(HoistError):
    """Requirements file missing or malformed."""


class GitError(HoistError):
    """A git command failed.

    Attributes:
        command: The git arguments that were run
        returncode: Process exit status
        stderr: Captured error output
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class CherryPickError(GitError):
    """Cherry-pick of a single commit failed.

    ``kind`` is ``"merge_commit"`` when git refused because the commit has
    several parents and no mainline was given, ``"conflict"`` otherwise.
    """

    MERGE_COMMIT = "merge_commit"
    CONFLICT = "conflict"

    def __init__(self, message: str, sha: str, kind: str, stderr: str = ""):
        super().__init__(message, stderr=stderr)
        self.sha = sha
        self.kind = kind


class NoopError(GitError):
    """Nothing to commit."""


class ResolutionError(HoistError):
    """Ref, component version or tag lookup failed."""


class ReplayError(HoistError):
    """Replaying boot config history onto the working branch failed."""


class PublishError(HoistError):
    """Pushing the upgrade branch or raising the pull request failed."""


class ScmError(HoistError):
    """GitLab/GitHub API operation failed."""


class KubernetesError(HoistError):
    """Kubernetes operation failed."""


class UpgradeStepError(HoistError):
    """A workflow step failed.

    Attributes:
        state: Workflow state the orchestrator was in when the step failed
    """

    def __init__(self, state: str, message: str):
        super().__init__(message)
        self.state = state
