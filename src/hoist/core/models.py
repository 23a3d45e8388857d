"""Core data models for HOIST."""

import re
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, Field

_SCP_LIKE_URL = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


class WorkflowState(str, Enum):
    """Upgrade workflow states."""

    START = "start"
    HAVE_WORKING_DIR = "have-working-dir"
    HAVE_VERSION_STREAM_REF = "have-version-stream-ref"
    HAVE_UPGRADE_SHA = "have-upgrade-sha"
    DONE_NO_OP = "done-no-op"
    ON_BRANCH = "on-branch"
    BOOT_CONFIG_UPDATED = "boot-config-updated"
    BOOT_CONFIG_SKIPPED = "boot-config-skipped"
    VERSION_STREAM_UPDATED = "version-stream-updated"
    PR_PUBLISHED = "pr-published"
    BRANCH_CLEANED_UP = "branch-cleaned-up"
    DONE = "done"
    FAILED = "failed"


class VersionStreamRef(BaseModel):
    """Version stream recorded in the requirements file."""

    url: str = Field(..., description="Version stream repository URL")
    ref: str = Field(..., description="Recorded ref, a commit SHA after the first upgrade")


class ResolvedCommit(BaseModel):
    """A symbolic ref resolved to a commit."""

    sha: str
    version: str


class BootConfigUpgrade(BaseModel):
    """Boot config revisions for the current and candidate version stream."""

    current: ResolvedCommit
    candidate: ResolvedCommit


class CommitRecord(BaseModel):
    """One commit in a listed history range."""

    sha: str
    subject: str = ""


class ReplayReport(BaseModel):
    """Outcome of replaying boot config history."""

    applied: list[CommitRecord] = Field(default_factory=list)
    skipped: list[CommitRecord] = Field(default_factory=list)
    exclusions_committed: bool = False


class PullRequestSpec(BaseModel):
    """Pull request raised for an upgrade.

    The branch name is fixed per upgrade type so that repeated runs refresh
    the same pull request.
    """

    branch_name: str
    title: str
    message: str
    labels: set[str] = Field(default_factory=set)


class GitRepositoryInfo(BaseModel):
    """Structured identity of a git remote."""

    url: str
    host: str
    organisation: str
    name: str

    @property
    def full_name(self) -> str:
        """Get ``organisation/name``."""
        return f"{self.organisation}/{self.name}"

    @classmethod
    def parse(cls, url: str) -> "GitRepositoryInfo":
        """Parse a git remote URL.

        Supports https, ``ssh://`` and scp-like ``git@host:org/name.git`` remotes.
        Nested GitLab groups are kept whole in ``organisation``.

        Args:
            url: Remote URL

        Returns:
            GitRepositoryInfo

        Raises:
            ValueError: If the URL has no owner and repository name
        """
        text = url.strip()
        if "://" in text:
            parsed = urlparse(text)
            host = parsed.hostname or ""
            path = parsed.path
        else:
            match = _SCP_LIKE_URL.match(text)
            if not match:
                raise ValueError(f"Unsupported git URL: {url}")
            host = match.group("host")
            path = match.group("path")

        path = path.strip("/")
        if path.endswith(".git"):
            path = path[: -len(".git")]

        parts = [p for p in path.split("/") if p]
        if not host or len(parts) < 2:
            raise ValueError(f"Git URL must contain an owner and repository name: {url}")

        return cls(
            url=url,
            host=host.lower(),
            organisation="/".join(parts[:-1]),
            name=parts[-1],
        )


class UpgradeResult(BaseModel):
    """Result of a completed upgrade run."""

    state: WorkflowState
    work_dir: str | None = None
    upgrade_sha: str | None = None
    boot_config_upgraded: bool = False
    from_version: str | None = None
    to_version: str | None = None
    replayed: list[CommitRecord] = Field(default_factory=list)
    skipped: list[CommitRecord] = Field(default_factory=list)
    pull_request_url: str | None = None
