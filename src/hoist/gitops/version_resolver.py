"""Version stream lookups.

A version stream is a git repository that pins the versions of the components
a cluster is built from. Each git component has a lock file at
``git/<host>/<owner>/<name>.yml`` whose ``version`` field is the pinned
release; the component repository tags that release as ``v<version>``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import yaml

from hoist.clients.git_cli import GitCLI, redact
from hoist.core.exceptions import GitError, ResolutionError
from hoist.core.models import GitRepositoryInfo, ResolvedCommit
from hoist.utils.logging import get_logger
from hoist.utils.tempdirs import scoped_temp_dir

logger = get_logger(__name__)


def version_file_path(component_url: str) -> Path:
    """Get the lock file path of a git component, relative to the version stream root.

    Args:
        component_url: Component repository URL

    Returns:
        Relative path such as ``git/github.com/jenkins-x/jenkins-x-boot-config.yml``
    """
    repo = GitRepositoryInfo.parse(component_url)
    return Path("git") / repo.host / repo.organisation / f"{repo.name}.yml"


class VersionStream:
    """A version stream checked out at one ref."""

    def __init__(self, url: str, ref: str, directory: Path, head_sha: str):
        self.url = url
        self.ref = ref
        self.directory = directory
        self.head_sha = head_sha

    def resolve_git_version(self, component_url: str) -> str:
        """Get the pinned version of a git component.

        Args:
            component_url: Component repository URL

        Returns:
            Version string without ``v`` prefix as written in the lock file

        Raises:
            ResolutionError: If the component is not pinned
        """
        try:
            relative = version_file_path(component_url)
        except ValueError as e:
            raise ResolutionError(f"failed to resolve config url {component_url}: {e}") from e

        version_file = self.directory / relative
        if not version_file.is_file():
            raise ResolutionError(
                f"component {component_url} is not pinned in version stream "
                f"{redact(self.url)} at {self.ref} (missing {relative})"
            )

        try:
            with version_file.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ResolutionError(f"failed to read version file {relative}: {e}") from e

        version = data.get("version") if isinstance(data, dict) else None
        if not version:
            raise ResolutionError(f"no version in {relative} at {self.ref}")

        logger.debug(
            "component_version_resolved",
            component=component_url,
            version=str(version),
            ref=self.ref,
        )
        return str(version)


class VersionStreamResolver:
    """Resolves refs and component versions through version stream clones."""

    def __init__(self, git: GitCLI):
        """Initialize resolver.

        Args:
            git: Git command wrapper
        """
        self.git = git

    @contextmanager
    def open(self, url: str, ref: str) -> Iterator[VersionStream]:
        """Clone a version stream at a ref for the duration of the block.

        Raises:
            ResolutionError: If the repository cannot be cloned or the ref does not exist
        """
        with scoped_temp_dir("hoist-versions-") as tmp:
            clone_dir = tmp / "versions"
            try:
                self.git.clone(url, clone_dir)
                self.git.checkout(clone_dir, ref)
                head_sha = self.git.get_commit_pointed_to_by_tag(clone_dir, "HEAD")
            except GitError as e:
                raise ResolutionError(
                    f"failed to clone version stream {redact(url)} at {ref}: {e}"
                ) from e

            yield VersionStream(url, ref, clone_dir, head_sha)

    def resolve_ref(self, url: str, ref: str) -> str:
        """Resolve a symbolic ref of a repository to a commit SHA.

        Args:
            url: Repository URL
            ref: Branch, tag or SHA

        Returns:
            Commit SHA
        """
        with self.open(url, ref) as stream:
            return stream.head_sha

    def resolve_version(self, url: str, ref: str, component_url: str) -> str:
        """Get the version of a component pinned by the version stream at a ref."""
        with self.open(url, ref) as stream:
            return stream.resolve_git_version(component_url)

    def resolve_boot_config_ref(
        self,
        version_stream_url: str,
        version_stream_ref: str,
        boot_config_url: str,
        boot_config_dir: str | Path,
    ) -> ResolvedCommit:
        """Find the boot config commit pinned by a version stream ref.

        Args:
            version_stream_url: Version stream repository URL
            version_stream_ref: Version stream ref to read the pin from
            boot_config_url: Boot config repository URL
            boot_config_dir: Local clone of the boot config repository

        Returns:
            Commit SHA of tag ``v<version>`` and the version

        Raises:
            ResolutionError: If the version or tag cannot be resolved
        """
        version = self.resolve_version(version_stream_url, version_stream_ref, boot_config_url)
        tag = f"v{version}"

        try:
            sha = self.git.get_commit_pointed_to_by_tag(boot_config_dir, tag)
        except GitError as e:
            raise ResolutionError(f"failed to get commit pointed to by {tag}: {e}") from e

        return ResolvedCommit(sha=sha, version=version)
