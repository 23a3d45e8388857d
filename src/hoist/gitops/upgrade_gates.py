"""Checks that decide whether an upgrade is needed."""

from pathlib import Path

from hoist.clients.git_cli import redact
from hoist.core.models import BootConfigUpgrade
from hoist.gitops.version_resolver import VersionStreamResolver
from hoist.utils.logging import get_logger

logger = get_logger(__name__)


class VersionStreamGate:
    """Decides whether the pinned version stream can move forward."""

    def __init__(self, resolver: VersionStreamResolver):
        self.resolver = resolver

    def upgrade_available(self, url: str, current_ref: str, target_ref: str = "master") -> str | None:
        """Compare the recorded ref with the commit the target ref points at.

        The comparison is literal string equality. ``current_ref`` is expected
        to be the commit SHA recorded by a previous upgrade; a symbolic ref
        such as ``master`` never matches and always reports an upgrade.

        Args:
            url: Version stream repository URL
            current_ref: Ref recorded in the requirements file
            target_ref: Ref to upgrade to

        Returns:
            Commit SHA to upgrade to, or None if already there

        Raises:
            ResolutionError: If the target ref cannot be resolved
        """
        upgrade_sha = self.resolver.resolve_ref(url, target_ref)

        if current_ref == upgrade_sha:
            logger.info("no_upgrade_available", version_stream=redact(url), ref=current_ref)
            return None

        logger.info(
            "upgrade_available",
            version_stream=redact(url),
            current_ref=current_ref,
            upgrade_sha=upgrade_sha,
        )
        return upgrade_sha


class BootConfigGate:
    """Decides whether the boot config pinned by the version stream changed."""

    def __init__(self, resolver: VersionStreamResolver):
        self.resolver = resolver

    def check(
        self,
        version_stream_url: str,
        current_ref: str,
        candidate_ref: str,
        boot_config_url: str,
        boot_config_dir: str | Path,
    ) -> BootConfigUpgrade | None:
        """Resolve the boot config revision for both version stream refs.

        This is independent of the version stream check: the stream can move
        while the boot config pin stays the same.

        Returns:
            The current and candidate revisions, or None if they are the same commit

        Raises:
            ResolutionError: If either revision cannot be resolved
        """
        current = self.resolver.resolve_boot_config_ref(
            version_stream_url, current_ref, boot_config_url, boot_config_dir
        )
        candidate = self.resolver.resolve_boot_config_ref(
            version_stream_url, candidate_ref, boot_config_url, boot_config_dir
        )

        if current.sha == candidate.sha:
            logger.info("no_boot_config_upgrade_available", version=current.version)
            return None

        logger.info(
            "boot_config_upgrade_available",
            from_version=f"v{current.version}",
            to_version=f"v{candidate.version}",
        )
        return BootConfigUpgrade(current=current, candidate=candidate)
