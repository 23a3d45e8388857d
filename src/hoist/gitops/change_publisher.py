"""Pushes the upgrade branch and raises the pull request."""

from pathlib import Path
from urllib.parse import quote, urlparse, urlunparse

from hoist.adapters.provider_factory import ProviderFactory
from hoist.clients.git_cli import GitCLI
from hoist.core.exceptions import ConfigurationError, GitError, PublishError
from hoist.core.models import GitRepositoryInfo, PullRequestSpec
from hoist.interfaces.exceptions import ScmProviderError
from hoist.interfaces.scm_provider import PullRequestInfo
from hoist.utils.logging import get_logger

logger = get_logger(__name__)


def authenticated_url(clone_url: str, username: str, token: str) -> str:
    """Embed credentials in an https clone URL; other schemes are returned unchanged."""
    parsed = urlparse(clone_url)
    if parsed.scheme not in ("http", "https"):
        return clone_url
    host = parsed.hostname or ""
    if parsed.port:
        host = f"{host}:{parsed.port}"
    netloc = f"{quote(username, safe='')}:{quote(token, safe='')}@{host}"
    return urlunparse(parsed._replace(netloc=netloc))


class ChangePublisher:
    """Publishes the working branch as a labelled pull request against trunk.

    An open pull request that already carries the labels is reused: its head
    branch is force-pushed and its title and description refreshed. Nothing
    is retried.
    """

    def __init__(self, git: GitCLI, provider_factory: ProviderFactory):
        """Initialize publisher.

        Args:
            git: Git command wrapper
            provider_factory: Source control provider lookup
        """
        self.git = git
        self.provider_factory = provider_factory

    def publish(
        self, work_dir: str | Path, spec: PullRequestSpec, base_branch: str
    ) -> PullRequestInfo:
        """Push HEAD of work_dir and open or refresh the pull request.

        Args:
            work_dir: GitOps repository working tree
            spec: Pull request to raise
            base_branch: Branch the pull request targets

        Returns:
            The created or updated pull request

        Raises:
            PublishError: On any lookup, authentication, push or API failure
        """
        try:
            remote_url = self.git.get_remote_url(work_dir)
            repo_id = GitRepositoryInfo.parse(remote_url)
        except (GitError, ValueError) as e:
            raise PublishError(f"failed to get git info: {e}") from e

        try:
            context = self.provider_factory.for_repository(repo_id)
        except (ConfigurationError, ScmProviderError) as e:
            raise PublishError(f"failed to get git provider: {e}") from e
        provider = context.provider

        try:
            upstream = provider.get_repository(repo_id.organisation, repo_id.name)
        except ScmProviderError as e:
            raise PublishError(f"getting repository {repo_id.full_name}: {e}") from e

        labels = sorted(spec.labels)

        try:
            existing = provider.find_pull_requests(upstream, labels, base_branch) if labels else []
        except ScmProviderError as e:
            raise PublishError(f"failed to find pull requests labelled {labels}: {e}") from e

        head_branch = existing[0].source_branch if existing else spec.branch_name
        push_url = authenticated_url(upstream.clone_url, provider.push_username, context.token)

        try:
            self.git.push(work_dir, push_url, f"HEAD:refs/heads/{head_branch}", force=True)
        except GitError as e:
            raise PublishError(f"failed to push to branch {head_branch}: {e}") from e

        logger.info("upgrade_branch_pushed", repository=upstream.full_name, branch=head_branch)

        try:
            if existing:
                pr = provider.update_pull_request(
                    upstream, existing[0].number, spec.title, spec.message
                )
                logger.info("pull_request_refreshed", number=pr.number, url=pr.web_url)
            else:
                pr = provider.create_pull_request(
                    upstream, head_branch, base_branch, spec.title, spec.message, labels
                )
                logger.info("pull_request_raised", number=pr.number, url=pr.web_url)
        except ScmProviderError as e:
            raise PublishError(
                f"failed to create PR for base {base_branch} and head branch {head_branch}: {e}"
            ) from e

        return pr
