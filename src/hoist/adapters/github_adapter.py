"""GitHub adapter implementing ScmProvider interface."""

from typing import Any

from hoist.clients.github_client import GITHUB_API_URL, GitHubClient
from hoist.interfaces.exceptions import ScmProviderError
from hoist.interfaces.scm_provider import PullRequestInfo, RepositoryInfo, ScmProvider
from hoist.utils.logging import get_logger

logger = get_logger(__name__)


class GitHubAdapter(ScmProvider):
    """Adapter wrapping GitHubClient to implement ScmProvider interface."""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL):
        """Initialize GitHub adapter.

        Args:
            token: Access token
            base_url: API root URL
        """
        try:
            self.client = GitHubClient(token=token, base_url=base_url)
            logger.debug("github_adapter_initialized", base_url=base_url)
        except Exception as e:
            raise ScmProviderError(f"Failed to initialize GitHub adapter: {e}") from e

    @property
    def kind(self) -> str:
        """Get provider kind."""
        return "github"

    @property
    def push_username(self) -> str:
        """Token-authenticated pushes use ``x-access-token``."""
        return "x-access-token"

    def get_repository(self, organisation: str, name: str) -> RepositoryInfo:
        """Get repository information.

        Raises:
            ScmProviderError: If the repository cannot be retrieved
        """
        full_name = f"{organisation}/{name}"
        try:
            repo = self.client.get_repo(full_name)
            return RepositoryInfo(
                full_name=repo.full_name,
                clone_url=repo.clone_url,
                default_branch=repo.default_branch,
                web_url=repo.html_url,
            )
        except Exception as e:
            logger.error("get_repository_failed", repository=full_name, error=str(e))
            raise ScmProviderError(f"Failed to get repository {full_name}: {e}") from e

    def find_pull_requests(
        self, repository: RepositoryInfo, labels: list[str], target_branch: str
    ) -> list[PullRequestInfo]:
        """Find open pull requests carrying all labels.

        GitHub cannot filter pulls by label server side, so labels are matched here.

        Raises:
            ScmProviderError: If the search fails
        """
        try:
            pulls = self.client.list_pulls(repository.full_name, base=target_branch)
            wanted = set(labels)
            found = []
            for pr in pulls:
                info = self._to_info(pr)
                if wanted.issubset(set(info.labels)):
                    found.append(info)
            return found
        except Exception as e:
            logger.error("find_pull_requests_failed", repository=repository.full_name, error=str(e))
            raise ScmProviderError(
                f"Failed to find pull requests in {repository.full_name}: {e}"
            ) from e

    def create_pull_request(
        self,
        repository: RepositoryInfo,
        source_branch: str,
        target_branch: str,
        title: str,
        description: str,
        labels: list[str],
    ) -> PullRequestInfo:
        """Create a pull request.

        Raises:
            ScmProviderError: If creation fails
        """
        try:
            pr = self.client.create_pull(
                repository.full_name,
                head=source_branch,
                base=target_branch,
                title=title,
                body=description,
                labels=labels,
            )
            info = self._to_info(pr)
            if not info.labels:
                info.labels = list(labels)
            return info
        except Exception as e:
            logger.error("create_pull_request_failed", source_branch=source_branch, error=str(e))
            raise ScmProviderError(
                f"Failed to create pull request from {source_branch}: {e}"
            ) from e

    def update_pull_request(
        self, repository: RepositoryInfo, number: int, title: str, description: str
    ) -> PullRequestInfo:
        """Update a pull request.

        Raises:
            ScmProviderError: If the update fails
        """
        try:
            pr = self.client.update_pull(repository.full_name, number, title, description)
            return self._to_info(pr)
        except Exception as e:
            logger.error("update_pull_request_failed", number=number, error=str(e))
            raise ScmProviderError(f"Failed to update pull request {number}: {e}") from e

    @staticmethod
    def _to_info(pr: Any) -> PullRequestInfo:
        return PullRequestInfo(
            number=pr.number,
            title=pr.title,
            description=pr.body or "",
            source_branch=pr.head.ref,
            target_branch=pr.base.ref,
            state=pr.state,
            web_url=pr.html_url,
            labels=[label.name for label in pr.labels],
        )
