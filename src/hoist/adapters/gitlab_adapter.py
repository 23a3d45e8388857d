"""GitLab adapter implementing ScmProvider interface."""

from typing import Any

from hoist.clients.gitlab_client import GitLabClient
from hoist.interfaces.exceptions import ScmProviderError
from hoist.interfaces.scm_provider import PullRequestInfo, RepositoryInfo, ScmProvider
from hoist.utils.logging import get_logger

logger = get_logger(__name__)


class GitLabAdapter(ScmProvider):
    """Adapter wrapping GitLabClient to implement ScmProvider interface.

    Merge requests are reported as pull requests with ``number`` set to the
    MR iid.
    """

    def __init__(self, url: str, token: str):
        """Initialize GitLab adapter.

        Args:
            url: GitLab instance URL
            token: Private access token
        """
        try:
            self.client = GitLabClient(url=url, token=token)
            logger.debug("gitlab_adapter_initialized", url=url)
        except Exception as e:
            raise ScmProviderError(f"Failed to initialize GitLab adapter: {e}") from e

    @property
    def kind(self) -> str:
        """Get provider kind."""
        return "gitlab"

    @property
    def push_username(self) -> str:
        """GitLab accepts any user name with a token; ``oauth2`` is the convention."""
        return "oauth2"

    def get_repository(self, organisation: str, name: str) -> RepositoryInfo:
        """Get project information.

        Raises:
            ScmProviderError: If the project cannot be retrieved
        """
        path = f"{organisation}/{name}"
        try:
            project = self.client.get_project(path)
            return RepositoryInfo(
                full_name=project.path_with_namespace,
                clone_url=project.http_url_to_repo,
                default_branch=project.default_branch,
                web_url=project.web_url,
            )
        except Exception as e:
            logger.error("get_repository_failed", repository=path, error=str(e))
            raise ScmProviderError(f"Failed to get repository {path}: {e}") from e

    def find_pull_requests(
        self, repository: RepositoryInfo, labels: list[str], target_branch: str
    ) -> list[PullRequestInfo]:
        """Find open merge requests carrying all labels.

        Raises:
            ScmProviderError: If the search fails
        """
        try:
            mrs = self.client.list_merge_requests(
                repository.full_name,
                state="opened",
                labels=labels,
                target_branch=target_branch,
            )
            wanted = set(labels)
            return [self._to_info(mr) for mr in mrs if wanted.issubset(set(mr.labels or []))]
        except Exception as e:
            logger.error("find_pull_requests_failed", repository=repository.full_name, error=str(e))
            raise ScmProviderError(
                f"Failed to find merge requests in {repository.full_name}: {e}"
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
        """Create a merge request.

        Raises:
            ScmProviderError: If MR creation fails
        """
        try:
            mr = self.client.create_merge_request(
                repository.full_name,
                source_branch,
                target_branch,
                title,
                description,
                labels=labels,
            )
            return self._to_info(mr)
        except Exception as e:
            logger.error(
                "create_pull_request_failed",
                source_branch=source_branch,
                error=str(e),
            )
            raise ScmProviderError(f"Failed to create MR from {source_branch}: {e}") from e

    def update_pull_request(
        self, repository: RepositoryInfo, number: int, title: str, description: str
    ) -> PullRequestInfo:
        """Update a merge request.

        Raises:
            ScmProviderError: If the update fails
        """
        try:
            mr = self.client.update_merge_request(repository.full_name, number, title, description)
            return self._to_info(mr)
        except Exception as e:
            logger.error("update_pull_request_failed", number=number, error=str(e))
            raise ScmProviderError(f"Failed to update MR {number}: {e}") from e

    @staticmethod
    def _to_info(mr: Any) -> PullRequestInfo:
        return PullRequestInfo(
            number=mr.iid,
            title=mr.title,
            description=mr.description or "",
            source_branch=mr.source_branch,
            target_branch=mr.target_branch,
            state=mr.state,
            web_url=mr.web_url,
            labels=list(mr.labels or []),
        )
