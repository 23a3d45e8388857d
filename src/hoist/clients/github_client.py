"""GitHub client for repository and pull request operations."""

from typing import Any

from github import Auth, Github, GithubException

from hoist.core.exceptions import ScmError
from hoist.utils.logging import get_logger

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    """GitHub API client wrapper."""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL):
        """Initialize GitHub client.

        Args:
            token: Personal access or app installation token
            base_url: API root, ``https://<host>/api/v3`` for GitHub Enterprise
        """
        self.base_url = base_url

        # no /user call here: installation tokens are refused on that endpoint
        try:
            self.gh = Github(auth=Auth.Token(token), base_url=base_url)
            logger.debug("github_client_initialized", base_url=base_url)
        except Exception as e:
            logger.error("github_client_initialization_failed", base_url=base_url, error=str(e))
            raise ScmError(f"Failed to initialize GitHub client: {e}") from e

    def get_repo(self, full_name: str) -> Any:
        """Get a repository by ``owner/name``.

        Raises:
            ScmError: If the repository cannot be retrieved
        """
        try:
            logger.debug("getting_repository", repository=full_name)
            repo = self.gh.get_repo(full_name)
            logger.info("repository_retrieved", repository=full_name)
            return repo

        except GithubException as e:
            logger.error("get_repository_failed", repository=full_name, error=str(e))
            raise ScmError(f"Failed to get repository {full_name}: {e}") from e

    def list_pulls(self, full_name: str, base: str | None = None) -> list[Any]:
        """List open pull requests.

        Args:
            full_name: Repository ``owner/name``
            base: Optional base branch filter

        Returns:
            List of pull request objects

        Raises:
            ScmError: If listing fails
        """
        try:
            repo = self.get_repo(full_name)
            if base:
                pulls = list(repo.get_pulls(state="open", base=base))
            else:
                pulls = list(repo.get_pulls(state="open"))

            logger.info("pull_requests_listed", repository=full_name, count=len(pulls))
            return pulls

        except GithubException as e:
            logger.error("list_pull_requests_failed", repository=full_name, error=str(e))
            raise ScmError(f"Failed to list pull requests for {full_name}: {e}") from e

    def create_pull(
        self,
        full_name: str,
        head: str,
        base: str,
        title: str,
        body: str,
        labels: list[str] | None = None,
    ) -> Any:
        """Create a pull request and label it.

        Raises:
            ScmError: If creation or labelling fails
        """
        try:
            logger.debug("creating_pull_request", repository=full_name, head=head, base=base)

            repo = self.get_repo(full_name)
            pr = repo.create_pull(title=title, body=body, head=head, base=base)
            if labels:
                pr.add_to_labels(*labels)

            logger.info("pull_request_created", number=pr.number, url=pr.html_url)
            return pr

        except GithubException as e:
            logger.error("create_pull_request_failed", head=head, error=str(e))
            raise ScmError(f"Failed to create pull request from {head}: {e}") from e

    def update_pull(self, full_name: str, number: int, title: str, body: str) -> Any:
        """Update title and body of a pull request.

        Raises:
            ScmError: If the update fails
        """
        try:
            repo = self.get_repo(full_name)
            pr = repo.get_pull(number)
            pr.edit(title=title, body=body)

            logger.info("pull_request_updated", number=number, url=pr.html_url)
            return pr

        except GithubException as e:
            logger.error("update_pull_request_failed", number=number, error=str(e))
            raise ScmError(f"Failed to update pull request {number}: {e}") from e
