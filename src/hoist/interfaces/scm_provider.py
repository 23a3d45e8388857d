"""Source control provider interface for pull request operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class RepositoryInfo:
    """Normalized repository information."""

    full_name: str
    clone_url: str
    default_branch: str
    web_url: str


@dataclass
class PullRequestInfo:
    """Normalized pull request information.

    ``number`` is the per-repository number (GitLab MR iid, GitHub PR number).
    """

    number: int
    title: str
    description: str
    source_branch: str
    target_branch: str
    state: str
    web_url: str
    labels: list[str] = field(default_factory=list)


class ScmProvider(ABC):
    """Abstract interface for source control providers.

    Hides whether the GitOps repository lives on GitLab or GitHub. One
    implementation per provider, picked from the repository URL at runtime.
    """

    @property
    @abstractmethod
    def kind(self) -> str:
        """Get the provider kind (``gitlab`` or ``github``)."""

    @property
    @abstractmethod
    def push_username(self) -> str:
        """Get the user name to pair with the token in an https push URL."""

    @abstractmethod
    def get_repository(self, organisation: str, name: str) -> RepositoryInfo:
        """Get repository information.

        Args:
            organisation: Owner, user or (nested) group
            name: Repository name

        Returns:
            Normalized repository information

        Raises:
            ScmProviderError: If the repository cannot be retrieved
        """

    @abstractmethod
    def find_pull_requests(
        self, repository: RepositoryInfo, labels: list[str], target_branch: str
    ) -> list[PullRequestInfo]:
        """Find open pull requests that carry all the given labels.

        Raises:
            ScmProviderError: If the search fails
        """

    @abstractmethod
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

    @abstractmethod
    def update_pull_request(
        self, repository: RepositoryInfo, number: int, title: str, description: str
    ) -> PullRequestInfo:
        """Refresh title and description of an existing pull request.

        Raises:
            ScmProviderError: If the update fails
        """
