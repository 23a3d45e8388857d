"""Selects and authenticates the source control provider for a repository."""

import os
from dataclasses import dataclass

from hoist.adapters.github_adapter import GitHubAdapter
from hoist.adapters.gitlab_adapter import GitLabAdapter
from hoist.clients.github_client import GITHUB_API_URL
from hoist.core.config import UpgraderConfig
from hoist.core.exceptions import ConfigurationError
from hoist.core.models import GitRepositoryInfo
from hoist.interfaces.scm_provider import ScmProvider
from hoist.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_KINDS = ("github", "gitlab")


@dataclass
class ProviderContext:
    """An authenticated provider and the token it was created with."""

    provider: ScmProvider
    token: str


def detect_kind(host: str) -> str | None:
    """Guess the provider kind from a host name."""
    host = host.lower()
    for kind in SUPPORTED_KINDS:
        if kind in host:
            return kind
    return None


class ProviderFactory:
    """Creates ScmProvider instances from configuration and repository URL shape."""

    def __init__(self, config: UpgraderConfig):
        self.config = config

    def resolve_kind(self, repo: GitRepositoryInfo) -> str:
        """Get the provider kind for a repository.

        Raises:
            ConfigurationError: If the kind is unknown
        """
        server = self.config.get_scm_server(repo.host)
        kind = server.kind.lower() if server else detect_kind(repo.host)
        if kind not in SUPPORTED_KINDS:
            raise ConfigurationError(
                f"cannot determine git provider for host {repo.host}; "
                "add it to scm.servers with kind github or gitlab"
            )
        return kind

    def resolve_token(self, repo: GitRepositoryInfo) -> str:
        """Read the API token for a repository's host from the environment.

        Raises:
            ConfigurationError: If the token variable is unset
        """
        server = self.config.get_scm_server(repo.host)
        token_env = (server.token_env if server else None) or self.config.scm.default_token_env
        token = os.environ.get(token_env)
        if not token:
            raise ConfigurationError(f"no token for {repo.host}: environment variable {token_env} is not set")
        return token

    def api_url(self, repo: GitRepositoryInfo, kind: str) -> str:
        """Get the API root for a repository's host."""
        server = self.config.get_scm_server(repo.host)
        if server and server.api_url:
            return server.api_url
        if kind == "github":
            return GITHUB_API_URL if repo.host == "github.com" else f"https://{repo.host}/api/v3"
        return server.url.rstrip("/") if server else f"https://{repo.host}"

    def for_repository(self, repo: GitRepositoryInfo) -> ProviderContext:
        """Create an authenticated provider for a repository.

        Raises:
            ConfigurationError: If kind or token cannot be determined
            ScmProviderError: If authentication fails
        """
        kind = self.resolve_kind(repo)
        token = self.resolve_token(repo)
        api_url = self.api_url(repo, kind)

        logger.info("git_provider_selected", kind=kind, host=repo.host, api_url=api_url)

        if kind == "github":
            provider: ScmProvider = GitHubAdapter(token=token, base_url=api_url)
        else:
            provider = GitLabAdapter(url=api_url, token=token)
        return ProviderContext(provider=provider, token=token)
