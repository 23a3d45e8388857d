"""Adapter implementations for external services."""

from hoist.adapters.github_adapter import GitHubAdapter
from hoist.adapters.gitlab_adapter import GitLabAdapter
from hoist.adapters.provider_factory import ProviderContext, ProviderFactory

__all__ = [
    "GitHubAdapter",
    "GitLabAdapter",
    "ProviderContext",
    "ProviderFactory",
]
