"""Interface definitions for source control providers."""

from hoist.interfaces.exceptions import InterfaceError, ScmProviderError
from hoist.interfaces.scm_provider import PullRequestInfo, RepositoryInfo, ScmProvider

__all__ = [
    "InterfaceError",
    "ScmProviderError",
    "PullRequestInfo",
    "RepositoryInfo",
    "ScmProvider",
]
