"""GitHub API access for publishing releases."""

from .abc import GitHubClientBase
from .adapter import GitHubAdapter

__all__ = ["GitHubAdapter", "GitHubClientBase"]
