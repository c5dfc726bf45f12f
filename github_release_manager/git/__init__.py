"""Local git history and tag operations."""

from .markers import GitTagMarkerStore
from .repository import GitCommandError, GitRepository

__all__ = ["GitRepository", "GitCommandError", "GitTagMarkerStore"]
