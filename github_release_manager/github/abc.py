"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Repository
    @abstractmethod
    async def get_repository(self) -> Any:
        """Get a repository."""
        pass

    # Release CRUD
    @abstractmethod
    async def get_release(self, tag_name: str) -> Any | None:
        """Get the release for a tag, or None if there is none."""
        pass

    @abstractmethod
    async def create_release(
        self,
        tag_name: str,
        name: str,
        body: str,
        draft: bool = False,
        prerelease: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Create a release for an existing tag."""
        pass

    @abstractmethod
    async def delete_release(self, tag_name: str) -> bool:
        """Delete the release for a tag, returning whether one existed."""
        pass

    @abstractmethod
    async def upload_release_asset(self, release: Any, path: Path, **kwargs: Any) -> Any:
        """Upload a file as an asset of a release."""
        pass
