"""GitHub client adapter for the PyGithub library.

PyGithub is synchronous; every API call is run in a worker thread so that the
adapter exposes the same coroutine interface as the rest of the application.
"""

import asyncio
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from github import Github, GithubException, UnknownObjectException
from github.GitRelease import GitRelease
from github.GitReleaseAsset import GitReleaseAsset
from github.Repository import Repository

from github_release_manager.configuration.models import GitHubAuthenticationType
from github_release_manager.utils.github import split_repository_in_configuration
from github_release_manager.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import get_github_client

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except GithubException as exc:
            if exc.status == 422:
                error_data = exc.data if isinstance(exc.data, dict) else {}
                message = error_data.get("message", "Unprocessable Entity")
                errors = error_data.get("errors", [])
                logger.error(
                    "GitHub 422 Unprocessable Entity",
                    function=func.__name__,
                    message=message,
                    errors=errors,
                    status_code=422,
                )
                raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors}") from exc
            raise

    return wrapper  # type: ignore


class GitHubAdapter(GitHubClientBase):
    """GitHub client adapter scoped to a single repository."""

    def __init__(self, client: Github, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name
        self._repository: Repository | None = None

    @property
    def full_name(self) -> str:
        """Repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured adapter instance

        Raises:
            ValueError: If the repository is not in 'owner/repo' format
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    # Repository
    @retry_on_rate_limit()
    async def get_repository(self) -> Repository:
        """Get the repository for the current client, fetching it once."""
        if self._repository is None:
            self._repository = await asyncio.to_thread(self.client.get_repo, self.full_name)
        return self._repository

    # Release CRUD
    @retry_on_rate_limit()
    async def get_release(self, tag_name: str) -> GitRelease | None:
        """Get the release for a tag, or None if the tag has no release."""
        repository = await self.get_repository()
        try:
            return await asyncio.to_thread(repository.get_release, tag_name)
        except UnknownObjectException:
            logger.debug("No release found for tag", tag_name=tag_name)
            return None

    @handle_github_422
    @retry_on_rate_limit()
    async def create_release(
        self,
        tag_name: str,
        name: str,
        body: str,
        draft: bool = False,
        prerelease: bool = False,
        **kwargs: Any,
    ) -> GitRelease:
        """Create a release for an existing tag."""
        repository = await self.get_repository()
        release: GitRelease = await asyncio.to_thread(
            repository.create_git_release,
            tag=tag_name,
            name=name,
            message=body,
            draft=draft,
            prerelease=prerelease,
            **kwargs,
        )
        logger.info("Created release", tag_name=tag_name, name=name, draft=draft, prerelease=prerelease, url=release.html_url)
        return release

    async def delete_release(self, tag_name: str) -> bool:
        """Delete the release for a tag, returning whether one existed."""
        release = await self.get_release(tag_name)
        if release is None:
            return False
        await asyncio.to_thread(release.delete_release)
        logger.info("Deleted release", tag_name=tag_name)
        return True

    @handle_github_422
    @retry_on_rate_limit()
    async def upload_release_asset(
        self,
        release: GitRelease,
        path: Path,
        label: str = "",
        content_type: str = "application/octet-stream",
        **kwargs: Any,
    ) -> GitReleaseAsset:
        """Upload a file as an asset of a release, named after the file."""
        asset: GitReleaseAsset = await asyncio.to_thread(
            release.upload_asset,
            str(path),
            label=label,
            content_type=content_type,
            name=path.name,
            **kwargs,
        )
        logger.info("Uploaded release asset", asset=path.name, size=asset.size)
        return asset
