"""Contains utility functions for GitHub interactions."""

DEFAULT_GITHUB_SERVER_URL = "https://github.com"


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A repository in the format 'owner/repo' is required to publish a release.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def build_release_download_url(repo: str, tag: str, asset_name: str, server_url: str = DEFAULT_GITHUB_SERVER_URL) -> str:
    """Build the public download URL of a release asset."""
    return f"{server_url.rstrip('/')}/{repo.strip('/')}/releases/download/{tag}/{asset_name}"


def build_release_page_url(repo: str, tag: str, server_url: str = DEFAULT_GITHUB_SERVER_URL) -> str:
    """Build the URL of the release page for a tag."""
    return f"{server_url.rstrip('/')}/{repo.strip('/')}/releases/tag/{tag}"
