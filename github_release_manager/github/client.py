"""Sets up the authenticated PyGithub client."""

from pathlib import Path

from github import Auth, Github

from github_release_manager.configuration.models import GitHubAuthenticationType


async def get_github_app_client(
    github_app_id: int,
    github_app_private_key_path: Path,
    github_app_installation_id: int,
    github_api_url: str,
) -> Github:
    """Returns a GitHub client authenticated as a GitHub App installation."""
    if not (github_app_id and github_app_private_key_path and github_app_installation_id):
        raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id in config.")
    try:
        with open(github_app_private_key_path, encoding="utf-8") as f:
            private_key = f.read()
    except OSError as e:
        raise ValueError(f"Failed to read GitHub App private key: {e}") from e
    app_auth = Auth.AppAuth(app_id=github_app_id, private_key=private_key)
    installation_auth = Auth.AppInstallationAuth(app_auth, github_app_installation_id)
    return Github(auth=installation_auth, base_url=github_api_url)


async def get_github_pat_client(github_pat_token: str, github_api_url: str) -> Github:
    """Returns a GitHub client authenticated with a personal access token."""
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    return Github(auth=Auth.Token(github_pat_token), base_url=github_api_url)


async def get_github_client(
    github_auth_type: GitHubAuthenticationType,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_api_url: str,
) -> Github:
    """Returns an authenticated GitHub client using either GitHub App or PAT credentials.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if the credentials for the chosen type are missing.
    """
    if github_auth_type == GitHubAuthenticationType.APP:
        if not (github_app_id and github_app_private_key_path and github_app_installation_id):
            raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id in config.")
        return await get_github_app_client(github_app_id, github_app_private_key_path, github_app_installation_id, github_api_url)
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    return await get_github_pat_client(github_pat_token, github_api_url)
