"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from github_release_manager.utils.constants import (
    DEFAULT_BASELINE_VERSION,
    DEFAULT_BINARY_NAME,
    DEFAULT_BUILD_COMMAND,
    DEFAULT_BUILD_DIR,
    DEFAULT_GIT_REMOTE,
    DEFAULT_RELEASE_NAME_PREFIX,
    DEFAULT_TAG_PREFIX,
)
from github_release_manager.utils.github import DEFAULT_GITHUB_SERVER_URL


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class GitHubConfig:
    """Connection settings for publishing releases to GitHub."""

    repo: str
    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None = None
    github_app_id: int | None = None
    github_app_private_key_path: Path | None = None
    github_app_installation_id: int | None = None
    github_server_url: str = DEFAULT_GITHUB_SERVER_URL


@dataclass
class VersioningConfig:
    """Settings for resolving the release version."""

    repo_path: Path = Path(".")
    baseline_version: str = DEFAULT_BASELINE_VERSION
    version_override_file: Path | None = None
    tag_prefix: str = DEFAULT_TAG_PREFIX


@dataclass
class BuildConfig:
    """Settings for building release artifacts."""

    source_dir: Path = Path(".")
    build_dir: Path = Path(DEFAULT_BUILD_DIR)
    binary_name: str = DEFAULT_BINARY_NAME
    build_command: str = DEFAULT_BUILD_COMMAND
    targets: list[str] = field(default_factory=list)


@dataclass
class ReleaseConfig:
    """Configuration class for the release command."""

    versioning: VersioningConfig
    build: BuildConfig
    github: GitHubConfig | None = None
    remote: str = DEFAULT_GIT_REMOTE
    push_tags: bool = True
    skip_build: bool = False
    release_name_prefix: str = DEFAULT_RELEASE_NAME_PREFIX
    release_body_template: Path | None = None
    tag_message_template: Path | None = None
