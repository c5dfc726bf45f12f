"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from github_release_manager.utils.constants import (
    DEFAULT_BASELINE_VERSION,
    DEFAULT_BINARY_NAME,
    DEFAULT_BUILD_COMMAND,
    DEFAULT_BUILD_DIR,
    DEFAULT_GIT_REMOTE,
    DEFAULT_RELEASE_NAME_PREFIX,
    DEFAULT_TAG_PREFIX,
)


class Settings(BaseSettings):
    """Environment variable settings for the release configuration.

    GitHub connection settings (GITHUB_API_URL, GITHUB_PAT_TOKEN, GITHUB_APP_*)
    and DEBUG are read by the command line options directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Versioning settings
    RELEASE_REPO_PATH: Path = Path(".")
    RELEASE_BASELINE_VERSION: str = DEFAULT_BASELINE_VERSION
    RELEASE_VERSION_OVERRIDE_FILE: Path | None = None
    RELEASE_TAG_PREFIX: str = DEFAULT_TAG_PREFIX
    RELEASE_REMOTE: str = DEFAULT_GIT_REMOTE

    # Build settings
    RELEASE_SOURCE_DIR: Path = Path(".")
    RELEASE_BINARY_NAME: str = DEFAULT_BINARY_NAME
    RELEASE_BUILD_COMMAND: str = DEFAULT_BUILD_COMMAND
    RELEASE_BUILD_DIR: Path = Path(DEFAULT_BUILD_DIR)
    RELEASE_TARGETS: str | None = None

    # Publishing settings
    RELEASE_NAME_PREFIX: str = DEFAULT_RELEASE_NAME_PREFIX
