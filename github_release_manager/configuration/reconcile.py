"""Reconcile command line options, environment settings, and GitHub authentication configuration."""

from pathlib import Path

import structlog

from github_release_manager.artifacts.builder import DEFAULT_TARGETS, BuildTarget
from github_release_manager.configuration.env import Settings
from github_release_manager.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from github_release_manager.configuration.models import (
    BuildConfig,
    GitHubAuthenticationType,
    GitHubConfig,
    ReleaseConfig,
    VersioningConfig,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both PAT and App configurations are defined, or neither is complete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_pat_token and (github_app_id or github_app_private_key_path or github_app_installation_id):
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    app_settings = [
        (github_app_id, "GitHub App ID", "--github-app-id", "GITHUB_APP_ID"),
        (github_app_private_key_path, "GitHub App private key path", "--github-app-private-key-path", "GITHUB_APP_PRIVATE_KEY_PATH"),
        (github_app_installation_id, "GitHub App installation ID", "--github-app-installation-id", "GITHUB_APP_INSTALLATION_ID"),
    ]
    if all(value for value, *_ in app_settings):
        return GitHubAuthenticationType.APP
    elif any(value for value, *_ in app_settings):
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{name} (command line option {cli_name}, environment variable {env_name})" for value, name, cli_name, env_name in app_settings if not value
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )


async def reconcile_versioning_configuration(
    settings: Settings,
    cli_repo_path: Path | None = None,
    cli_baseline_version: str | None = None,
    cli_version_override_file: Path | None = None,
    cli_tag_prefix: str | None = None,
) -> VersioningConfig:
    """Merge versioning options with environment settings. Command line values win.

    Raises:
        RequiredConfigurationElementError: If the repository path is not a directory.
    """
    repo_path = cli_repo_path if cli_repo_path is not None else settings.RELEASE_REPO_PATH
    if not repo_path.is_dir():
        raise RequiredConfigurationElementError("Repository path", "--repo-path", "RELEASE_REPO_PATH", reason=f"not a directory: {repo_path}")

    config = VersioningConfig(
        repo_path=repo_path,
        baseline_version=cli_baseline_version if cli_baseline_version is not None else settings.RELEASE_BASELINE_VERSION,
        version_override_file=cli_version_override_file if cli_version_override_file is not None else settings.RELEASE_VERSION_OVERRIDE_FILE,
        tag_prefix=cli_tag_prefix if cli_tag_prefix is not None else settings.RELEASE_TAG_PREFIX,
    )
    logger.debug("Reconciled versioning configuration", config=config)
    return config


async def reconcile_build_configuration(
    settings: Settings,
    cli_source_dir: Path | None = None,
    cli_build_dir: Path | None = None,
    cli_binary_name: str | None = None,
    cli_build_command: str | None = None,
    cli_targets: list[str] | None = None,
) -> BuildConfig:
    """Merge build options with environment settings. Command line values win.

    Targets given in the environment are comma separated (e.g., "linux/amd64,darwin/arm64").

    Raises:
        RequiredConfigurationElementError: If the build command has no {output} placeholder or a target is malformed.
    """
    build_command = cli_build_command if cli_build_command is not None else settings.RELEASE_BUILD_COMMAND
    if "{output}" not in build_command:
        raise RequiredConfigurationElementError(
            "Build command", "--build-command", "RELEASE_BUILD_COMMAND", reason="missing the {output} placeholder"
        )

    if cli_targets:
        targets = list(cli_targets)
    elif settings.RELEASE_TARGETS:
        targets = [target.strip() for target in settings.RELEASE_TARGETS.split(",") if target.strip()]
    else:
        targets = [str(target) for target in DEFAULT_TARGETS]
    for target in targets:
        try:
            BuildTarget.parse(target)
        except ValueError as exc:
            raise RequiredConfigurationElementError("Build target", "--target", "RELEASE_TARGETS", reason=str(exc)) from exc

    return BuildConfig(
        source_dir=cli_source_dir if cli_source_dir is not None else settings.RELEASE_SOURCE_DIR,
        build_dir=cli_build_dir if cli_build_dir is not None else settings.RELEASE_BUILD_DIR,
        binary_name=cli_binary_name if cli_binary_name is not None else settings.RELEASE_BINARY_NAME,
        build_command=build_command,
        targets=targets,
    )


async def reconcile_release_configuration(
    settings: Settings,
    versioning: VersioningConfig,
    build: BuildConfig,
    github: GitHubConfig | None = None,
    cli_remote: str | None = None,
    cli_release_name_prefix: str | None = None,
    push_tags: bool = True,
    skip_build: bool = False,
    release_body_template: Path | None = None,
    tag_message_template: Path | None = None,
) -> ReleaseConfig:
    """Assemble the configuration of a full release run.

    Raises:
        RequiredConfigurationElementError: If a custom template file does not exist.
    """
    for template_path, name, cli_name in (
        (release_body_template, "Release body template", "--release-body-template"),
        (tag_message_template, "Tag message template", "--tag-message-template"),
    ):
        if template_path is not None and not template_path.is_file():
            raise RequiredConfigurationElementError(name, cli_name, "(none)", reason=f"not a file: {template_path}")

    config = ReleaseConfig(
        versioning=versioning,
        build=build,
        github=github,
        remote=cli_remote if cli_remote is not None else settings.RELEASE_REMOTE,
        push_tags=push_tags,
        skip_build=skip_build,
        release_name_prefix=cli_release_name_prefix if cli_release_name_prefix is not None else settings.RELEASE_NAME_PREFIX,
        release_body_template=release_body_template,
        tag_message_template=tag_message_template,
    )
    logger.info(
        "Reconciled release configuration",
        repo=github.repo if github else None,
        remote=config.remote,
        push_tags=push_tags,
        skip_build=skip_build,
        targets=build.targets,
    )
    return config
