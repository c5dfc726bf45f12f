"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_release_manager.configuration.env import Settings
from github_release_manager.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from github_release_manager.configuration.models import GitHubConfig, ReleaseConfig, VersioningConfig
from github_release_manager.configuration.reconcile import (
    reconcile_build_configuration,
    reconcile_release_configuration,
    reconcile_versioning_configuration,
    validate_github_authentication_configuration,
)
from github_release_manager.git.markers import GitTagMarkerStore
from github_release_manager.git.repository import GitCommandError, GitRepository
from github_release_manager.pipeline.driver import run_release_workflow
from github_release_manager.pipeline.results import ReleasePipelineStatus
from github_release_manager.pipeline.triggers import ReleaseTrigger, build_release_trigger
from github_release_manager.release_notes.generator import ReleaseNotesGenerator
from github_release_manager.release_notes.markdown import MarkdownWriter
from github_release_manager.utils.github import DEFAULT_GITHUB_SERVER_URL
from github_release_manager.utils.logging import configure_logging
from github_release_manager.versioning.exceptions import VersionResolutionError
from github_release_manager.versioning.markers import MarkerLookup, StaticMarkerStore
from github_release_manager.versioning.resolver import VersionResolver

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Resolve release versions, generate release notes, and publish releases.")

# Options shared by several commands. Versioning options fall back to the
# RELEASE_* environment settings during reconciliation.
VersionOption = Annotated[str | None, Option("--version", help="Release version to use verbatim (X.Y.Z).")]
PrTitleOption = Annotated[str | None, Option("--pr-title", help="Title of the merged pull request to extract a version from.")]
EventNameOption = Annotated[str | None, Option("--event-name", envvar="GITHUB_EVENT_NAME", help="Triggering event (workflow_dispatch, pull_request, push).")]
EventPathOption = Annotated[Path | None, Option("--event-path", envvar="GITHUB_EVENT_PATH", help="Path to the GitHub Actions event payload.")]
RunAttemptOption = Annotated[int | None, Option("--run-attempt", envvar="GITHUB_RUN_ATTEMPT", help="Run attempt; above 1 implies --rerun.")]
RerunOption = Annotated[bool, Option("--rerun", help="Replace an existing marker for the version instead of failing.")]
RepoPathOption = Annotated[Path | None, Option("--repo-path", help="Path to the git repository. [env: RELEASE_REPO_PATH]")]
BaselineVersionOption = Annotated[
    str | None, Option("--baseline-version", help="Version auto-increment starts from when no marker exists. [env: RELEASE_BASELINE_VERSION]")
]
VersionOverrideFileOption = Annotated[
    Path | None, Option("--version-override-file", help="File whose content overrides auto-increment. [env: RELEASE_VERSION_OVERRIDE_FILE]")
]
TagPrefixOption = Annotated[str | None, Option("--tag-prefix", help="Prefix of marker tags. [env: RELEASE_TAG_PREFIX]")]


def main_callback(
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Configure logging for every command."""
    configure_logging(debug=debug)


typer_app.callback()(main_callback)


def fail(message: str) -> typer.Exit:
    """Print an error to stderr and return the exit to raise."""
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def load_trigger(
    event_name: str | None,
    event_path: Path | None,
    version: str | None,
    pr_title: str | None,
    rerun: bool,
    run_attempt: int | None,
) -> ReleaseTrigger:
    """Build the release trigger, exiting on an unusable event payload."""
    try:
        return build_release_trigger(
            event_name=event_name,
            event_path=event_path,
            manual_version=version,
            pull_request_title=pr_title,
            rerun=rerun,
            run_attempt=run_attempt,
        )
    except (OSError, ValueError) as exc:
        raise fail(f"cannot read release trigger: {exc}") from exc


def load_versioning_config(
    repo_path: Path | None,
    baseline_version: str | None,
    version_override_file: Path | None,
    tag_prefix: str | None,
) -> VersioningConfig:
    """Reconcile versioning options with the environment, exiting on invalid configuration."""
    try:
        return asyncio.run(
            reconcile_versioning_configuration(
                Settings(),
                cli_repo_path=repo_path,
                cli_baseline_version=baseline_version,
                cli_version_override_file=version_override_file,
                cli_tag_prefix=tag_prefix,
            )
        )
    except RequiredConfigurationElementError as exc:
        raise fail(str(exc)) from exc


@typer_app.command(name="resolve-version")
def resolve_version_cli(
    version: VersionOption = None,
    pr_title: PrTitleOption = None,
    event_name: EventNameOption = None,
    event_path: EventPathOption = None,
    run_attempt: RunAttemptOption = None,
    rerun: RerunOption = False,
    repo_path: RepoPathOption = None,
    baseline_version: BaselineVersionOption = None,
    version_override_file: VersionOverrideFileOption = None,
    tag_prefix: TagPrefixOption = None,
    commit_subject: Annotated[
        str | None, Option("--commit-subject", help="Latest commit subject. Read from git HEAD unless --marker is given.")
    ] = None,
    marker: Annotated[
        list[str] | None, Option("--marker", help="Existing version marker (repeatable). When given, git tags are not consulted.")
    ] = None,
    github_output: Annotated[
        Path | None, Option("--github-output", envvar="GITHUB_OUTPUT", help="File to append VERSION and TAG outputs to.")
    ] = None,
) -> None:
    """Resolve, validate, and check the uniqueness of the release version, then print it."""
    trigger = load_trigger(event_name, event_path, version, pr_title, rerun, run_attempt)
    if not trigger.should_release:
        typer.echo("Pull request was closed without merging, nothing to release.", err=True)
        return

    config = load_versioning_config(repo_path, baseline_version, version_override_file, tag_prefix)
    markers: MarkerLookup
    try:
        if marker:
            markers = StaticMarkerStore(marker, tag_prefix=config.tag_prefix)
        else:
            repository = GitRepository(config.repo_path)
            markers = GitTagMarkerStore(repository, tag_prefix=config.tag_prefix, push=False)
            if commit_subject is None:
                commit_subject = repository.head_commit_subject()
        resolver = VersionResolver(markers, baseline_version=config.baseline_version, override_file=config.version_override_file)
        resolved = resolver.resolve(trigger, commit_subject)
    except (VersionResolutionError, GitCommandError) as exc:
        raise fail(str(exc)) from exc

    tag = f"{config.tag_prefix}{resolved.version}"
    if github_output is not None:
        with open(github_output, "a", encoding="utf-8") as f:
            f.write(f"VERSION={resolved.version}\nTAG={tag}\n")
    typer.echo(str(resolved.version))


@typer_app.command(name="generate-notes")
def generate_notes_cli(
    since: Annotated[str | None, Option("--since", help="Revision the notes start after. Defaults to the latest marker.")] = None,
    head: Annotated[str, Option("--head", help="Last revision included in the notes.")] = "HEAD",
    output: Annotated[Path | None, Option("--output", help="File to write the notes to instead of stdout.")] = None,
    changelog_file: Annotated[Path | None, Option("--changelog-file", help="Changelog to insert the notes into under a version header.")] = None,
    version: Annotated[str | None, Option("--version", help="Version header used with --changelog-file.")] = None,
    repo_path: RepoPathOption = None,
    tag_prefix: TagPrefixOption = None,
) -> None:
    """Generate categorized release notes from the commits since the latest marker."""
    if changelog_file is not None and version is None:
        raise fail("--version is required with --changelog-file")

    config = load_versioning_config(repo_path, None, None, tag_prefix)
    repository = GitRepository(config.repo_path)
    markers = GitTagMarkerStore(repository, tag_prefix=config.tag_prefix, push=False)
    try:
        start = since if since is not None else markers.latest_tag()
        commits = repository.list_commits(since=start, head=head)
    except GitCommandError as exc:
        raise fail(str(exc)) from exc

    writer = MarkdownWriter()
    notes_markdown = writer.render(ReleaseNotesGenerator().generate(commits))

    if output is not None:
        output.write_text(notes_markdown, encoding="utf-8")
        typer.echo(f"Wrote release notes for {len(commits)} commit(s) to {output}", err=True)
    else:
        typer.echo(notes_markdown, nl=False)

    if changelog_file is not None and version is not None:
        existing = changelog_file.read_text(encoding="utf-8") if changelog_file.exists() else ""
        if writer.is_version_documented(existing, version):
            typer.echo(f"Version {version} is already documented in {changelog_file}, leaving it unchanged", err=True)
            return
        try:
            updated = writer.insert_release_notes(existing, notes_markdown, version)
        except ValueError as exc:
            raise fail(f"{changelog_file}: {exc}") from exc
        changelog_file.write_text(updated, encoding="utf-8")
        typer.echo(f"Inserted release notes for v{version} into {changelog_file}", err=True)


# --- Typer group for commands against a GitHub repository ---
repo_app = typer.Typer(help="Repository-related commands")


def repo_callback(
    ctx: typer.Context,
    repo: Annotated[str, Argument(help="Repository name (owner/repo).")],
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = "https://api.github.com",
    github_server_url: Annotated[str, Option(envvar="GITHUB_SERVER_URL", help="GitHub server URL used in download links.")] = DEFAULT_GITHUB_SERVER_URL,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
) -> None:
    """Set the repository for the current context."""
    ctx.ensure_object(dict)
    ctx.obj["repo"] = repo
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_server_url"] = github_server_url
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["github_app_id"] = github_app_id
    ctx.obj["github_app_private_key_path"] = github_app_private_key_path
    ctx.obj["github_app_installation_id"] = github_app_installation_id


repo_app.callback()(repo_callback)


@repo_app.command(name="release")
def release_cli(
    ctx: typer.Context,
    version: VersionOption = None,
    pr_title: PrTitleOption = None,
    event_name: EventNameOption = None,
    event_path: EventPathOption = None,
    run_attempt: RunAttemptOption = None,
    rerun: RerunOption = False,
    repo_path: RepoPathOption = None,
    baseline_version: BaselineVersionOption = None,
    version_override_file: VersionOverrideFileOption = None,
    tag_prefix: TagPrefixOption = None,
    dry_run: Annotated[bool, Option("--dry-run", help="Resolve, build, and generate notes without tagging or publishing.")] = False,
    skip_build: Annotated[bool, Option("--skip-build", help="Do not build artifacts.")] = False,
    no_push: Annotated[bool, Option("--no-push", help="Create tags locally without pushing them.")] = False,
    remote: Annotated[str | None, Option("--remote", help="Remote tags are pushed to. [env: RELEASE_REMOTE]")] = None,
    source_dir: Annotated[Path | None, Option("--source-dir", help="Directory the build command runs in. [env: RELEASE_SOURCE_DIR]")] = None,
    build_dir: Annotated[Path | None, Option("--build-dir", help="Directory artifacts are written to. [env: RELEASE_BUILD_DIR]")] = None,
    binary_name: Annotated[str | None, Option("--binary-name", help="Base name of built binaries. [env: RELEASE_BINARY_NAME]")] = None,
    build_command: Annotated[
        str | None, Option("--build-command", help="Build command with {version}, {output}, {os}, {arch} placeholders. [env: RELEASE_BUILD_COMMAND]")
    ] = None,
    target: Annotated[list[str] | None, Option("--target", help="Build target as os/arch (repeatable). [env: RELEASE_TARGETS]")] = None,
    release_name_prefix: Annotated[str | None, Option("--release-name-prefix", help="Prefix of the release title. [env: RELEASE_NAME_PREFIX]")] = None,
    release_body_template: Annotated[Path | None, Option("--release-body-template", help="Jinja2 template replacing the release body.")] = None,
    tag_message_template: Annotated[Path | None, Option("--tag-message-template", help="Jinja2 template replacing the tag message.")] = None,
) -> None:
    """Run the full release: resolve the version, build, generate notes, tag, and publish."""
    repo: str = ctx.obj["repo"]
    github_app_private_key_path: Path | None = ctx.obj["github_app_private_key_path"]

    trigger = load_trigger(event_name, event_path, version, pr_title, rerun, run_attempt)
    settings = Settings()

    async def reconcile() -> ReleaseConfig:
        github = None
        if not dry_run:
            github_auth_type = await validate_github_authentication_configuration(
                github_pat_token=ctx.obj["github_pat_token"],
                github_app_id=ctx.obj["github_app_id"],
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=ctx.obj["github_app_installation_id"],
            )
            github = GitHubConfig(
                repo=repo,
                github_api_url=ctx.obj["github_api_url"],
                github_authentication_type=github_auth_type,
                github_pat_token=ctx.obj["github_pat_token"],
                github_app_id=ctx.obj["github_app_id"],
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=ctx.obj["github_app_installation_id"],
                github_server_url=ctx.obj["github_server_url"],
            )
        versioning = await reconcile_versioning_configuration(settings, repo_path, baseline_version, version_override_file, tag_prefix)
        build = await reconcile_build_configuration(settings, source_dir, build_dir, binary_name, build_command, target)
        return await reconcile_release_configuration(
            settings,
            versioning,
            build,
            github=github,
            cli_remote=remote,
            cli_release_name_prefix=release_name_prefix,
            push_tags=not no_push,
            skip_build=skip_build,
            release_body_template=release_body_template,
            tag_message_template=tag_message_template,
        )

    try:
        config = asyncio.run(reconcile())
    except (GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError) as exc:
        raise fail(str(exc)) from exc

    result = asyncio.run(run_release_workflow(config, trigger, dry_run=dry_run))

    if result.status == ReleasePipelineStatus.SKIPPED:
        typer.echo("Pull request was closed without merging, nothing to release.", err=True)
        return
    if result.status == ReleasePipelineStatus.ERROR:
        raise fail(f"{result.failed_step} failed: {result.error}")

    typer.echo(f"Version: {result.version} (from {result.version_source})")
    for path in result.artifacts:
        typer.echo(f"  - {path}")
    if result.status == ReleasePipelineStatus.DRY_RUN:
        typer.echo("Dry run, no tag was created and nothing was published. Release notes:")
        typer.echo(result.notes or "", nl=False)
        return
    if result.replaced_existing_marker:
        typer.echo(f"Replaced existing tag {result.tag}")
    typer.echo(f"🎉 Release {result.tag} created successfully!")
    if result.release_url:
        typer.echo(f"📦 Files available at: {result.release_url}")


# --- Register the repo_app as a sub-app of the main Typer app ---
typer_app.add_typer(repo_app, name="repo")


if __name__ == "__main__":
    typer_app()
