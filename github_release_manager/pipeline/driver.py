"""Orchestrates a release: version, artifacts, release notes, marker, and publication."""

import time

import jinja2
import structlog

from github_release_manager.artifacts.builder import ArtifactBuildError, ArtifactBuilder, BuildArtifacts, BuildTarget
from github_release_manager.configuration.models import ReleaseConfig
from github_release_manager.git.markers import GitTagMarkerStore
from github_release_manager.git.repository import GitCommandError, GitRepository
from github_release_manager.github.adapter import GitHubAdapter
from github_release_manager.pipeline.results import ReleasePipelineResult, ReleasePipelineStatus
from github_release_manager.pipeline.triggers import ReleaseTrigger
from github_release_manager.publish.context import ReleaseContextBuilder
from github_release_manager.publish.publisher import RELEASE_BODY_TEMPLATE, ReleasePublisher, ReleasePublishError
from github_release_manager.release_notes.generator import ReleaseNotesGenerator
from github_release_manager.release_notes.markdown import MarkdownWriter
from github_release_manager.utils.github import DEFAULT_GITHUB_SERVER_URL
from github_release_manager.utils.templates import load_packaged_template, render_template_with_model
from github_release_manager.versioning.exceptions import VersionResolutionError
from github_release_manager.versioning.resolver import VersionResolver

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TAG_MESSAGE_TEMPLATE = "tag_message.j2"
GITHUB_CLIENT_STEP = "create GitHub client"


class ReleasePipeline:
    """Runs the release stages in order, passing each stage's output to the next.

    Any failure stops the run and is reported as an error result; stages after
    the failing one are not run, so a version that fails validation never
    produces artifacts or a marker.
    """

    def __init__(
        self,
        repository: GitRepository,
        markers: GitTagMarkerStore,
        resolver: VersionResolver,
        generator: ReleaseNotesGenerator | None = None,
        writer: MarkdownWriter | None = None,
        builder: ArtifactBuilder | None = None,
        publisher: ReleasePublisher | None = None,
        context_builder: ReleaseContextBuilder | None = None,
        tag_message_template: jinja2.Template | None = None,
    ) -> None:
        """Initialize the pipeline with its collaborators.

        Args:
            repository: Local clone the release is cut from.
            markers: Version markers (git tags) of the repository.
            resolver: Resolves the version of the run.
            generator: Groups commits into release notes.
            writer: Renders release notes as markdown.
            builder: Builds artifacts; building is skipped when omitted.
            publisher: Publishes the release; publication is skipped when omitted.
            context_builder: Builds the data rendered into the tag message and release body.
            tag_message_template: Template of the annotated tag message.
        """
        self.repository = repository
        self.markers = markers
        self.resolver = resolver
        self.generator = generator or ReleaseNotesGenerator()
        self.writer = writer or MarkdownWriter()
        self.builder = builder
        self.publisher = publisher
        self.context_builder = context_builder or ReleaseContextBuilder()
        self.tag_message_template = tag_message_template or load_packaged_template(TAG_MESSAGE_TEMPLATE)

    def _failed(self, step: str, exc: Exception, **values: object) -> ReleasePipelineResult:
        logger.error("Release step failed", step=step, error=str(exc), error_type=type(exc).__name__)
        return ReleasePipelineResult(status=ReleasePipelineStatus.ERROR, failed_step=step, error=str(exc), **values)  # type: ignore[arg-type]

    def previous_marker_tag(self, tag: str) -> str | None:
        """Return the marker the release notes start after.

        On a re-run the marker being replaced may itself be the most recent
        one, in which case the marker before it is used.
        """
        previous = self.markers.latest_tag()
        if previous == tag:
            previous = self.markers.latest_tag(before=tag)
        return previous

    async def run(self, trigger: ReleaseTrigger, dry_run: bool = False) -> ReleasePipelineResult:
        """Run the release for a trigger.

        A dry run resolves the version, builds the artifacts, and generates the
        release notes, but creates no marker and publishes nothing.
        """
        if not trigger.should_release:
            logger.info("Pull request was closed without merging, nothing to release", event=trigger.event.value)
            return ReleasePipelineResult(status=ReleasePipelineStatus.SKIPPED)

        start_time = time.time()

        # Resolve
        try:
            latest_commit_subject = self.repository.head_commit_subject()
            resolved = self.resolver.resolve(trigger, latest_commit_subject)
        except (VersionResolutionError, GitCommandError) as exc:
            return self._failed("resolve version", exc)

        version = str(resolved.version)
        tag = self.markers.tag_for(version)
        values: dict[str, object] = {
            "version": version,
            "version_source": resolved.source.value,
            "tag": tag,
            "replaced_existing_marker": resolved.replaces_existing_marker,
        }
        logger.info("Resolved release version", version=version, source=resolved.source.value, rerun=trigger.rerun)

        # Build
        artifacts = BuildArtifacts()
        if self.builder is not None:
            try:
                artifacts = self.builder.build(version)
            except ArtifactBuildError as exc:
                return self._failed("build artifacts", exc, **values)
        else:
            logger.info("No builder configured, skipping artifact build")
        values["artifacts"] = artifacts.all_files()

        # Release notes
        try:
            previous_tag = self.previous_marker_tag(tag)
            commits = self.repository.list_commits(since=previous_tag)
        except GitCommandError as exc:
            return self._failed("generate release notes", exc, **values)
        notes = self.generator.generate(commits)
        notes_markdown = self.writer.render(notes)
        values["notes"] = notes_markdown
        logger.info("Generated release notes", since=previous_tag, commit_count=len(commits), default_notes=notes.is_default)

        if dry_run:
            logger.info("Dry run, not creating a marker or publishing", tag=tag)
            return ReleasePipelineResult(status=ReleasePipelineStatus.DRY_RUN, **values)  # type: ignore[arg-type]

        # Marker
        context = self.context_builder.build(version, tag, notes_markdown)
        try:
            message = render_template_with_model(model=context, template=self.tag_message_template)
            if resolved.replaces_existing_marker:
                self.markers.replace(version, message)
            else:
                self.markers.create(version, message)
        except (GitCommandError, jinja2.TemplateError) as exc:
            return self._failed("create marker", exc, **values)

        # Publish
        if self.publisher is not None:
            try:
                values["release_url"] = await self.publisher.publish(context, artifacts.all_files(), replace_existing=resolved.replaces_existing_marker)
            except ReleasePublishError as exc:
                return self._failed("publish release", exc, **values)
        else:
            logger.info("No publisher configured, skipping release publication", tag=tag)

        logger.info("Release completed", tag=tag, duration=round(time.time() - start_time, 2))
        return ReleasePipelineResult(status=ReleasePipelineStatus.SUCCESS, **values)  # type: ignore[arg-type]


async def run_release_workflow(config: ReleaseConfig, trigger: ReleaseTrigger, dry_run: bool = False) -> ReleasePipelineResult:
    """Assemble the release pipeline from configuration and run it for a trigger."""
    repository = GitRepository(config.versioning.repo_path)
    markers = GitTagMarkerStore(
        repository,
        tag_prefix=config.versioning.tag_prefix,
        remote=config.remote,
        push=config.push_tags,
    )
    resolver = VersionResolver(
        markers,
        baseline_version=config.versioning.baseline_version,
        override_file=config.versioning.version_override_file,
    )
    targets = tuple(BuildTarget.parse(target) for target in config.build.targets)

    builder = None
    if not config.skip_build:
        builder = ArtifactBuilder(
            source_dir=config.build.source_dir,
            build_dir=config.build.build_dir,
            binary_name=config.build.binary_name,
            build_command=config.build.build_command,
            targets=targets,
        )

    publisher = None
    if config.github is not None and not dry_run:
        try:
            adapter = await GitHubAdapter.create(
                repo=config.github.repo,
                github_auth_type=config.github.github_authentication_type,
                github_pat_token=config.github.github_pat_token,
                github_app_id=config.github.github_app_id,
                github_app_private_key_path=config.github.github_app_private_key_path,
                github_app_installation_id=config.github.github_app_installation_id,
                github_api_url=config.github.github_api_url,
            )
        except (RuntimeError, ValueError) as exc:
            logger.error("Release step failed", step=GITHUB_CLIENT_STEP, repo=config.github.repo, error=str(exc))
            return ReleasePipelineResult(status=ReleasePipelineStatus.ERROR, failed_step=GITHUB_CLIENT_STEP, error=str(exc))
        body_template = load_packaged_template(RELEASE_BODY_TEMPLATE, config.release_body_template)
        publisher = ReleasePublisher(adapter, release_name_prefix=config.release_name_prefix, template=body_template)

    context_builder = ReleaseContextBuilder(
        binary_name=config.build.binary_name,
        targets=targets,
        repo=config.github.repo if config.github else None,
        server_url=config.github.github_server_url if config.github else DEFAULT_GITHUB_SERVER_URL,
    )

    pipeline = ReleasePipeline(
        repository=repository,
        markers=markers,
        resolver=resolver,
        builder=builder,
        publisher=publisher,
        context_builder=context_builder,
        tag_message_template=load_packaged_template(TAG_MESSAGE_TEMPLATE, config.tag_message_template),
    )
    return await pipeline.run(trigger, dry_run=dry_run)
