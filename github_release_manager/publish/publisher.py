"""Publishes a GitHub release with its body and artifacts."""

from pathlib import Path

import jinja2
import structlog
from github import GithubException

from github_release_manager.github.abc import GitHubClientBase
from github_release_manager.utils.constants import DEFAULT_RELEASE_NAME_PREFIX
from github_release_manager.utils.templates import load_packaged_template, render_template_with_model

from .context import ReleaseContext

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

RELEASE_BODY_TEMPLATE = "release_body.md.j2"


class ReleasePublishError(Exception):
    """Raised when a release cannot be created or its assets cannot be uploaded."""

    def __init__(self, message: str, tag: str) -> None:
        """Initializes the exception with the tag of the release being published."""
        super().__init__(message)
        self.tag = tag


class ReleasePublisher:
    """Creates the release for a tag and uploads the built artifacts to it."""

    def __init__(
        self,
        adapter: GitHubClientBase,
        release_name_prefix: str = DEFAULT_RELEASE_NAME_PREFIX,
        template: jinja2.Template | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            adapter: GitHub client scoped to the target repository.
            release_name_prefix: Prefix of the release title; the tag name is appended.
            template: Release body template; the packaged one is used when omitted.
        """
        self.adapter = adapter
        self.release_name_prefix = release_name_prefix
        self.template = template or load_packaged_template(RELEASE_BODY_TEMPLATE)

    def release_name(self, tag: str) -> str:
        """Return the title of the release for a tag."""
        return f"{self.release_name_prefix} {tag}".strip()

    def render_body(self, context: ReleaseContext) -> str:
        """Render the release body."""
        return render_template_with_model(model=context, template=self.template)

    async def publish(self, context: ReleaseContext, files: list[Path], replace_existing: bool = False) -> str:
        """Create the release for `context.tag`, upload `files`, and return the release page URL.

        Raises:
            ReleasePublishError: If a release already exists and may not be replaced, a file is
                missing, or the GitHub API rejects a request.
        """
        tag = context.tag
        missing = [str(path) for path in files if not path.is_file()]
        if missing:
            raise ReleasePublishError(f"Cannot publish {tag}, artifact files are missing: {', '.join(missing)}", tag)

        try:
            existing = await self.adapter.get_release(tag)
            if existing is not None:
                if not replace_existing:
                    raise ReleasePublishError(f"A release for {tag} already exists", tag)
                logger.warning("Deleting existing release before recreating it", tag=tag)
                await self.adapter.delete_release(tag)

            release = await self.adapter.create_release(
                tag_name=tag,
                name=self.release_name(tag),
                body=self.render_body(context),
                draft=False,
                prerelease=False,
            )
            for path in files:
                await self.adapter.upload_release_asset(release, path)
        except (GithubException, ValueError) as exc:
            logger.error("Failed to publish release", tag=tag, error=str(exc))
            raise ReleasePublishError(f"Failed to publish release {tag}: {exc}", tag) from exc

        logger.info("Published release", tag=tag, url=release.html_url, asset_count=len(files))
        return release.html_url
