"""Version markers stored as annotated git tags."""

import structlog

from github_release_manager.utils.constants import DEFAULT_GIT_REMOTE, DEFAULT_TAG_PREFIX

from .repository import GitCommandError, GitRepository

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitTagMarkerStore:
    """Version markers backed by `<prefix><version>` tags in a git repository.

    Markers are only ever appended. The single sanctioned overwrite is
    `replace`, used for explicit re-runs; it discards the previous tag and is
    not safe against concurrent releases of the same version.
    """

    def __init__(
        self,
        repository: GitRepository,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        remote: str = DEFAULT_GIT_REMOTE,
        push: bool = True,
    ) -> None:
        """Initialize the marker store.

        Args:
            repository: Repository holding the tags.
            tag_prefix: Prefix prepended to versions to form tag names.
            remote: Remote that tags are pushed to and deleted from.
            push: Whether tag creation and deletion are propagated to the remote.
        """
        self.repository = repository
        self.tag_prefix = tag_prefix
        self.remote = remote
        self.push = push

    def tag_for(self, version: str) -> str:
        """Return the tag name of a version."""
        return f"{self.tag_prefix}{version}"

    def exists(self, version: str) -> bool:
        """Return True if a marker for the version exists."""
        return self.repository.tag_exists(self.tag_for(version))

    def latest_tag(self, before: str | None = None) -> str | None:
        """Return the name of the most recent marker tag reachable from HEAD.

        With `before`, only tags reachable from the parent of that tag are considered.
        """
        rev = f"{before}^" if before else "HEAD"
        return self.repository.latest_tag(match=f"{self.tag_prefix}[0-9]*", rev=rev)

    def latest(self) -> str | None:
        """Return the version of the most recent marker reachable from HEAD."""
        tag = self.latest_tag()
        if tag is None:
            return None
        return tag[len(self.tag_prefix) :] if tag.startswith(self.tag_prefix) else tag

    def create(self, version: str, message: str) -> str:
        """Create the marker for a version and return its tag name."""
        tag = self.tag_for(version)
        self.repository.create_annotated_tag(tag, message)
        if self.push:
            self.repository.push_tag(self.remote, tag)
        return tag

    def delete(self, version: str) -> None:
        """Delete the marker for a version locally and, when pushing, on the remote."""
        tag = self.tag_for(version)
        if self.push:
            try:
                self.repository.delete_remote_tag(self.remote, tag)
            except GitCommandError as exc:
                if "remote ref does not exist" not in exc.stderr:
                    raise
                logger.info("Tag does not exist on the remote", remote=self.remote, tag=tag)
        if self.repository.tag_exists(tag):
            self.repository.delete_tag(tag)

    def replace(self, version: str, message: str) -> str:
        """Delete and recreate the marker for a version. Only used for explicit re-runs."""
        tag = self.tag_for(version)
        logger.warning("Replacing existing marker for re-run, the previous tag is discarded", tag=tag, remote=self.remote if self.push else None)
        self.delete(version)
        return self.create(version, message)
