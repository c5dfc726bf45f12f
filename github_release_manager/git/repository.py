"""Thin wrapper around the git command line for history and tag operations."""

import subprocess
from pathlib import Path

import structlog

from github_release_manager.release_notes.models import Commit

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_FIELD_SEPARATOR = "\x1f"


class GitCommandError(Exception):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        """Initializes the exception with the failed command and its output."""
        super().__init__(f"git command failed ({returncode}): {' '.join(command)}: {stderr.strip()}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class GitRepository:
    """Runs git commands against a local clone."""

    def __init__(self, path: Path = Path("."), git_executable: str = "git") -> None:
        """Initialize with the path of the working tree."""
        self.path = path
        self.git_executable = git_executable

    def run(self, *args: str, input_text: str | None = None, check: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a git command in the repository and return the completed process.

        Raises:
            GitCommandError: If `check` is True and the command fails.
        """
        command = [self.git_executable, *args]
        logger.debug("Running git command", command=" ".join(command), cwd=str(self.path))
        result = subprocess.run(command, cwd=self.path, input=input_text, capture_output=True, text=True)
        if check and result.returncode != 0:
            raise GitCommandError(command, result.returncode, result.stderr)
        return result

    def latest_tag(self, match: str | None = None, rev: str = "HEAD") -> str | None:
        """Return the most recent tag reachable from a revision, or None if there is none."""
        args = ["describe", "--tags", "--abbrev=0"]
        if match:
            args.extend(["--match", match])
        args.append(rev)
        result = self.run(*args, check=False)
        if result.returncode != 0:
            logger.debug("No tag reachable from revision", rev=rev, stderr=result.stderr.strip())
            return None
        return result.stdout.strip() or None

    def tag_exists(self, tag: str) -> bool:
        """Return True if the tag exists locally."""
        result = self.run("rev-parse", "--verify", "--quiet", f"refs/tags/{tag}", check=False)
        return result.returncode == 0

    def head_commit_subject(self, head: str = "HEAD") -> str:
        """Return the subject line of a commit."""
        return self.run("log", "-1", "--pretty=format:%s", head).stdout.strip()

    def list_commits(self, since: str | None = None, head: str = "HEAD") -> list[Commit]:
        """List commits after `since` up to and including `head`, oldest first.

        Without `since`, the whole history reachable from `head` is listed.
        """
        revision_range = f"{since}..{head}" if since else head
        output = self.run("log", "-z", "--reverse", f"--pretty=format:%H{_FIELD_SEPARATOR}%s", revision_range).stdout
        commits: list[Commit] = []
        # Records are NUL-terminated; subjects may contain other line-breaking characters.
        for record in output.split("\0"):
            if not record.strip():
                continue
            sha, _, subject = record.lstrip("\n").partition(_FIELD_SEPARATOR)
            commits.append(Commit(subject=subject, sha=sha))
        logger.debug("Listed commits", revision_range=revision_range, commit_count=len(commits))
        return commits

    def create_annotated_tag(self, tag: str, message: str) -> None:
        """Create an annotated tag on HEAD with the given message.

        Lines starting with "#" (markdown headers) are kept.
        """
        self.run("tag", "-a", tag, "--cleanup=whitespace", "-F", "-", input_text=message)
        logger.info("Created tag", tag=tag)

    def delete_tag(self, tag: str) -> None:
        """Delete a local tag."""
        self.run("tag", "--delete", tag)
        logger.info("Deleted local tag", tag=tag)

    def push_tag(self, remote: str, tag: str) -> None:
        """Push a tag to a remote."""
        self.run("push", remote, f"refs/tags/{tag}")
        logger.info("Pushed tag", remote=remote, tag=tag)

    def delete_remote_tag(self, remote: str, tag: str) -> None:
        """Delete a tag from a remote."""
        self.run("push", "--delete", remote, f"refs/tags/{tag}")
        logger.info("Deleted remote tag", remote=remote, tag=tag)
