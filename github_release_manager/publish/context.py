"""Data rendered into the tag annotation and the release body."""

from dataclasses import dataclass, field

from pydantic import BaseModel

from github_release_manager.artifacts.builder import DEFAULT_TARGETS, BuildTarget, archive_name, artifact_name
from github_release_manager.utils.constants import DEFAULT_BINARY_NAME
from github_release_manager.utils.github import DEFAULT_GITHUB_SERVER_URL, build_release_download_url, build_release_page_url

OS_LABELS = {
    "linux": "Linux",
    "windows": "Windows",
    "darwin": "macOS",
}


class DownloadEntry(BaseModel):
    """One downloadable file listed in the release notes."""

    label: str
    file_name: str
    url: str | None = None


class ReleaseContext(BaseModel):
    """Everything the tag message and release body templates can reference."""

    version: str
    tag: str
    notes: str
    binary_name: str
    downloads: list[DownloadEntry]
    archive_name: str
    release_url: str | None = None
    installation_url: str | None = None


def os_label(target: BuildTarget) -> str:
    """Return the human-readable label of a target, e.g. 'macOS (arm64)'."""
    return f"{OS_LABELS.get(target.os, target.os.capitalize())} ({target.arch})"


@dataclass
class ReleaseContextBuilder:
    """Builds the template context of a release from its version and notes.

    Download URLs are only filled in when the repository is known.
    """

    binary_name: str = DEFAULT_BINARY_NAME
    targets: tuple[BuildTarget, ...] = DEFAULT_TARGETS
    repo: str | None = None
    server_url: str = DEFAULT_GITHUB_SERVER_URL
    installation_target: BuildTarget = field(default_factory=lambda: BuildTarget("linux", "amd64"))

    def _download_url(self, tag: str, file_name: str) -> str | None:
        if self.repo is None:
            return None
        return build_release_download_url(self.repo, tag, file_name, self.server_url)

    def build(self, version: str, tag: str, notes_markdown: str) -> ReleaseContext:
        """Build the context for one release."""
        downloads = []
        for target in self.targets:
            file_name = artifact_name(self.binary_name, version, target)
            downloads.append(DownloadEntry(label=os_label(target), file_name=file_name, url=self._download_url(tag, file_name)))

        installation_url = None
        if self.installation_target in self.targets:
            installation_url = self._download_url(tag, artifact_name(self.binary_name, version, self.installation_target))

        return ReleaseContext(
            version=version,
            tag=tag,
            notes=notes_markdown,
            binary_name=self.binary_name,
            downloads=downloads,
            archive_name=archive_name(self.binary_name, version),
            release_url=build_release_page_url(self.repo, tag, self.server_url) if self.repo else None,
            installation_url=installation_url,
        )
