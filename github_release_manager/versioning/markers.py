"""Read-only view of the version markers a resolver checks against."""

from typing import Iterable, Protocol

from github_release_manager.utils.constants import DEFAULT_TAG_PREFIX
from github_release_manager.versioning.detector import VersionDetector


class MarkerLookup(Protocol):
    """Answers 'does marker X exist' and 'what is the most recent marker'."""

    def exists(self, version: str) -> bool:
        """Return True if a marker for the version (without prefix) exists."""
        ...

    def latest(self) -> str | None:
        """Return the most recent marker's version (without prefix), or None if there is none."""
        ...


class StaticMarkerStore:
    """Marker lookup over an explicit list of marker names, e.g. tags fetched elsewhere."""

    def __init__(self, markers: Iterable[str], tag_prefix: str = DEFAULT_TAG_PREFIX) -> None:
        """Initialize with marker names, with or without the tag prefix."""
        self.tag_prefix = tag_prefix
        self.versions: list[str] = [self._strip_prefix(marker.strip()) for marker in markers if marker.strip()]
        self.detector = VersionDetector()

    def _strip_prefix(self, marker: str) -> str:
        if self.tag_prefix and marker.startswith(self.tag_prefix):
            return marker[len(self.tag_prefix) :]
        return marker

    def exists(self, version: str) -> bool:
        """Return True if the version is among the known markers."""
        return version in self.versions

    def latest(self) -> str | None:
        """Return the highest known marker version."""
        return self.detector.get_latest_version(self.versions)
