"""Version detection in free text and version ordering."""

import re
from typing import Iterable

import structlog
from packaging import version

from github_release_manager.utils.constants import VERSION_CANDIDATE_PATTERN

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class VersionDetector:
    """Finds version numbers in pull request titles, commit subjects, and markdown."""

    def __init__(self, version_pattern: str = VERSION_CANDIDATE_PATTERN, flags: int = 0) -> None:
        """Initialize with a version pattern whose first group is the bare version."""
        self.pattern = re.compile(version_pattern, flags)

    def extract_versions(self, content: str) -> list[str]:
        """Extract all version numbers from content, in order of appearance."""
        versions = [match.group(1) for match in self.pattern.finditer(content)]
        logger.debug("Extracted versions", versions=versions)
        return versions

    def extract_first_version(self, content: str | None) -> str | None:
        """Extract the first version in content with any 'v' prefix stripped."""
        if not content:
            return None
        match = self.pattern.search(content)
        if match is None:
            return None
        return match.group(1)

    def get_latest_version(self, versions: Iterable[str]) -> str | None:
        """Get the highest version among several version strings.

        Strings that are not valid versions are ignored.
        """
        parsed: list[tuple[version.Version, str]] = []
        for candidate in versions:
            try:
                parsed.append((version.parse(candidate), candidate))
            except version.InvalidVersion:
                logger.debug("Ignoring unparseable version", version=candidate)
        if not parsed:
            return None
        return max(parsed, key=lambda item: item[0])[1]
