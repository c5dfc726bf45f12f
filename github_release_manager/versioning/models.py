"""Data models for version resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from github_release_manager.utils.constants import DEFAULT_TAG_PREFIX, VERSION_FORMAT_PATTERN


class CandidateSource(str, Enum):
    """Where a version candidate was found, in resolution precedence order."""

    MANUAL = "manual"
    PULL_REQUEST_TITLE = "pull_request_title"
    COMMIT_SUBJECT = "commit_subject"
    OVERRIDE_FILE = "override_file"
    AUTO_INCREMENT = "auto_increment"


@dataclass(frozen=True)
class VersionCandidate:
    """A not-yet-validated version string extracted from one input source."""

    raw: str
    source: CandidateSource


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A major.minor.patch version made of non-negative integers."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse a strict 'major.minor.patch' string.

        Raises:
            ValueError: If the value is not exactly three dot-separated non-negative integers.
        """
        if VERSION_FORMAT_PATTERN.fullmatch(value) is None:
            raise ValueError(f"'{value}' is not in major.minor.patch format")
        major, minor, patch = (int(part) for part in value.split("."))
        return cls(major, minor, patch)

    def bump_patch(self) -> "SemanticVersion":
        """Return the next patch version."""
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class ResolvedVersion:
    """The validated version chosen for a release run.

    `version` is the candidate text exactly as found, so "01.2.3" stays "01.2.3";
    it is only parsed into numbers for ordering and auto-increment.
    `replaces_existing_marker` is only ever True for explicit re-runs, where the
    existing marker is deleted and recreated instead of failing the run.
    """

    version: str
    source: CandidateSource
    replaces_existing_marker: bool = False

    @property
    def tag(self) -> str:
        """Marker name for the resolved version."""
        return f"{DEFAULT_TAG_PREFIX}{self.version}"

    def __str__(self) -> str:
        return self.version
