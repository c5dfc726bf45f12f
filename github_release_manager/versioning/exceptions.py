"""Exceptions raised while resolving a release version."""

from github_release_manager.versioning.models import CandidateSource


class VersionResolutionError(Exception):
    """Base class for errors that abort a release before anything is built."""

    pass


class InvalidVersionFormatError(VersionResolutionError):
    """Raised when a version candidate is not in major.minor.patch format."""

    def __init__(self, candidate: str, source: CandidateSource) -> None:
        """Initializes the exception with the offending candidate and where it came from."""
        super().__init__(f"Invalid version format from {source.value}: '{candidate}'. Please use X.Y.Z format (e.g. 1.0.0)")
        self.candidate = candidate
        self.source = source


class VersionAlreadyExistsError(VersionResolutionError):
    """Raised when a marker for the resolved version already exists and the run is not a re-run."""

    def __init__(self, version: str, tag: str, source: CandidateSource) -> None:
        """Initializes the exception with the duplicated version."""
        super().__init__(f"Version {tag} already exists (resolved from {source.value}). Use --rerun to replace it explicitly.")
        self.version = version
        self.tag = tag
        self.source = source


class NoCandidateFoundError(VersionResolutionError):
    """Raised when auto-increment cannot derive a version from the latest marker or the baseline."""

    def __init__(self, value: str, origin: str) -> None:
        """Initializes the exception with the unparseable value and whether it was a marker or the baseline."""
        super().__init__(f"Cannot auto-increment from {origin} '{value}': expected X.Y.Z")
        self.value = value
        self.origin = origin
