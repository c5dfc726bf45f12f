"""Resolves the single authoritative version of a release run."""

from pathlib import Path

import structlog

from github_release_manager.pipeline.triggers import ReleaseTrigger
from github_release_manager.utils.constants import DEFAULT_BASELINE_VERSION, DEFAULT_TAG_PREFIX
from github_release_manager.versioning.detector import VersionDetector
from github_release_manager.versioning.exceptions import (
    InvalidVersionFormatError,
    NoCandidateFoundError,
    VersionAlreadyExistsError,
)
from github_release_manager.versioning.markers import MarkerLookup
from github_release_manager.versioning.models import CandidateSource, ResolvedVersion, SemanticVersion, VersionCandidate

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class VersionResolver:
    """Determines, validates, and checks the uniqueness of a release version.

    Candidates are tried in a fixed order and the first one found wins:

    1. The manual version supplied by the trigger, used verbatim.
    2. The first `X.Y.Z` or `vX.Y.Z` in the pull request title.
    3. The first `X.Y.Z` or `vX.Y.Z` in the latest commit subject.
    4. The content of the version override file, when one is configured and present.
    5. The most recent marker (or the baseline when there is none) with its patch incremented.

    The winning candidate must be exactly `X.Y.Z` and must not already have a marker,
    unless the trigger is an explicit re-run.
    """

    def __init__(
        self,
        markers: MarkerLookup,
        baseline_version: str = DEFAULT_BASELINE_VERSION,
        override_file: Path | None = None,
        detector: VersionDetector | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            markers: Lookup over the existing version markers.
            baseline_version: Version auto-increment starts from when no marker exists.
            override_file: Optional file whose content is an explicit version override.
            detector: Version detector used to extract versions from free text.
        """
        self.markers = markers
        self.baseline_version = baseline_version
        self.override_file = override_file
        self.detector = detector or VersionDetector()

    def find_candidate(self, trigger: ReleaseTrigger, latest_commit_subject: str | None) -> VersionCandidate:
        """Return the first version candidate found, following the precedence order."""
        if trigger.manual_version is not None:
            logger.info("Using manually supplied version", version=trigger.manual_version)
            return VersionCandidate(trigger.manual_version, CandidateSource.MANUAL)

        from_title = self.detector.extract_first_version(trigger.pull_request_title)
        if from_title is not None:
            logger.info("Found version in pull request title", version=from_title, title=trigger.pull_request_title)
            return VersionCandidate(from_title, CandidateSource.PULL_REQUEST_TITLE)

        from_commit = self.detector.extract_first_version(latest_commit_subject)
        if from_commit is not None:
            logger.info("Found version in latest commit subject", version=from_commit, subject=latest_commit_subject)
            return VersionCandidate(from_commit, CandidateSource.COMMIT_SUBJECT)

        from_override = self._read_override_file()
        if from_override is not None:
            logger.info("Using version from override file", version=from_override, path=str(self.override_file))
            return VersionCandidate(from_override, CandidateSource.OVERRIDE_FILE)

        logger.warning("No version specified, falling back to auto-increment")
        return VersionCandidate(self._auto_increment(), CandidateSource.AUTO_INCREMENT)

    def _read_override_file(self) -> str | None:
        if self.override_file is None:
            return None
        if not self.override_file.is_file():
            logger.debug("Version override file not present", path=str(self.override_file))
            return None
        content = self.override_file.read_text(encoding="utf-8").strip()
        return content or None

    def _auto_increment(self) -> str:
        latest = self.markers.latest()
        origin = "latest marker"
        if latest is None:
            latest = self.baseline_version
            origin = "baseline"
        try:
            current = SemanticVersion.parse(latest)
        except ValueError as exc:
            raise NoCandidateFoundError(latest, origin) from exc
        next_version = current.bump_patch()
        logger.info("Auto-incremented patch version", previous=latest, origin=origin, version=str(next_version))
        return str(next_version)

    def validate(self, candidate: VersionCandidate) -> str:
        """Validate that a candidate is exactly major.minor.patch and return it unchanged."""
        try:
            SemanticVersion.parse(candidate.raw)
        except ValueError as exc:
            logger.error("Invalid version format", version=candidate.raw, source=candidate.source.value)
            raise InvalidVersionFormatError(candidate.raw, candidate.source) from exc
        return candidate.raw

    def resolve(self, trigger: ReleaseTrigger, latest_commit_subject: str | None = None) -> ResolvedVersion:
        """Resolve, validate, and check the uniqueness of the version for this run.

        Raises:
            InvalidVersionFormatError: If the winning candidate is not X.Y.Z.
            VersionAlreadyExistsError: If a marker already exists and the run is not a re-run.
            NoCandidateFoundError: If auto-increment cannot parse its starting version.
        """
        candidate = self.find_candidate(trigger, latest_commit_subject)
        version = self.validate(candidate)
        tag = f"{DEFAULT_TAG_PREFIX}{version}"

        exists = self.markers.exists(version)
        if exists and not trigger.rerun:
            logger.error("Version already exists", version=version, tag=tag)
            raise VersionAlreadyExistsError(version, tag, candidate.source)
        if exists:
            logger.warning("Version already exists, it will be replaced because this run is a re-run", tag=tag)
        else:
            logger.info("Version is available", tag=tag)

        return ResolvedVersion(version=version, source=candidate.source, replaces_existing_marker=exists)
