"""Version resolution module."""

from .detector import VersionDetector
from .exceptions import (
    InvalidVersionFormatError,
    NoCandidateFoundError,
    VersionAlreadyExistsError,
    VersionResolutionError,
)
from .markers import MarkerLookup, StaticMarkerStore
from .models import CandidateSource, ResolvedVersion, SemanticVersion, VersionCandidate
from .resolver import VersionResolver

__all__ = [
    "CandidateSource",
    "VersionCandidate",
    "SemanticVersion",
    "ResolvedVersion",
    "VersionDetector",
    "MarkerLookup",
    "StaticMarkerStore",
    "VersionResolver",
    "VersionResolutionError",
    "InvalidVersionFormatError",
    "VersionAlreadyExistsError",
    "NoCandidateFoundError",
]
