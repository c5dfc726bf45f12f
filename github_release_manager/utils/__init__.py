"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_BASELINE_VERSION,
    DEFAULT_TAG_PREFIX,
    VERSION_CANDIDATE_PATTERN,
    VERSION_FORMAT_PATTERN,
)
from .retry import retry_on_rate_limit

__all__ = [
    "VERSION_CANDIDATE_PATTERN",
    "VERSION_FORMAT_PATTERN",
    "DEFAULT_BASELINE_VERSION",
    "DEFAULT_TAG_PREFIX",
    "retry_on_rate_limit",
]
