"""Unit tests for the VersionDetector and StaticMarkerStore classes."""

import re

from github_release_manager.utils.constants import VERSION_HEADER_PATTERN
from github_release_manager.versioning.detector import VersionDetector
from github_release_manager.versioning.markers import StaticMarkerStore


def test_extract_first_version_strips_prefix() -> None:
    """Test that the first version is returned without its 'v'."""
    detector = VersionDetector()
    assert detector.extract_first_version("Release v1.2.0 (supersedes 1.1.9)") == "1.2.0"


def test_extract_first_version_without_match() -> None:
    """Test that text without a version yields None."""
    detector = VersionDetector()
    assert detector.extract_first_version("Add streaming responses") is None
    assert detector.extract_first_version("") is None
    assert detector.extract_first_version(None) is None


def test_extract_first_version_inside_longer_number() -> None:
    """Test that extraction is a substring search like grep -o."""
    detector = VersionDetector()
    assert detector.extract_first_version("build 1.2.3.4") == "1.2.3"


def test_extract_versions_from_markdown_headers() -> None:
    """Test extraction with the changelog header pattern."""
    detector = VersionDetector(VERSION_HEADER_PATTERN, re.MULTILINE | re.IGNORECASE)
    content = "# Release Notes\n\n## v1.2.0\n\n- a\n\n## 1.1.0\n\nmentions 9.9.9 inline\n"
    assert detector.extract_versions(content) == ["1.2.0", "1.1.0"]


def test_get_latest_version_ignores_invalid() -> None:
    """Test that the highest valid version wins and junk is ignored."""
    detector = VersionDetector()
    assert detector.get_latest_version(["1.9.0", "not-a-version", "1.10.0"]) == "1.10.0"
    assert detector.get_latest_version(["nope"]) is None
    assert detector.get_latest_version([]) is None


def test_static_marker_store_strips_prefix() -> None:
    """Test that markers are looked up by bare version."""
    store = StaticMarkerStore(["v1.0.0", "1.1.0", " v1.2.0 ", ""])
    assert store.exists("1.0.0")
    assert store.exists("1.1.0")
    assert store.exists("1.2.0")
    assert not store.exists("v1.0.0")
    assert store.latest() == "1.2.0"


def test_static_marker_store_empty() -> None:
    """Test that an empty store has no latest marker."""
    store = StaticMarkerStore([])
    assert store.latest() is None
    assert not store.exists("1.1.5")
