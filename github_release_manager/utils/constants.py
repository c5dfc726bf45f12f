"""Shared constants used across the application."""

import re

# Version Constants
# -----------------

VERSION_FORMAT_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
"""Pattern a resolved version must match in full (e.g., 1.2.3). No prefix, no suffix."""

VERSION_CANDIDATE_PATTERN = r"v?([0-9]+\.[0-9]+\.[0-9]+)"
"""Pattern to find a version inside free text (e.g., "Release v1.2.0"). Group 1 holds the version without the 'v'."""

VERSION_HEADER_PATTERN = r"^##\s+v?([0-9]+\.[0-9]+\.[0-9]+)\s*$"
"""Regex pattern to match version headers in markdown (e.g., ## v1.2.3)."""

DEFAULT_BASELINE_VERSION = "1.1.5"
"""Version used as the auto-increment starting point when no marker exists yet."""

DEFAULT_TAG_PREFIX = "v"
"""Prefix prepended to a version to form its git tag name."""

DEFAULT_GIT_REMOTE = "origin"
"""Remote that tags are pushed to and deleted from."""

# Release Notes Constants
# -----------------------

DEFAULT_RELEASE_NOTES_POINTS = (
    "Automated build and release process",
    "Cross-platform support (Linux, Windows, macOS)",
    "Enhanced security with SHA256 checksums",
)
"""Points listed when there is no commit history since the last release."""

DEFAULT_RELEASE_NOTES_TITLE = "🆕 What's New"
"""Section title used for the default release notes body."""

DEFAULT_CHANGELOG_HEADER = "# Release Notes\n\nThis document tracks the new features, enhancements, and bug fixes for each release."
"""Default header expected in a changelog file that release notes get inserted into."""

# Build Constants
# ---------------

DEFAULT_BINARY_NAME = "duckduckgo-chat-cli"
"""Base name of the built binaries and the release archive."""

DEFAULT_BUILD_COMMAND = 'go build -ldflags "-X main.Version=v{version}" -o {output} ./cmd/duckchat/main.go'
"""Build command template. Placeholders: {version}, {output}, {os}, {arch}."""

DEFAULT_BUILD_DIR = "build"
"""Directory that artifacts are written to."""

DEFAULT_RELEASE_NAME_PREFIX = "🦆 DuckDuckGo Chat CLI"
"""Prefix of the published release title; the tag name is appended."""
