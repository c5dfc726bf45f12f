"""Markdown rendering and parsing of release notes."""

import re

import structlog

from github_release_manager.utils.constants import DEFAULT_CHANGELOG_HEADER, DEFAULT_RELEASE_NOTES_TITLE, VERSION_HEADER_PATTERN
from github_release_manager.versioning.detector import VersionDetector

from .models import CATEGORY_TITLES, CommitCategory, ReleaseNotes

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

SECTION_PREFIX = "### "
ITEM_PREFIX = "- "


class MarkdownWriter:
    """Handles markdown rendering of release notes and changelog files."""

    def __init__(self, expected_header: str = DEFAULT_CHANGELOG_HEADER) -> None:
        """Initialize with the header expected at the top of changelog files."""
        self.expected_header = expected_header.strip()
        self.detector = VersionDetector(VERSION_HEADER_PATTERN, re.MULTILINE | re.IGNORECASE)

    def render(self, notes: ReleaseNotes) -> str:
        """Render release notes as markdown, one section per non-empty category."""
        if notes.is_default:
            sections = [(DEFAULT_RELEASE_NOTES_TITLE, notes.default_points)]
        else:
            sections = [(category.display_title, subjects) for category, subjects in notes.sections.items() if subjects]

        blocks: list[str] = []
        for title, items in sections:
            lines = [f"{SECTION_PREFIX}{title}"]
            lines.extend(f"{ITEM_PREFIX}{item}" for item in items)
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks) + "\n"

    def parse(self, content: str) -> ReleaseNotes:
        """Recover release notes from rendered markdown.

        Any header other than a known category or the default notes title ends
        the current section, so surrounding content such as a downloads section
        is ignored.
        """
        categories_by_title = {title: category for category, title in CATEGORY_TITLES.items()}
        sections: dict[CommitCategory, list[str]] = {}
        default_points: list[str] = []
        current: list[str] | None = None

        for line in content.split("\n"):
            if line.startswith("#"):
                current = None
                if line.startswith(SECTION_PREFIX):
                    title = line[len(SECTION_PREFIX) :].strip()
                    if title == DEFAULT_RELEASE_NOTES_TITLE:
                        current = default_points
                    elif title in categories_by_title:
                        current = sections.setdefault(categories_by_title[title], [])
                continue
            if current is not None and line.startswith(ITEM_PREFIX):
                current.append(line[len(ITEM_PREFIX) :])

        ordered = {category: sections[category] for category in CommitCategory if sections.get(category)}
        return ReleaseNotes(sections=ordered, default_points=[] if ordered else default_points)

    def is_version_documented(self, content: str, version: str) -> bool:
        """Check if a version already has a section in a changelog."""
        return version in self.detector.extract_versions(content)

    def insert_release_notes(self, existing_content: str, notes_markdown: str, version: str) -> str:
        """Insert a version section right after the changelog header.

        An empty changelog gets the expected header first.
        """
        if not existing_content.strip():
            existing_content = self.expected_header + "\n"

        header_end = existing_content.find(self.expected_header)
        if header_end == -1:
            raise ValueError("Release notes file missing expected header")
        header_end += len(self.expected_header)

        new_section = f"## v{version}\n\n{notes_markdown.strip()}\n"
        updated = existing_content[:header_end] + "\n\n" + new_section + existing_content[header_end:]

        logger.info("Inserted new release notes", version=version)
        return updated
