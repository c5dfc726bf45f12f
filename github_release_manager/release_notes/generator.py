"""Release notes generation from commit history."""

from typing import Iterable, Sequence

import structlog

from github_release_manager.utils.constants import DEFAULT_RELEASE_NOTES_POINTS

from .classifier import CATEGORY_RULES, classify_subject
from .models import CATEGORY_DISPLAY_ORDER, CategoryRule, Commit, CommitCategory, ReleaseNotes

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class ReleaseNotesGenerator:
    """Groups the commits since the last marker into release notes sections.

    Generation is pure: it neither reads history nor writes anything. Commits
    must be given oldest first, and that order is kept inside each section.
    """

    def __init__(
        self,
        rules: Sequence[CategoryRule] = CATEGORY_RULES,
        default_points: Iterable[str] = DEFAULT_RELEASE_NOTES_POINTS,
    ) -> None:
        """Initialize with classification rules and the empty-history fallback points."""
        self.rules = tuple(rules)
        self.default_points = list(default_points)

    def generate(self, commits: Sequence[Commit]) -> ReleaseNotes:
        """Generate release notes for the given commits."""
        if not commits:
            logger.info("No commits since the last release, using default release notes")
            return ReleaseNotes(default_points=self.default_points)

        grouped: dict[CommitCategory, list[str]] = {category: [] for category in CATEGORY_DISPLAY_ORDER}
        for commit in commits:
            category = classify_subject(commit.subject, self.rules)
            grouped[category].append(commit.subject)

        sections = {category: subjects for category, subjects in grouped.items() if subjects}
        logger.info(
            "Generated release notes",
            commit_count=len(commits),
            categories={category.value: len(subjects) for category, subjects in sections.items()},
        )
        return ReleaseNotes(sections=sections)
