"""Data models for release notes generation."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class CommitCategory(str, Enum):
    """Category of a commit, in release notes display order."""

    FEATURE = "feature"
    IMPROVEMENT = "improvement"
    FIX = "fix"
    DOCUMENTATION = "documentation"
    OTHER = "other"

    @property
    def display_title(self) -> str:
        """Section title shown in rendered release notes."""
        return CATEGORY_TITLES[self]


CATEGORY_TITLES: dict[CommitCategory, str] = {
    CommitCategory.FEATURE: "🆕 New Features",
    CommitCategory.IMPROVEMENT: "⚡ Improvements",
    CommitCategory.FIX: "🐛 Bug Fixes",
    CommitCategory.DOCUMENTATION: "📚 Documentation",
    CommitCategory.OTHER: "🔧 Other Changes",
}

CATEGORY_DISPLAY_ORDER: tuple[CommitCategory, ...] = tuple(CommitCategory)


@dataclass(frozen=True)
class Commit:
    """A commit between two version markers."""

    subject: str
    sha: str | None = None


@dataclass(frozen=True)
class CategoryRule:
    """Assigns a category to subjects starting with one of the keywords."""

    category: CommitCategory
    keywords: tuple[str, ...]
    case_sensitive: bool = True

    def matches(self, subject: str) -> bool:
        """Return True if the subject starts with one of the rule's keywords."""
        if self.case_sensitive:
            return subject.startswith(self.keywords)
        return subject.lower().startswith(tuple(keyword.lower() for keyword in self.keywords))


class ReleaseNotes(BaseModel):
    """Commit subjects grouped by category.

    `sections` only holds non-empty categories, in display order, each with its
    subjects oldest first. When there was no history to describe, `sections` is
    empty and `default_points` holds the generic notes shown instead.
    """

    sections: dict[CommitCategory, list[str]] = {}
    default_points: list[str] = []

    @property
    def is_default(self) -> bool:
        """Return True if these notes are the generic empty-history notes."""
        return not self.sections and bool(self.default_points)

    @property
    def commit_count(self) -> int:
        """Number of commit subjects across all sections."""
        return sum(len(subjects) for subjects in self.sections.values())
