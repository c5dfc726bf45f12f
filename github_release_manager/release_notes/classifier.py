"""Commit subject classification rules."""

from typing import Sequence

from .models import CategoryRule, CommitCategory

CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(CommitCategory.FEATURE, ("feat", "add", "new")),
    CategoryRule(CommitCategory.IMPROVEMENT, ("improve", "enhance", "update", "refactor")),
    CategoryRule(CommitCategory.FIX, ("fix", "bug")),
    CategoryRule(CommitCategory.DOCUMENTATION, ("doc", "docs")),
)
"""Rules evaluated top-down; the first match wins, anything unmatched is OTHER."""


def classify_subject(subject: str, rules: Sequence[CategoryRule] = CATEGORY_RULES) -> CommitCategory:
    """Return the category of a commit subject."""
    for rule in rules:
        if rule.matches(subject):
            return rule.category
    return CommitCategory.OTHER
