"""Release notes generation module."""

from .classifier import CATEGORY_RULES, classify_subject
from .generator import ReleaseNotesGenerator
from .markdown import MarkdownWriter
from .models import (
    CATEGORY_DISPLAY_ORDER,
    CATEGORY_TITLES,
    CategoryRule,
    Commit,
    CommitCategory,
    ReleaseNotes,
)

__all__ = [
    "CommitCategory",
    "CATEGORY_TITLES",
    "CATEGORY_DISPLAY_ORDER",
    "CategoryRule",
    "Commit",
    "ReleaseNotes",
    "CATEGORY_RULES",
    "classify_subject",
    "ReleaseNotesGenerator",
    "MarkdownWriter",
]
