"""Unit tests for commit subject classification."""

import pytest

from github_release_manager.release_notes.classifier import CATEGORY_RULES, classify_subject
from github_release_manager.release_notes.models import CategoryRule, CommitCategory


@pytest.mark.parametrize(
    ("subject", "expected"),
    [
        pytest.param("feat: add history export", CommitCategory.FEATURE, id="feat"),
        pytest.param("features: streaming", CommitCategory.FEATURE, id="prefix of feat"),
        pytest.param("adding retries", CommitCategory.FEATURE, id="prefix of add"),
        pytest.param("new model selector", CommitCategory.FEATURE, id="new"),
        pytest.param("improve startup time", CommitCategory.IMPROVEMENT, id="improve"),
        pytest.param("enhance prompts", CommitCategory.IMPROVEMENT, id="enhance"),
        pytest.param("update dependencies", CommitCategory.IMPROVEMENT, id="update"),
        pytest.param("refactor client", CommitCategory.IMPROVEMENT, id="refactor"),
        pytest.param("fix crash on exit", CommitCategory.FIX, id="fix"),
        pytest.param("bug in parser", CommitCategory.FIX, id="bug"),
        pytest.param("docs: usage", CommitCategory.DOCUMENTATION, id="docs"),
        pytest.param("doc tweak", CommitCategory.DOCUMENTATION, id="doc"),
        pytest.param("chore: bump go", CommitCategory.OTHER, id="unmatched"),
        pytest.param("Merge pull request #4 from fork/branch", CommitCategory.OTHER, id="merge commit"),
        pytest.param("", CommitCategory.OTHER, id="empty subject"),
    ],
)
def test_classify_subject(subject: str, expected: CommitCategory) -> None:
    """Test classification by leading keyword."""
    assert classify_subject(subject) == expected


def test_classification_is_case_sensitive() -> None:
    """Test that capitalized keywords do not match the default rules."""
    assert classify_subject("Fix crash") == CommitCategory.OTHER
    assert classify_subject("Add feature") == CommitCategory.OTHER


def test_keyword_must_lead_the_subject() -> None:
    """Test that keywords elsewhere in the subject are ignored."""
    assert classify_subject("hotfix for login") == CommitCategory.OTHER


def test_first_rule_wins_on_overlap() -> None:
    """Test priority when a subject could match several rules."""
    rules = (
        CategoryRule(CommitCategory.FIX, ("fix",)),
        CategoryRule(CommitCategory.FEATURE, ("fix",)),
    )
    assert classify_subject("fix: x", rules) == CommitCategory.FIX
    assert classify_subject("fix: x", tuple(reversed(rules))) == CommitCategory.FEATURE


def test_default_rules_are_in_priority_order() -> None:
    """Test that rules are evaluated Feature, Improvement, Fix, Documentation."""
    assert [rule.category for rule in CATEGORY_RULES] == [
        CommitCategory.FEATURE,
        CommitCategory.IMPROVEMENT,
        CommitCategory.FIX,
        CommitCategory.DOCUMENTATION,
    ]


def test_case_insensitive_rule() -> None:
    """Test that a rule can opt into case-insensitive matching."""
    rule = CategoryRule(CommitCategory.FIX, ("fix",), case_sensitive=False)
    assert rule.matches("FIX: crash")
    assert not rule.matches("prefix fix")
