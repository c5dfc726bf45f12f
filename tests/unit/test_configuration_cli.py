"""Unit tests for the command line interface."""

import json
import shutil
import subprocess
from pathlib import Path
from typing import Callable

import pytest
from click.testing import Result
from typer.testing import CliRunner

from github_release_manager.configuration.cli import typer_app
from github_release_manager.utils.constants import DEFAULT_CHANGELOG_HEADER

runner = CliRunner()

# Keep GitHub Actions variables of the machine running the tests out of the commands.
CLEAN_ENV = {
    "GITHUB_EVENT_NAME": None,
    "GITHUB_EVENT_PATH": None,
    "GITHUB_RUN_ATTEMPT": None,
    "GITHUB_OUTPUT": None,
    "GITHUB_PAT_TOKEN": None,
    "GITHUB_APP_ID": None,
    "GITHUB_APP_PRIVATE_KEY_PATH": None,
    "GITHUB_APP_INSTALLATION_ID": None,
}

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def invoke(*args: str) -> Result:
    """Invoke the CLI with a clean environment."""
    return runner.invoke(typer_app, list(args), env=CLEAN_ENV)


def printed_version(result: Result) -> str:
    """Return the last line printed to standard output."""
    return result.stdout.strip().splitlines()[-1]


def test_resolve_version_from_markers(tmp_path: Path) -> None:
    """Test that the next patch version is printed when no explicit version is found."""
    result = invoke("resolve-version", "--repo-path", str(tmp_path), "--marker", "v1.2.0", "--marker", "v1.1.9", "--commit-subject", "fix: typo")

    assert result.exit_code == 0
    assert printed_version(result) == "1.2.1"


def test_resolve_version_writes_github_output(tmp_path: Path) -> None:
    """Test that the version and tag are appended to the GitHub Actions output file."""
    github_output = tmp_path / "output"
    github_output.write_text("EXISTING=1\n")

    result = invoke(
        "resolve-version",
        "--repo-path",
        str(tmp_path),
        "--marker",
        "v1.0.0",
        "--pr-title",
        "Release v1.3.0",
        "--github-output",
        str(github_output),
    )

    assert result.exit_code == 0
    assert github_output.read_text() == "EXISTING=1\nVERSION=1.3.0\nTAG=v1.3.0\n"


def test_resolve_version_rejects_invalid_manual_version(tmp_path: Path) -> None:
    """Test that an invalid version exits with status 1 and an error message."""
    result = invoke("resolve-version", "--repo-path", str(tmp_path), "--marker", "v1.0.0", "--version", "v1.2.3")

    assert result.exit_code == 1
    assert "Please use X.Y.Z format" in result.output


def test_resolve_version_existing_marker(tmp_path: Path) -> None:
    """Test that an existing version fails unless the run is a re-run."""
    args = ["resolve-version", "--repo-path", str(tmp_path), "--marker", "v1.0.0", "--version", "1.0.0"]

    assert invoke(*args).exit_code == 1
    rerun = invoke(*args, "--rerun")
    assert rerun.exit_code == 0
    assert printed_version(rerun) == "1.0.0"


def test_resolve_version_run_attempt_implies_rerun(tmp_path: Path) -> None:
    """Test that a second workflow attempt may reuse its version."""
    result = invoke("resolve-version", "--repo-path", str(tmp_path), "--marker", "v1.0.0", "--version", "1.0.0", "--run-attempt", "2")

    assert result.exit_code == 0


def test_resolve_version_skips_unmerged_pull_request(tmp_path: Path) -> None:
    """Test that a closed, unmerged pull request resolves nothing."""
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"pull_request": {"title": "Release v2.0.0", "merged": False}}))

    result = invoke("resolve-version", "--repo-path", str(tmp_path), "--event-name", "pull_request", "--event-path", str(event_path))

    assert result.exit_code == 0
    assert "2.0.0" not in result.stdout
    assert "nothing to release" in result.output


def test_resolve_version_unreadable_event_payload(tmp_path: Path) -> None:
    """Test that a missing event payload exits with an error."""
    result = invoke("resolve-version", "--event-path", str(tmp_path / "missing.json"))

    assert result.exit_code == 1
    assert "cannot read release trigger" in result.output


@requires_git
def test_resolve_version_from_git_history(git_repo: Path, commit: Callable[[str], None], tag: Callable[[str], None]) -> None:
    """Test that the latest tag and HEAD subject come from the repository."""
    commit("Initial commit")
    tag("v1.4.0")
    commit("Bump version to 1.5.0")

    result = invoke("resolve-version", "--repo-path", str(git_repo))

    assert result.exit_code == 0
    assert printed_version(result) == "1.5.0"


@requires_git
def test_generate_notes_to_file_and_changelog(git_repo: Path, commit: Callable[[str], None], tag: Callable[[str], None], tmp_path: Path) -> None:
    """Test writing notes since the latest marker and inserting them into a changelog."""
    commit("Initial commit")
    tag("v1.0.0")
    commit("feat: add history command")
    commit("docs: describe history command")
    output = tmp_path / "notes.md"
    changelog = tmp_path / "RELEASE_NOTES.md"
    changelog.write_text(DEFAULT_CHANGELOG_HEADER + "\n\n## v1.0.0\n\n- initial\n")

    result = invoke(
        "generate-notes", "--repo-path", str(git_repo), "--output", str(output), "--changelog-file", str(changelog), "--version", "1.1.0"
    )

    assert result.exit_code == 0
    assert output.read_text() == "### 🆕 New Features\n- feat: add history command\n\n### 📚 Documentation\n- docs: describe history command\n"
    content = changelog.read_text()
    assert content.index("## v1.1.0") < content.index("## v1.0.0")

    again = invoke(
        "generate-notes", "--repo-path", str(git_repo), "--output", str(output), "--changelog-file", str(changelog), "--version", "1.1.0"
    )
    assert again.exit_code == 0
    assert changelog.read_text() == content


def test_generate_notes_changelog_requires_version(tmp_path: Path) -> None:
    """Test that inserting into a changelog needs the version header."""
    result = invoke("generate-notes", "--repo-path", str(tmp_path), "--changelog-file", str(tmp_path / "CHANGELOG.md"))

    assert result.exit_code == 1
    assert "--version is required" in result.output


@requires_git
def test_release_dry_run(git_repo: Path, commit: Callable[[str], None], tag: Callable[[str], None]) -> None:
    """Test that a dry run needs no credentials and creates no tag."""
    commit("Initial commit")
    tag("v1.0.0")
    commit("fix: crash on empty input")

    result = invoke("repo", "owner/repo", "release", "--repo-path", str(git_repo), "--dry-run", "--skip-build")

    assert result.exit_code == 0
    assert "Version: 1.0.1 (from auto_increment)" in result.output
    assert "### 🐛 Bug Fixes\n- fix: crash on empty input\n" in result.output
    tags = subprocess.run(["git", "tag", "--list"], cwd=git_repo, capture_output=True, text=True, check=True).stdout.split()
    assert tags == ["v1.0.0"]


def test_release_requires_authentication(tmp_path: Path) -> None:
    """Test that publishing without credentials fails before anything runs."""
    result = invoke("repo", "owner/repo", "release", "--repo-path", str(tmp_path), "--skip-build")

    assert result.exit_code == 1
    assert "No GitHub authentication configuration provided" in result.output


def test_release_reports_invalid_repository_as_failed_step(tmp_path: Path) -> None:
    """Test that a malformed repository name names the failed step in the error."""
    result = invoke("repo", "not-a-repo", "--github-pat-token", "token", "release", "--repo-path", str(tmp_path), "--skip-build", "--no-push")

    assert result.exit_code == 1
    assert "create GitHub client failed: Repository must be in the format 'owner/repo'" in result.output
