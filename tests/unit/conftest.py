"""Fixtures for unit tests."""

import os
import subprocess
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog

GIT_ENVIRONMENT = {
    "GIT_AUTHOR_NAME": "Release Bot",
    "GIT_AUTHOR_EMAIL": "release-bot@example.com",
    "GIT_COMMITTER_NAME": "Release Bot",
    "GIT_COMMITTER_EMAIL": "release-bot@example.com",
    "GIT_CONFIG_GLOBAL": os.devnull,
    "GIT_CONFIG_NOSYSTEM": "1",
}


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def git_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git a fixed identity and isolate it from user configuration."""
    for name, value in GIT_ENVIRONMENT.items():
        monkeypatch.setenv(name, value)


@pytest.fixture
def git_repo(tmp_path: Path, git_env: None) -> Path:
    """Create an empty git repository on a 'main' branch."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    subprocess.run(["git", "init", "--quiet", "--initial-branch=main"], cwd=repo_path, check=True)
    return repo_path


@pytest.fixture
def commit(git_repo: Path) -> Callable[[str], None]:
    """Return a helper that records an empty commit with the given subject."""

    def _commit(subject: str) -> None:
        subprocess.run(["git", "commit", "--quiet", "--allow-empty", "-m", subject], cwd=git_repo, check=True)

    return _commit


@pytest.fixture
def tag(git_repo: Path) -> Callable[[str], None]:
    """Return a helper that creates an annotated tag on HEAD."""

    def _tag(name: str) -> None:
        subprocess.run(["git", "tag", "-a", name, "-m", f"Release {name}"], cwd=git_repo, check=True)

    return _tag
