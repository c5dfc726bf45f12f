"""Contains results of a release pipeline run."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel


class ReleasePipelineStatus(str, Enum):
    """Outcome of a release pipeline run."""

    SUCCESS = "success"
    DRY_RUN = "dry_run"
    SKIPPED = "skipped"
    ERROR = "error"


class ReleasePipelineResult(BaseModel):
    """Contains the values produced by each stage of a release pipeline run."""

    status: ReleasePipelineStatus
    version: str | None = None
    version_source: str | None = None
    tag: str | None = None
    replaced_existing_marker: bool = False
    notes: str | None = None
    artifacts: list[Path] = []
    release_url: str | None = None
    failed_step: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True unless the run failed."""
        return self.status != ReleasePipelineStatus.ERROR
