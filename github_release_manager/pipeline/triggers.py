"""Release trigger model and loading from GitHub Actions event payloads."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class TriggerEvent(str, Enum):
    """Events that can start a release run."""

    WORKFLOW_DISPATCH = "workflow_dispatch"
    PULL_REQUEST = "pull_request"
    PUSH = "push"


class ReleaseTrigger(BaseModel):
    """The inputs of a release run."""

    event: TriggerEvent = TriggerEvent.PUSH
    manual_version: str | None = None
    pull_request_title: str | None = None
    pull_request_merged: bool | None = None
    rerun: bool = False

    @property
    def should_release(self) -> bool:
        """Return False for pull request events whose pull request was closed without merging."""
        if self.event == TriggerEvent.PULL_REQUEST:
            return self.pull_request_merged is True
        return True


def load_event_payload(event_path: Path) -> dict[str, Any]:
    """Load a GitHub Actions event payload from disk."""
    try:
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        logger.error("Event payload file not found", event_path=str(event_path))
        raise
    except json.JSONDecodeError as exc:
        raise ValueError(f"Event payload file {event_path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Event payload file {event_path} does not contain a JSON object")
    return payload


def build_release_trigger(
    event_name: str | None = None,
    event_path: Path | None = None,
    manual_version: str | None = None,
    pull_request_title: str | None = None,
    rerun: bool = False,
    run_attempt: int | None = None,
) -> ReleaseTrigger:
    """Build a release trigger from command line values and an optional event payload.

    Values given explicitly take precedence over values found in the payload. A
    GitHub Actions run attempt greater than one marks the run as a re-run.

    Args:
        event_name: Name of the triggering event (e.g., GITHUB_EVENT_NAME).
        event_path: Path to the event payload JSON (e.g., GITHUB_EVENT_PATH).
        manual_version: Explicit version requested by a person.
        pull_request_title: Title of the merged pull request.
        rerun: Whether an existing marker for the version may be replaced.
        run_attempt: GitHub Actions run attempt number (GITHUB_RUN_ATTEMPT).

    Returns:
        The release trigger.
    """
    payload: dict[str, Any] = load_event_payload(event_path) if event_path is not None else {}

    if event_name:
        event = TriggerEvent(event_name)
    elif manual_version is not None:
        event = TriggerEvent.WORKFLOW_DISPATCH
    elif pull_request_title is not None or "pull_request" in payload:
        event = TriggerEvent.PULL_REQUEST
    else:
        event = TriggerEvent.PUSH

    pull_request_merged: bool | None = None
    if event == TriggerEvent.WORKFLOW_DISPATCH and manual_version is None:
        inputs = payload.get("inputs") or {}
        manual_version = inputs.get("version") or None
    pull_request = payload.get("pull_request") or {}
    if pull_request:
        if pull_request_title is None:
            pull_request_title = pull_request.get("title")
        pull_request_merged = pull_request.get("merged")
    elif event == TriggerEvent.PULL_REQUEST and pull_request_title is not None:
        # No payload: a pull request title on the command line means the caller already gated on the merge.
        pull_request_merged = True

    if run_attempt is not None and run_attempt > 1 and not rerun:
        logger.info("Run attempt is greater than one, treating as re-run", run_attempt=run_attempt)
        rerun = True

    trigger = ReleaseTrigger(
        event=event,
        manual_version=manual_version,
        pull_request_title=pull_request_title,
        pull_request_merged=pull_request_merged,
        rerun=rerun,
    )
    logger.debug("Built release trigger", trigger=trigger.model_dump(mode="json"))
    return trigger
