"""Release pipeline: triggers, orchestration, and results."""
