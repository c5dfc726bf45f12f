"""Configures structlog for command line runs."""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog to write human-readable events to stderr.

    Standard output is reserved for command results (versions, release notes)
    so that they can be captured by shell pipelines.
    """
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
