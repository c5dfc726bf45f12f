"""Retry decorator for handling GitHub API rate limits.

This module provides a decorator that implements retry logic for GitHub API calls made
through PyGithub, including respect for rate limit headers and exponential backoff.
"""

import asyncio
import functools
import time
from typing import Any, Callable, Mapping, TypeVar

import structlog
from github import GithubException, RateLimitExceededException

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _header(headers: Mapping[str, Any] | None, name: str) -> str | None:
    """Look up a response header regardless of its capitalization."""
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == name:
            return str(value)
    return None


def _is_rate_limit_error(exc: GithubException) -> bool:
    """Decide whether a GitHub exception was caused by a primary or secondary rate limit."""
    if isinstance(exc, RateLimitExceededException):
        return True
    if exc.status == 429:
        return True
    if exc.status == 403:
        message = str(exc.data.get("message", "")) if isinstance(exc.data, dict) else str(exc.data)
        return "rate limit" in message.lower() or _header(exc.headers, "x-ratelimit-remaining") == "0"
    return False


def _wait_time_from_headers(exc: GithubException, fallback: float) -> float:
    """Compute how long to wait before the next attempt, preferring server guidance."""
    retry_after = _header(exc.headers, "retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after)

    rate_limit_reset = _header(exc.headers, "x-ratelimit-reset")
    if rate_limit_reset:
        try:
            reset_timestamp = int(rate_limit_reset)
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset)
        else:
            current_timestamp = int(time.time())
            if reset_timestamp > current_timestamp:
                return float(reset_timestamp - current_timestamp + 1)

    return fallback


def retry_on_rate_limit(
    max_retries: int = 10,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator for retrying async functions when they encounter GitHub rate limits.

    Errors that are not rate limits are raised immediately. Release creation is not
    idempotent, so nothing else is retried.

    Args:
        max_retries: Maximum number of retry attempts (default: 10)
        initial_delay: Initial delay in seconds between retries (default: 10.0)
        max_delay: Maximum delay in seconds between retries (default: 300.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)

    Returns:
        Decorated function with retry logic

    Example:
        @retry_on_rate_limit()
        async def get_release(tag_name: str):
            return await asyncio.to_thread(repository.get_release, tag_name)
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except GithubException as exc:
                    if not _is_rate_limit_error(exc):
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=exc.status,
                        )
                        raise

                    wait_time = min(_wait_time_from_headers(exc, delay), max_delay)
                    logger.warning(
                        f"GitHub rate limit exceeded, waiting {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=exc.status,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)
                    attempt += 1

        return async_wrapper  # type: ignore

    return decorator
