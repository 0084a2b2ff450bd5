# ABOUTME: MediaWiki API error taxonomy and retry logic using tenacity
# ABOUTME: Maps httpx failures to typed errors and retries only the transient ones

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from parsoid_media.utils.logging import get_logger

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)


class MediaWikiAPIError(Exception):
    """Base exception for MediaWiki API-related errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MediaWikiRateLimitError(MediaWikiAPIError):
    """Raised when the API answers 429."""

    pass


class MediaWikiTimeoutError(MediaWikiAPIError):
    """Raised when an API request times out."""

    pass


class MediaWikiConnectionError(MediaWikiAPIError):
    """Raised when the connection to the API fails, or the server errors (5xx)."""

    pass


class PageNotFoundError(MediaWikiAPIError):
    """Raised when the requested page doesn't exist."""

    pass


TRANSIENT_ERRORS = (MediaWikiRateLimitError, MediaWikiTimeoutError, MediaWikiConnectionError)


def convert_exception(e: Exception) -> MediaWikiAPIError:
    """Convert httpx exceptions to MediaWiki-specific ones for better handling."""
    if isinstance(e, MediaWikiAPIError):
        return e
    if isinstance(e, httpx.TimeoutException):
        return MediaWikiTimeoutError(f"Request timeout: {e}")
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 404:
            return PageNotFoundError(f"Not found: {e.request.url}", status_code=status)
        if status == 429:
            return MediaWikiRateLimitError(f"Rate limit exceeded: {e}", status_code=status)
        if status >= 500:
            return MediaWikiConnectionError(f"Server error: {e}", status_code=status)
        return MediaWikiAPIError(f"API call failed: {e}", status_code=status)
    if isinstance(e, httpx.TransportError):
        return MediaWikiConnectionError(f"Connection failed: {e}")
    return MediaWikiAPIError(f"API call failed: {e}")


def mw_retry(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 8.0,
    multiplier: float = 1.0,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Retry an async MediaWiki call on transient failures.

    Every failure leaves the wrapper as a MediaWikiAPIError subclass.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            retrying = AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                before_sleep=_log_retry,
                reraise=True,
            )
            async for attempt in retrying:
                with attempt:
                    try:
                        return await func(*args, **kwargs)
                    except Exception as e:
                        converted = convert_exception(e)
                        if converted is e:
                            raise
                        raise converted from e
            raise AssertionError("unreachable")  # pragma: no cover

        return wrapper

    return decorator


def _log_retry(retry_state: Any) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying MediaWiki API call",
        attempt=retry_state.attempt_number,
        error=str(exc),
        error_type=type(exc).__name__,
    )
