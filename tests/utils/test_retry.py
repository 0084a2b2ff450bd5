# ABOUTME: Tests for MediaWiki API error mapping and tenacity-based retry
# ABOUTME: Validates which failures are retried and how httpx errors are converted

import httpx
import pytest

from parsoid_media.utils.retry import (
    MediaWikiAPIError,
    MediaWikiConnectionError,
    MediaWikiRateLimitError,
    MediaWikiTimeoutError,
    PageNotFoundError,
    convert_exception,
    mw_retry,
)


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://en.wikipedia.org/w/api.php")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestMediaWikiAPIErrors:
    """Test the error hierarchy."""

    def test_error_hierarchy(self):
        assert issubclass(MediaWikiRateLimitError, MediaWikiAPIError)
        assert issubclass(MediaWikiTimeoutError, MediaWikiAPIError)
        assert issubclass(MediaWikiConnectionError, MediaWikiAPIError)
        assert issubclass(PageNotFoundError, MediaWikiAPIError)

    def test_status_code_is_kept(self):
        assert MediaWikiAPIError("boom", status_code=400).status_code == 400


class TestConvertException:
    """Test mapping httpx failures to typed errors."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (404, PageNotFoundError),
            (429, MediaWikiRateLimitError),
            (500, MediaWikiConnectionError),
            (503, MediaWikiConnectionError),
            (400, MediaWikiAPIError),
        ],
    )
    def test_status_errors(self, status, expected):
        converted = convert_exception(_status_error(status))
        assert type(converted) is expected
        assert converted.status_code == status

    def test_timeout(self):
        assert isinstance(convert_exception(httpx.ReadTimeout("slow")), MediaWikiTimeoutError)

    def test_connection_error(self):
        assert isinstance(convert_exception(httpx.ConnectError("refused")), MediaWikiConnectionError)

    def test_already_converted(self):
        error = PageNotFoundError("gone")
        assert convert_exception(error) is error


class TestMwRetry:
    """Test retry behaviour of the decorator."""

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self):
        calls = 0

        @mw_retry(max_attempts=3, min_wait=0, max_wait=0)
        async def flaky():
            nonlocal calls
            calls += 1
            if calls < 3:
                raise httpx.ConnectError("refused")
            return "ok"

        assert await flaky() == "ok"
        assert calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        calls = 0

        @mw_retry(max_attempts=2, min_wait=0, max_wait=0)
        async def always_busy():
            nonlocal calls
            calls += 1
            raise _status_error(429)

        with pytest.raises(MediaWikiRateLimitError):
            await always_busy()
        assert calls == 2

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self):
        calls = 0

        @mw_retry(max_attempts=3, min_wait=0, max_wait=0)
        async def missing():
            nonlocal calls
            calls += 1
            raise _status_error(404)

        with pytest.raises(PageNotFoundError):
            await missing()
        assert calls == 1
