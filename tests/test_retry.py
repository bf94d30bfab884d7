"""Tests for retry with exponential backoff."""

import httpx
import pytest

from weave.core.retry import calculate_delay, is_transient_error, retry_with_backoff
from weave.shared.errors import LinearAPIError


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://api.linear.app/graphql")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestTransientErrors:

    def test_network_errors_are_transient(self):
        assert is_transient_error(httpx.ConnectError("refused"))
        assert is_transient_error(httpx.ReadTimeout("slow"))
        assert is_transient_error(TimeoutError())

    def test_5xx_is_transient(self):
        assert is_transient_error(_status_error(503))

    def test_4xx_is_not(self):
        assert not is_transient_error(_status_error(400))
        assert not is_transient_error(_status_error(429))

    def test_plain_errors_are_not(self):
        assert not is_transient_error(ValueError("bad input"))


class TestDelay:

    @pytest.mark.parametrize("attempt,base", [(1, 1.0), (2, 2.0), (3, 4.0), (4, 8.0), (5, 10.0), (8, 10.0)])
    def test_exponential_with_cap_and_jitter(self, attempt, base):
        delay = calculate_delay(attempt)
        assert base * 0.9 <= delay <= base * 1.1


class TestRetryWithBackoff:

    @pytest.mark.asyncio
    async def test_returns_after_transient_failures(self):
        calls = []

        async def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise httpx.ConnectError("refused")
            return "ok"

        assert await retry_with_backoff(flaky, initial_delay=0) == "ok"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        calls = []

        async def always_down():
            calls.append(1)
            raise _status_error(502)

        with pytest.raises(httpx.HTTPStatusError):
            await retry_with_backoff(always_down, max_retries=2, initial_delay=0)
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_non_transient_raised_immediately(self):
        calls = []

        async def bad_request():
            calls.append(1)
            raise ValueError("nope")

        with pytest.raises(ValueError):
            await retry_with_backoff(bad_request, initial_delay=0)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_custom_retry_predicate(self):
        calls = []

        async def linear_down():
            calls.append(1)
            raise LinearAPIError("boom")

        with pytest.raises(LinearAPIError):
            await retry_with_backoff(
                linear_down,
                initial_delay=0,
                should_retry=lambda e: isinstance(e, httpx.TransportError),
            )
        assert len(calls) == 1
