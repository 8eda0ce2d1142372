"""Tests for the shared 429/503 retry policy."""

from __future__ import annotations

from unittest.mock import call

import pytest
from pytest_httpx import HTTPXMock

from multisearch.search.base import (
    SearchOptions,
    SearchProviderError,
    SearchRetryExhaustedError,
)
from multisearch.search.providers import BraveSearchProvider, SerperSearchProvider
from multisearch.search.retry import RetryPolicy

BRAVE_OK = {
    "web": {
        "results": [
            {"url": "https://example.com/a", "title": "A", "description": "First"},
        ]
    }
}


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_defaults(self) -> None:
        """Test default policy values."""
        policy = RetryPolicy()
        assert policy.max_retries == 3
        assert policy.base_delay == 1.0
        assert policy.multiplier == 2.0
        assert policy.retry_on == frozenset({429, 503})

    def test_delays_double(self) -> None:
        """Delays start at the base and double each retry."""
        policy = RetryPolicy()
        assert [policy.delay_for(attempt) for attempt in range(3)] == [1.0, 2.0, 4.0]

    def test_rejects_negative_retries(self) -> None:
        """max_retries cannot be negative."""
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)


class TestRetryLoop:
    """Tests for the retry loop driven through a real adapter."""

    @pytest.mark.asyncio
    async def test_three_rate_limits_then_success(
        self, httpx_mock: HTTPXMock, fake_sleep
    ) -> None:
        """429 three times then 200 returns results after 1s, 2s and 4s backoffs."""
        for _ in range(3):
            httpx_mock.add_response(status_code=429)
        httpx_mock.add_response(json=BRAVE_OK)
        provider = BraveSearchProvider(api_key="test-key", sleep=fake_sleep)

        results = await provider.execute("test", SearchOptions())

        assert [r.url for r in results] == ["https://example.com/a"]
        assert fake_sleep.await_args_list == [call(1.0), call(2.0), call(4.0)]
        assert len(httpx_mock.get_requests()) == 4

    @pytest.mark.asyncio
    async def test_503_is_retried(self, httpx_mock: HTTPXMock, fake_sleep) -> None:
        """Service unavailable is treated like a rate limit."""
        httpx_mock.add_response(status_code=503)
        httpx_mock.add_response(json=BRAVE_OK)
        provider = BraveSearchProvider(api_key="test-key", sleep=fake_sleep)

        results = await provider.execute("test", SearchOptions())

        assert len(results) == 1
        assert fake_sleep.await_args_list == [call(1.0)]

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise(self, httpx_mock: HTTPXMock, fake_sleep) -> None:
        """Four throttled responses exhaust the policy."""
        for _ in range(4):
            httpx_mock.add_response(status_code=429, text="slow down")
        provider = BraveSearchProvider(api_key="test-key", sleep=fake_sleep)

        with pytest.raises(SearchRetryExhaustedError) as exc_info:
            await provider.execute("test", SearchOptions())

        assert exc_info.value.status_code == 429
        assert exc_info.value.provider == "Brave"
        assert exc_info.value.attempts == 4
        assert fake_sleep.await_count == 3
        assert len(httpx_mock.get_requests()) == 4

    @pytest.mark.asyncio
    async def test_other_error_after_rate_limit_stops(
        self, httpx_mock: HTTPXMock, fake_sleep
    ) -> None:
        """A non-retryable status during backoff ends the loop immediately."""
        httpx_mock.add_response(status_code=429)
        httpx_mock.add_response(status_code=400, text="bad request")
        provider = SerperSearchProvider(api_key="test-key", sleep=fake_sleep)

        with pytest.raises(SearchProviderError) as exc_info:
            await provider.execute("test", SearchOptions())

        assert exc_info.value.status_code == 400
        assert fake_sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_custom_policy(self, httpx_mock: HTTPXMock, fake_sleep) -> None:
        """A custom policy changes the retry budget and delays."""
        httpx_mock.add_response(status_code=429)
        httpx_mock.add_response(status_code=429)
        provider = BraveSearchProvider(
            api_key="test-key",
            retry_policy=RetryPolicy(max_retries=1, base_delay=0.5),
            sleep=fake_sleep,
        )

        with pytest.raises(SearchRetryExhaustedError):
            await provider.execute("test", SearchOptions())

        assert fake_sleep.await_args_list == [call(0.5)]
