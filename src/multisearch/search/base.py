"""Base classes and interfaces for search providers."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .retry import RetryPolicy, send_with_retry

SleepFunc = Callable[[float], Awaitable[Any]]


class SearchError(Exception):
    """Base exception for search-related errors."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize search error.

        Args:
            message: Error message
            provider: Name of the provider that raised the error
            status_code: HTTP status returned by the backend, if any
        """
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class SearchConfigurationError(SearchError):
    """Provider invoked without its required credential or endpoint."""

    pass


class SearchProviderError(SearchError):
    """Non-retryable error from a specific search provider."""

    pass


class SearchTimeoutError(SearchProviderError):
    """Backend did not answer within the request timeout."""

    pass


class SearchRateLimitError(SearchError):
    """Rate limit exceeded or service unavailable for a search provider."""

    pass


class SearchRetryExhaustedError(SearchRateLimitError):
    """Rate-limited responses persisted after every retry was spent."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        attempts: int = 0,
    ) -> None:
        self.attempts = attempts
        super().__init__(message, provider=provider, status_code=status_code)


class ProviderIdentity(str, Enum):
    """Supported search backends."""

    GOOGLE = "google"
    SERPER = "serper"
    SEARCHAPI = "searchapi"
    SEARXNG = "searxng"
    BRAVE = "brave"
    DUCKDUCKGO = "duckduckgo"

    @property
    def is_primary(self) -> bool:
        return self is ProviderIdentity.GOOGLE


PRIMARY_PROVIDER = ProviderIdentity.GOOGLE


class SearchResult(BaseModel):
    """Normalized search result produced by every provider.

    Attributes:
        url: Result URL
        title: Result title
        description: Text snippet or description
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Result URL")
    title: str = Field(default="", description="Result title")
    description: str = Field(default="", description="Text snippet or description")


class SearchOptions(BaseModel):
    """Options accepted by :meth:`SearchManager.search`.

    Each provider reads only the fields its backend understands.

    Attributes:
        advanced: Return titles and descriptions from the primary engine
        num_results: Maximum number of results to return
        tbs: Time-based search filter (``qdr:d`` and friends)
        filter: Primary engine duplicate filter flag
        lang: Interface/search language
        country: Country code, also used as the DuckDuckGo region
        location: Free-form location for keyed providers
        proxy: Outbound proxy override for the primary engine
        sleep_interval: Seconds between primary engine page requests
        timeout: Per-request deadline in milliseconds
    """

    model_config = ConfigDict(frozen=True)

    advanced: bool = Field(default=False, description="Primary engine advanced mode")
    num_results: int = Field(default=5, ge=1, description="Maximum results")
    tbs: str | None = Field(default=None, description="Time-based search filter")
    filter: str | None = Field(default=None, description="Duplicate filter flag")
    lang: str = Field(default="en", description="Search language")
    country: str = Field(default="us", description="Country code")
    location: str | None = Field(default=None, description="Search location")
    proxy: str | None = Field(default=None, description="Proxy override")
    sleep_interval: float = Field(default=2.0, ge=0.0, description="Seconds between pages")
    timeout: int = Field(default=5000, gt=0, description="Request timeout in milliseconds")

    @property
    def region(self) -> str:
        return self.country

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0


class SearchProvider(ABC):
    """Abstract base class for search providers.

    Subclasses build the backend request and map the response; transport,
    retry and error classification live here so every backend behaves the
    same way on 429/503, timeouts and malformed bodies.
    """

    default_retry_policy = RetryPolicy()

    def __init__(
        self,
        api_key: str | None = None,
        proxy: str | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize the search provider.

        Args:
            api_key: API key for the provider (if required)
            proxy: Outbound proxy URL
            retry_policy: Backoff policy for 429/503 responses
            sleep: Coroutine used for delays (defaults to ``asyncio.sleep``)
        """
        self.api_key = api_key
        self.proxy = proxy
        self.retry_policy = retry_policy or self.default_retry_policy
        self._sleep: SleepFunc = sleep or asyncio.sleep
        self._request_count = 0
        self._error_count = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        pass

    @property
    @abstractmethod
    def identity(self) -> ProviderIdentity:
        """Get the provider identity used for routing."""
        pass

    @property
    def requires_api_key(self) -> bool:
        """Check if this provider requires an API key."""
        return True

    @property
    def is_configured(self) -> bool:
        """Check if the provider is properly configured."""
        if self.requires_api_key:
            return bool(self.api_key)
        return True

    @abstractmethod
    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Perform a search query.

        Args:
            query: Search query string
            options: Search options; only the fields this backend supports are used

        Returns:
            Normalized results, possibly empty

        Raises:
            SearchError: If search fails
        """
        pass

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise SearchConfigurationError(
                f"{self.name} API key not configured",
                provider=self.name,
            )
        return self.api_key

    async def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        proxy: str | None = None,
    ) -> httpx.Response:
        """Send one logical request, retrying 429/503 per the retry policy.

        Raises:
            SearchRetryExhaustedError: If rate limiting outlasted the retries
            SearchTimeoutError: If the backend did not answer in time
            SearchProviderError: For any other transport or HTTP failure
        """
        self._increment_request()

        async def send() -> httpx.Response:
            async with httpx.AsyncClient(
                timeout=timeout,
                proxy=proxy or self.proxy,
                follow_redirects=True,
            ) as client:
                # Whole-attempt deadline; httpx timeouts apply per phase
                async with asyncio.timeout(timeout):
                    return await client.request(
                        method,
                        url,
                        params=params,
                        json=json,
                        headers=headers,
                    )

        try:
            response = await send_with_retry(
                send,
                policy=self.retry_policy,
                provider=self.name,
                sleep=self._sleep,
            )
        except (httpx.TimeoutException, TimeoutError) as exc:
            self._increment_error()
            raise SearchTimeoutError(
                f"{self.name} request timed out after {timeout:.1f}s",
                provider=self.name,
            ) from exc
        except httpx.HTTPError as exc:
            self._increment_error()
            raise SearchProviderError(
                f"{self.name} request failed: {exc}",
                provider=self.name,
            ) from exc

        if response.status_code in self.retry_policy.retry_on:
            self._increment_error()
            raise SearchRetryExhaustedError(
                self._rate_limit_message(response),
                provider=self.name,
                status_code=response.status_code,
                attempts=self.retry_policy.max_retries + 1,
            )
        if not response.is_success:
            self._increment_error()
            raise SearchProviderError(
                f"{self.name} API error: {response.status_code} - {response.text[:200]}",
                provider=self.name,
                status_code=response.status_code,
            )
        return response

    def _rate_limit_message(self, response: httpx.Response) -> str:
        return (
            f"{self.name} API error: {response.status_code} {response.reason_phrase} "
            f"after {self.retry_policy.max_retries} retries"
        )

    def _parse_json(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body, classifying garbage as a provider error."""
        try:
            data = response.json()
        except ValueError as exc:
            self._increment_error()
            raise SearchProviderError(
                f"{self.name} returned a malformed response",
                provider=self.name,
                status_code=response.status_code,
            ) from exc
        if not isinstance(data, dict):
            self._increment_error()
            raise SearchProviderError(
                f"{self.name} returned an unexpected response body",
                provider=self.name,
                status_code=response.status_code,
            )
        return data

    @contextmanager
    def _reading(self, response: httpx.Response) -> Iterator[None]:
        """Turn shape errors raised while mapping a decoded body into provider errors."""
        try:
            yield
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            self._increment_error()
            raise SearchProviderError(
                f"{self.name} returned an unexpected response shape: {exc}",
                provider=self.name,
                status_code=response.status_code,
            ) from exc

    def get_stats(self) -> dict[str, Any]:
        """Get provider statistics.

        Returns:
            Dictionary with provider statistics
        """
        return {
            "name": self.name,
            "identity": self.identity.value,
            "configured": self.is_configured,
            "requires_api_key": self.requires_api_key,
            "request_count": self._request_count,
            "error_count": self._error_count,
            "error_rate": (
                self._error_count / self._request_count if self._request_count > 0 else 0.0
            ),
        }

    def _increment_request(self) -> None:
        """Increment request counter."""
        self._request_count += 1

    def _increment_error(self) -> None:
        """Increment error counter."""
        self._error_count += 1
