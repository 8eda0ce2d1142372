"""SearXNG provider - self-hosted metasearch instance."""

from __future__ import annotations

from typing import Any

from ...core.logger import get_logger
from ..base import (
    ProviderIdentity,
    SearchConfigurationError,
    SearchOptions,
    SearchProvider,
    SearchResult,
    SleepFunc,
)
from ..retry import RetryPolicy
from .common import tbs_to_period

logger = get_logger("search.searxng")

TIME_RANGES = {
    "d": "day",
    "w": "week",
    "m": "month",
    "y": "year",
}


class SearxngSearchProvider(SearchProvider):
    """SearXNG provider, configured with ``SEARXNG_ENDPOINT``.

    The instance must have the JSON output format enabled.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        engines: str | None = None,
        categories: str | None = "general",
        proxy: str | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize SearXNG provider.

        Args:
            endpoint: Base URL of the SearXNG instance
            engines: Comma separated engines to query (instance default if None)
            categories: Comma separated categories
            proxy: Outbound proxy URL
            retry_policy: Backoff policy for 429/503 responses
            sleep: Coroutine used for delays
        """
        super().__init__(api_key=None, proxy=proxy, retry_policy=retry_policy, sleep=sleep)
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.engines = engines
        self.categories = categories

    @property
    def name(self) -> str:
        return "SearXNG"

    @property
    def identity(self) -> ProviderIdentity:
        return ProviderIdentity.SEARXNG

    @property
    def requires_api_key(self) -> bool:
        return False

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint)

    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        if not self.endpoint:
            raise SearchConfigurationError(
                "SearXNG endpoint not configured",
                provider=self.name,
            )
        logger.info("SearXNG search: %s", query[:100])

        params: dict[str, Any] = {
            "q": query,
            "language": options.lang,
            "format": "json",
            "pageno": 1,
        }
        if self.engines:
            params["engines"] = self.engines
        if self.categories:
            params["categories"] = self.categories
        time_range = tbs_to_period(options.tbs, TIME_RANGES)
        if time_range:
            params["time_range"] = time_range

        response = await self._request(
            "GET",
            f"{self.endpoint}/search",
            params=params,
            headers={"Accept": "application/json"},
            timeout=options.timeout_seconds,
        )
        data = self._parse_json(response)

        with self._reading(response):
            results = [
                SearchResult(
                    url=item.get("url", ""),
                    title=item.get("title", ""),
                    description=item.get("content", ""),
                )
                for item in data.get("results") or []
                if item.get("url")
            ]

        logger.info("SearXNG returned %d results", len(results))
        return results[: options.num_results]
