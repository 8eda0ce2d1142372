"""SearchAPI provider - hosted SERP API at searchapi.io."""

from __future__ import annotations

from typing import Any

from ...core.logger import get_logger
from ..base import (
    ProviderIdentity,
    SearchOptions,
    SearchProvider,
    SearchResult,
    SleepFunc,
)
from ..retry import RetryPolicy
from .common import tbs_to_period

logger = get_logger("search.searchapi")

SEARCHAPI_URL = "https://www.searchapi.io/api/v1/search"

TIME_PERIODS = {
    "h": "last_hour",
    "d": "last_day",
    "w": "last_week",
    "m": "last_month",
    "y": "last_year",
}


class SearchApiProvider(SearchProvider):
    """SearchAPI.io provider, configured with ``SEARCHAPI_API_KEY``."""

    def __init__(
        self,
        api_key: str | None = None,
        engine: str = "google",
        proxy: str | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize SearchAPI provider.

        Args:
            api_key: SearchAPI key
            engine: Backend engine name (``google``, ``bing``...)
            proxy: Outbound proxy URL
            retry_policy: Backoff policy for 429/503 responses
            sleep: Coroutine used for delays
        """
        super().__init__(api_key=api_key, proxy=proxy, retry_policy=retry_policy, sleep=sleep)
        self.engine = engine

    @property
    def name(self) -> str:
        return "SearchAPI"

    @property
    def identity(self) -> ProviderIdentity:
        return ProviderIdentity.SEARCHAPI

    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        api_key = self._require_api_key()
        logger.info("SearchAPI search: %s", query[:100])

        params: dict[str, Any] = {
            "engine": self.engine,
            "q": query,
            "hl": options.lang,
            "gl": options.country,
            "num": options.num_results,
        }
        if options.location:
            params["location"] = options.location
        time_period = tbs_to_period(options.tbs, TIME_PERIODS)
        if time_period:
            params["time_period"] = time_period

        response = await self._request(
            "GET",
            SEARCHAPI_URL,
            params=params,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=options.timeout_seconds,
        )
        data = self._parse_json(response)

        with self._reading(response):
            results = [
                SearchResult(
                    url=item.get("link", ""),
                    title=item.get("title", ""),
                    description=item.get("snippet", ""),
                )
                for item in data.get("organic_results") or []
                if item.get("link")
            ]

        logger.info("SearchAPI returned %d results", len(results))
        return results[: options.num_results]
