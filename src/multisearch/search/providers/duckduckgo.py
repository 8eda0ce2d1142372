"""DuckDuckGo search provider - free Instant Answer API, no API key required."""

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
from .google import get_useragent

logger = get_logger("search.duckduckgo")

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"
DESCRIPTION_SEPARATOR = " - "


class DuckDuckGoProvider(SearchProvider):
    """DuckDuckGo search provider.

    Features:
    - Free to use, no API key required (opt in with ``DUCKDUCKGO_ENABLED``)
    - Privacy-focused search
    - Merges the featured abstract, direct results and related topics
    """

    def __init__(
        self,
        enabled: bool = True,
        proxy: str | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize DuckDuckGo provider.

        Args:
            enabled: Whether the operator opted in to this provider
            proxy: Outbound proxy URL
            retry_policy: Backoff policy for 429/503 responses
            sleep: Coroutine used for delays
        """
        super().__init__(api_key=None, proxy=proxy, retry_policy=retry_policy, sleep=sleep)
        self.enabled = enabled

    @property
    def name(self) -> str:
        return "DuckDuckGo"

    @property
    def identity(self) -> ProviderIdentity:
        return ProviderIdentity.DUCKDUCKGO

    @property
    def requires_api_key(self) -> bool:
        return False

    @property
    def is_configured(self) -> bool:
        return self.enabled

    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Search using the DuckDuckGo Instant Answer API.

        Args:
            query: Search query
            options: num_results, region (from country) and timeout are honoured

        Returns:
            Abstract, then results, then related topics, cut to ``num_results``
        """
        if not self.enabled:
            raise SearchConfigurationError("DuckDuckGo search is not enabled", provider=self.name)

        logger.info("DuckDuckGo search: %s", query[:100])

        response = await self._request(
            "GET",
            DUCKDUCKGO_API_URL,
            params={
                "q": query,
                "format": "json",
                "no_html": "1",
                "no_redirect": "1",
                "kl": options.region,
            },
            headers={"User-Agent": get_useragent()},
            timeout=options.timeout_seconds,
        )
        data = self._parse_json(response)

        with self._reading(response):
            results = self.merge_sections(data, options.num_results)
        logger.info("DuckDuckGo returned %d results", len(results))
        return results

    @staticmethod
    def merge_sections(data: dict[str, Any], num_results: int) -> list[SearchResult]:
        """Flatten an Instant Answer payload into normalized results."""
        results: list[SearchResult] = []

        if data.get("AbstractURL") and data.get("AbstractText"):
            results.append(
                SearchResult(
                    url=data["AbstractURL"],
                    title=data.get("AbstractTitle") or data.get("Heading") or "",
                    description=data["AbstractText"],
                )
            )

        for item in data.get("Results") or []:
            if len(results) >= num_results:
                break
            text = item.get("Text") or ""
            results.append(
                SearchResult(url=item.get("FirstURL", ""), title=text, description=text)
            )

        for topic in data.get("RelatedTopics") or []:
            if len(results) >= num_results:
                break
            # Category groupings nest their own topic list
            if "Topics" in topic or not topic.get("FirstURL"):
                continue
            text = topic.get("Text") or ""
            parts = text.split(DESCRIPTION_SEPARATOR)
            description = parts[1] if len(parts) > 1 and parts[1] else text
            results.append(
                SearchResult(url=topic["FirstURL"], title=text, description=description)
            )

        return results[:num_results]
