"""Brave search provider - privacy-focused search engine."""

from __future__ import annotations

from ...core.logger import get_logger
from ..base import ProviderIdentity, SearchOptions, SearchProvider, SearchResult

logger = get_logger("search.brave")

BRAVE_API_BASE = "https://api.search.brave.com/res/v1"
BRAVE_WEB_URL = f"{BRAVE_API_BASE}/web/search"


class BraveSearchProvider(SearchProvider):
    """Brave Search provider.

    Features:
    - Privacy-focused search
    - Independent search index
    - Requires ``BRAVE_SEARCH_API_KEY``
    """

    @property
    def name(self) -> str:
        return "Brave"

    @property
    def identity(self) -> ProviderIdentity:
        return ProviderIdentity.BRAVE

    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Search using Brave Search API.

        Args:
            query: Search query
            options: num_results, lang, country and timeout are honoured

        Returns:
            Normalized results; an empty ``web.results`` yields an empty list
        """
        api_key = self._require_api_key()
        logger.info("Brave search: %s", query[:100])

        response = await self._request(
            "GET",
            BRAVE_WEB_URL,
            params={
                "q": query,
                "count": options.num_results,
                "country": options.country,
                "search_lang": options.lang,
            },
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": api_key,
            },
            timeout=options.timeout_seconds,
        )
        data = self._parse_json(response)

        with self._reading(response):
            web_results = (data.get("web") or {}).get("results") or []
            if not web_results:
                logger.info("Brave Search API returned no results for: %s", query[:100])
                return []

            results = [
                SearchResult(
                    url=item.get("url", ""),
                    title=item.get("title", ""),
                    description=item.get("description", ""),
                )
                for item in web_results
            ]

        logger.info("Brave returned %d results", len(results))
        return results[: options.num_results]
