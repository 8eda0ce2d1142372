"""Serper search provider - Google results through the serper.dev API."""

from __future__ import annotations

from typing import Any

from ...core.logger import get_logger
from ..base import ProviderIdentity, SearchOptions, SearchProvider, SearchResult

logger = get_logger("search.serper")

SERPER_API_URL = "https://google.serper.dev/search"


class SerperSearchProvider(SearchProvider):
    """Serper.dev provider, configured with ``SERPER_API_KEY``."""

    @property
    def name(self) -> str:
        return "Serper"

    @property
    def identity(self) -> ProviderIdentity:
        return ProviderIdentity.SERPER

    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        api_key = self._require_api_key()
        logger.info("Serper search: %s", query[:100])

        payload: dict[str, Any] = {
            "q": query,
            "hl": options.lang,
            "gl": options.country,
            "num": options.num_results,
        }
        if options.location:
            payload["location"] = options.location
        if options.tbs:
            payload["tbs"] = options.tbs

        response = await self._request(
            "POST",
            SERPER_API_URL,
            json=payload,
            headers={"X-API-KEY": api_key, "Content-Type": "application/json"},
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
                for item in data.get("organic") or []
                if item.get("link")
            ]

        logger.info("Serper returned %d results", len(results))
        return results[: options.num_results]
