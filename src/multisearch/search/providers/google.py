"""Google search provider - the keyless, scrape-based primary engine."""

from __future__ import annotations

import random
from urllib.parse import parse_qs, urlparse

import httpx
from bs4 import BeautifulSoup

from ...core.logger import get_logger
from ..base import ProviderIdentity, SearchOptions, SearchProvider, SearchResult
from ..retry import RetryPolicy

logger = get_logger("search.google")

GOOGLE_SEARCH_URL = "https://www.google.com/search"
RESULTS_PER_PAGE = 10

USER_AGENTS = (
    "Lynx/2.8.9rel.1 libwww-FM/2.14 SSL-MM/1.4.1 GNUTLS/3.6.13",
    "Lynx/2.9.0dev.10 libwww-FM/2.14 SSL-MM/1.4.1 GNUTLS/3.7.1",
    "Lynx/2.8.8rel.2 libwww-FM/2.14 SSL-MM/1.4.1 OpenSSL/1.0.2k",
    "Links (2.25; Linux 5.15.0-91-generic x86_64; GNU C 11.2; text)",
    "Links (2.28; FreeBSD 13.2-RELEASE amd64; LLVM/Clang 14.0; text)",
)


def get_useragent() -> str:
    """Return a random text-mode browser User-Agent."""
    return random.choice(USER_AGENTS)


def _unwrap_link(href: str) -> str | None:
    """Resolve Google's ``/url?q=`` redirect wrapper to the target URL."""
    if href.startswith("/url?"):
        target = parse_qs(urlparse(href).query).get("q")
        href = target[0] if target else ""
    if not href.startswith(("http://", "https://")):
        return None
    return href


class GoogleSearchProvider(SearchProvider):
    """Google web search scraped from the public results page.

    Features:
    - No API key required
    - Self-throttles between result pages with ``sleep_interval``
    - Surfaces HTTP 429 immediately as a rate-limit error so the orchestrator
      can fail over instead of hammering a blocked endpoint
    """

    default_retry_policy = RetryPolicy(max_retries=0)

    @property
    def name(self) -> str:
        return "Google"

    @property
    def identity(self) -> ProviderIdentity:
        return ProviderIdentity.GOOGLE

    @property
    def requires_api_key(self) -> bool:
        return False

    def _rate_limit_message(self, response: httpx.Response) -> str:
        return f"Too many requests, try again later (status {response.status_code})"

    async def execute(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Search Google and paginate until ``num_results`` unique links are found.

        Args:
            query: Search query
            options: advanced, num_results, tbs, filter, lang, country, proxy,
                sleep_interval and timeout are honoured

        Returns:
            Normalized results; without ``advanced`` only URLs are filled in
        """
        logger.info("Google search: %s", query[:100])

        results: list[SearchResult] = []
        fetched_links: set[str] = set()
        start = 0

        while len(results) < options.num_results:
            if start > 0 and options.sleep_interval > 0:
                await self._sleep(options.sleep_interval)

            html = await self._fetch_page(query, options, start)
            new_results = 0

            for link, title, description in self._parse_page(html):
                if link in fetched_links:
                    continue
                fetched_links.add(link)
                new_results += 1
                if options.advanced:
                    results.append(SearchResult(url=link, title=title, description=description))
                else:
                    results.append(SearchResult(url=link))
                if len(results) >= options.num_results:
                    break

            if new_results == 0:
                break
            start += RESULTS_PER_PAGE

        logger.info("Google returned %d results", len(results))
        return results

    async def _fetch_page(self, query: str, options: SearchOptions, start: int) -> str:
        params: dict[str, str | int] = {
            "q": query,
            "num": options.num_results + 2,
            "hl": options.lang,
            "gl": options.country,
            "start": start,
            "safe": "active",
        }
        if options.tbs:
            params["tbs"] = options.tbs
        if options.filter:
            params["filter"] = options.filter

        response = await self._request(
            "GET",
            GOOGLE_SEARCH_URL,
            params=params,
            headers={
                "User-Agent": get_useragent(),
                "Accept": "*/*",
                "Cookie": "CONSENT=PENDING+987; SOCS=CAESHAgBEhIaAB",
            },
            timeout=options.timeout_seconds,
            proxy=options.proxy,
        )
        return response.text

    @staticmethod
    def _parse_page(html: str) -> list[tuple[str, str, str]]:
        """Extract ``(url, title, description)`` tuples from a results page."""
        soup = BeautifulSoup(html, "html.parser")
        entries: list[tuple[str, str, str]] = []

        for block in soup.find_all("div", class_="g"):
            anchor = block.find("a", href=True)
            title = block.find("h3")
            if anchor is None or title is None:
                continue

            link = _unwrap_link(anchor["href"])
            if not link:
                continue

            description_box = block.find("div", style="-webkit-line-clamp:2") or block.find(
                "div", class_="VwiC3b"
            )
            description = description_box.get_text(" ", strip=True) if description_box else ""
            entries.append((link, title.get_text(strip=True), description))

        return entries
