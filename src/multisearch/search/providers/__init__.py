"""Search provider implementations."""

from __future__ import annotations

from ...core.config import SearchSettings
from ..base import ProviderIdentity, SearchProvider, SleepFunc
from .brave import BraveSearchProvider
from .duckduckgo import DuckDuckGoProvider
from .google import GoogleSearchProvider
from .searchapi import SearchApiProvider
from .searxng import SearxngSearchProvider
from .serper import SerperSearchProvider


def build_providers(
    settings: SearchSettings,
    sleep: SleepFunc | None = None,
) -> dict[ProviderIdentity, SearchProvider]:
    """Instantiate every adapter from settings, keyed by identity.

    Unconfigured alternatives are still built; the resolver skips them.
    """
    proxy = settings.proxy_server
    providers: list[SearchProvider] = [
        GoogleSearchProvider(proxy=proxy, sleep=sleep),
        SerperSearchProvider(api_key=settings.serper_api_key, proxy=proxy, sleep=sleep),
        SearchApiProvider(
            api_key=settings.searchapi_api_key,
            engine=settings.searchapi_engine,
            proxy=proxy,
            sleep=sleep,
        ),
        SearxngSearchProvider(
            endpoint=settings.searxng_endpoint,
            engines=settings.searxng_engines,
            categories=settings.searxng_categories,
            proxy=proxy,
            sleep=sleep,
        ),
        BraveSearchProvider(api_key=settings.brave_search_api_key, proxy=proxy, sleep=sleep),
        DuckDuckGoProvider(enabled=settings.duckduckgo_enabled, proxy=proxy, sleep=sleep),
    ]
    return {provider.identity: provider for provider in providers}


__all__ = [
    "BraveSearchProvider",
    "DuckDuckGoProvider",
    "GoogleSearchProvider",
    "SearchApiProvider",
    "SearxngSearchProvider",
    "SerperSearchProvider",
    "build_providers",
]
