"""multisearch - web search across several providers with automatic failover.

Quick start::

    import asyncio

    from multisearch import search

    results = asyncio.run(search("python asyncio tutorial", num_results=5))
    for result in results:
        print(result.url, result.title)

Providers are enabled through environment variables (``SERPER_API_KEY``,
``SEARCHAPI_API_KEY``, ``SEARXNG_ENDPOINT``, ``BRAVE_SEARCH_API_KEY``,
``DUCKDUCKGO_ENABLED``); with none set, the keyless Google engine is used.
"""

from importlib.metadata import PackageNotFoundError, version

from .core import LoggingConfig, SearchSettings, get_logger, setup_logging
from .search import (
    ProviderIdentity,
    SearchError,
    SearchManager,
    SearchOptions,
    SearchResult,
    get_search_manager,
    search,
    set_search_manager,
)

__all__ = [
    "__version__",
    "LoggingConfig",
    "ProviderIdentity",
    "SearchError",
    "SearchManager",
    "SearchOptions",
    "SearchResult",
    "SearchSettings",
    "get_logger",
    "get_search_manager",
    "search",
    "set_search_manager",
    "setup_logging",
]

try:  # pragma: no cover - best-effort during development
    __version__ = version("multisearch")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
