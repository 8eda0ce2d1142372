"""Web search with multi-provider failover.

This module provides a unified interface for web search across a keyless
primary engine and several keyed or self-hosted alternatives:
- Google (primary, scrape-based, no API key)
- Serper
- SearchAPI
- SearXNG
- Brave Search
- DuckDuckGo Instant Answer API

Features:
- Unified search interface with normalized ``{url, title, description}`` results
- Exponential backoff on 429/503 for every backend
- Automatic failover away from a rate-limited primary engine
"""

from .base import (
    ProviderIdentity,
    SearchConfigurationError,
    SearchError,
    SearchOptions,
    SearchProvider,
    SearchProviderError,
    SearchRateLimitError,
    SearchResult,
    SearchRetryExhaustedError,
    SearchTimeoutError,
)
from .manager import SearchManager, get_search_manager, search, set_search_manager
from .resolver import ProviderResolver
from .retry import RetryPolicy
from .tracker import FailureTracker

__all__ = [
    "FailureTracker",
    "ProviderIdentity",
    "ProviderResolver",
    "RetryPolicy",
    "SearchConfigurationError",
    "SearchError",
    "SearchManager",
    "SearchOptions",
    "SearchProvider",
    "SearchProviderError",
    "SearchRateLimitError",
    "SearchResult",
    "SearchRetryExhaustedError",
    "SearchTimeoutError",
    "get_search_manager",
    "search",
    "set_search_manager",
]
