"""Search manager for unified search across multiple providers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from ..core.config import SearchSettings
from ..core.logger import get_logger, log_exception
from .base import (
    PRIMARY_PROVIDER,
    ProviderIdentity,
    SearchConfigurationError,
    SearchError,
    SearchOptions,
    SearchProvider,
    SearchRateLimitError,
    SearchResult,
)
from .providers import build_providers
from .resolver import ProviderResolver
from .tracker import FailureTracker

logger = get_logger("search.manager")


class SearchManager:
    """Unified search manager with primary-engine failover.

    Features:
    - Provider selection by configured priority and primary failure history
    - Failover across alternatives when the primary is rate limited
    - Callers always get a list back; failures are logged, never raised
    """

    def __init__(
        self,
        providers: Mapping[ProviderIdentity, SearchProvider],
        tracker: FailureTracker | None = None,
        priority: Sequence[ProviderIdentity] | None = None,
        fallback_order: Sequence[ProviderIdentity] | None = None,
        max_failures: int = 5,
        cooldown_seconds: float = 30 * 60.0,
    ) -> None:
        """Initialize the search manager.

        Args:
            providers: Adapters keyed by identity
            tracker: Primary failure state (a fresh one if None)
            priority: Alternatives in selection order (all alternatives if None)
            fallback_order: Alternatives tried after a rate-limited primary
                request (every alternative in identity order if None)
            max_failures: Failures at which the primary is demoted
            cooldown_seconds: Quiet period after which failures are forgiven
        """
        self._providers = dict(providers)
        self.tracker = tracker or FailureTracker()
        self.resolver = ProviderResolver(
            self._providers,
            self.tracker,
            priority=priority,
            max_failures=max_failures,
            cooldown_seconds=cooldown_seconds,
        )
        self._fallback_order = (
            [identity for identity in fallback_order if not identity.is_primary]
            if fallback_order is not None
            else [identity for identity in ProviderIdentity if not identity.is_primary]
        )

        # Statistics
        self._total_searches = 0
        self._successful_searches = 0
        self._failed_searches = 0
        self._failover_count = 0

        logger.info(
            "SearchManager initialized (providers=%d, configured alternatives=%s)",
            len(self._providers),
            ",".join(i.value for i in self.resolver.available_alternatives()) or "none",
        )

    @classmethod
    def from_settings(
        cls,
        settings: SearchSettings | None = None,
        tracker: FailureTracker | None = None,
    ) -> SearchManager:
        """Build a manager and its adapters from :class:`SearchSettings`."""
        settings = settings or SearchSettings.load()
        return cls(
            build_providers(settings),
            tracker=tracker,
            priority=[ProviderIdentity(name) for name in settings.provider_priority],
            fallback_order=[ProviderIdentity(name) for name in settings.fallback_order or []],
            max_failures=settings.max_failures,
            cooldown_seconds=settings.failure_cooldown_seconds,
        )

    def get_provider(self, identity: ProviderIdentity) -> SearchProvider | None:
        """Get a provider by identity."""
        return self._providers.get(identity)

    @property
    def fallback_order(self) -> list[ProviderIdentity]:
        return list(self._fallback_order)

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
        **overrides: Any,
    ) -> list[SearchResult]:
        """Perform a search query.

        Args:
            query: Search query string
            options: Search options (defaults if None)
            **overrides: Individual option fields, applied on top of ``options``

        Returns:
            Normalized results; empty on no matches or on failure
        """
        self._total_searches += 1

        if not query or not query.strip():
            logger.warning("Ignoring empty search query")
            self._failed_searches += 1
            return []
        query = query.strip()

        try:
            if overrides:
                base = options.model_dump() if options else {}
                options = SearchOptions(**{**base, **overrides})
            elif options is None:
                options = SearchOptions()
        except ValidationError as exc:
            logger.error("Invalid search options: %s", exc)
            self._failed_searches += 1
            return []

        identity = self.resolver.select_provider()
        provider = self._providers.get(identity)
        if provider is None:
            return self._fail(
                identity,
                SearchConfigurationError(f"No adapter registered for {identity.value}"),
            )
        logger.info("Using search provider: %s", identity.value)

        try:
            results = await provider.execute(query, options)
        except SearchRateLimitError as exc:
            if not identity.is_primary:
                return self._fail(identity, exc)
            failures = self.tracker.record_failure()
            logger.warning(
                "%s search failed with rate limiting. Failure count: %d",
                identity.value,
                failures,
            )
            return await self._fall_back(query, options, exc)
        except SearchError as exc:
            return self._fail(identity, exc)
        except Exception as exc:
            log_exception(logger, exc, f"Unexpected error from search provider {identity.value}")
            self._failed_searches += 1
            return []

        return self._succeed(identity, query, results)

    async def _fall_back(
        self,
        query: str,
        options: SearchOptions,
        cause: SearchError,
    ) -> list[SearchResult]:
        """Walk the fallback chain after a rate-limited primary request."""
        candidates = self.resolver.available_alternatives(self._fallback_order)
        if not candidates:
            return self._fail(PRIMARY_PROVIDER, cause)

        last_identity = PRIMARY_PROVIDER
        last_error: Exception = cause
        for identity in candidates:
            logger.info(
                "Falling back to %s after %s failure",
                identity.value,
                PRIMARY_PROVIDER.value,
            )
            try:
                results = await self._providers[identity].execute(query, options)
            except Exception as exc:
                logger.warning("Fallback provider %s failed: %s", identity.value, exc)
                last_identity, last_error = identity, exc
                continue

            self._failover_count += 1
            return self._succeed(identity, query, results)

        return self._fail(last_identity, last_error)

    def _succeed(
        self,
        identity: ProviderIdentity,
        query: str,
        results: list[SearchResult],
    ) -> list[SearchResult]:
        self._successful_searches += 1
        if results:
            logger.info("Search completed: %d results from %s", len(results), identity.value)
        else:
            logger.info("Search returned no results from %s for: %s", identity.value, query[:50])
        return results

    def _fail(self, identity: ProviderIdentity, exc: Exception) -> list[SearchResult]:
        self._failed_searches += 1
        logger.error(
            "Error in search function with provider %s: %s (status=%s)",
            identity.value,
            exc,
            getattr(exc, "status_code", None),
        )
        return []

    def get_stats(self) -> dict[str, Any]:
        """Get search manager statistics.

        Returns:
            Dictionary with statistics
        """
        success_rate = (
            self._successful_searches / self._total_searches * 100
            if self._total_searches > 0
            else 0.0
        )

        return {
            "total_searches": self._total_searches,
            "successful_searches": self._successful_searches,
            "failed_searches": self._failed_searches,
            "success_rate_percent": round(success_rate, 2),
            "failover_count": self._failover_count,
            "provider_count": len(self._providers),
            "configured_alternatives": [
                identity.value for identity in self.resolver.available_alternatives()
            ],
            "primary_failures": self.tracker.snapshot(),
            "providers": {
                identity.value: provider.get_stats()
                for identity, provider in self._providers.items()
            },
        }


# Global search manager instance
_global_manager: SearchManager | None = None


def get_search_manager() -> SearchManager:
    """Get the global search manager instance.

    Returns:
        SearchManager instance built from the environment on first use
    """
    global _global_manager
    if _global_manager is None:
        _global_manager = SearchManager.from_settings()
    return _global_manager


def set_search_manager(manager: SearchManager | None) -> None:
    """Set (or clear, with None) the global search manager instance.

    Args:
        manager: SearchManager to use globally
    """
    global _global_manager
    _global_manager = manager
    logger.info("Global search manager updated")


async def search(query: str, **options: Any) -> list[SearchResult]:
    """Search with the global manager.

    Args:
        query: Search query string
        **options: :class:`SearchOptions` fields

    Returns:
        Normalized results, never raising for provider failures
    """
    return await get_search_manager().search(query, **options)
