"""Provider selection based on configuration and primary failure history."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..core.logger import get_logger
from .base import PRIMARY_PROVIDER, ProviderIdentity, SearchProvider
from .tracker import FailureTracker

logger = get_logger("search.resolver")

DEFAULT_MAX_FAILURES = 5
DEFAULT_COOLDOWN_SECONDS = 30 * 60.0


class ProviderResolver:
    """Chooses which provider serves the next request.

    Configured alternatives always win over the primary engine, in priority
    order. The primary is used only when no alternative is configured; the
    failure count matters for forgiving the primary after a cooldown and for
    un-wedging it when it is demoted but has nothing to fall back to.
    """

    def __init__(
        self,
        providers: Mapping[ProviderIdentity, SearchProvider],
        tracker: FailureTracker,
        priority: Sequence[ProviderIdentity] | None = None,
        max_failures: int = DEFAULT_MAX_FAILURES,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
    ) -> None:
        """Initialize the resolver.

        Args:
            providers: Adapters keyed by identity
            tracker: Primary engine failure state
            priority: Alternatives in selection order (primary is never listed)
            max_failures: Failures at which the primary is demoted
            cooldown_seconds: Quiet period after which failures are forgiven
        """
        self._providers = providers
        self._tracker = tracker
        self._priority = [
            identity
            for identity in (priority if priority is not None else providers)
            if not identity.is_primary
        ]
        self.max_failures = max_failures
        self.cooldown_seconds = cooldown_seconds

    @property
    def priority(self) -> list[ProviderIdentity]:
        return list(self._priority)

    def available_alternatives(
        self, order: Sequence[ProviderIdentity] | None = None
    ) -> list[ProviderIdentity]:
        """Return configured alternatives in ``order`` (defaults to priority)."""
        candidates = self._priority if order is None else order
        return [
            identity
            for identity in candidates
            if not identity.is_primary
            and identity in self._providers
            and self._providers[identity].is_configured
        ]

    def select_provider(self) -> ProviderIdentity:
        """Pick the provider for the next request."""
        if self._tracker.recover_if_cooled_down(self.cooldown_seconds):
            logger.info("Reset %s failure count after cooling period", PRIMARY_PROVIDER.value)

        alternatives = self.available_alternatives()

        if self._tracker.consecutive_failures >= self.max_failures:
            if alternatives:
                return alternatives[0]
            logger.warning(
                "No alternative search providers available despite %s failures. "
                "Resetting failure count.",
                PRIMARY_PROVIDER.value,
            )
            self._tracker.reset()
            return PRIMARY_PROVIDER

        if alternatives:
            return alternatives[0]
        return PRIMARY_PROVIDER
