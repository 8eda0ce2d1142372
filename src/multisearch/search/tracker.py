"""Failure tracking for the primary search engine."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from ..core.logger import get_logger

logger = get_logger("search.tracker")


class FailureTracker:
    """Counts consecutive rate-limited failures of the primary engine.

    The tracker is a heuristic circuit breaker: the resolver reads it to decide
    whether to demote the primary, and the orchestrator writes it when the
    primary is throttled. All access goes through a lock so concurrent
    searches never observe a torn update.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._consecutive_failures = 0
        self._last_failure_time: float | None = None
        self._lock = threading.Lock()

    @property
    def consecutive_failures(self) -> int:
        with self._lock:
            return self._consecutive_failures

    @property
    def last_failure_time(self) -> float | None:
        with self._lock:
            return self._last_failure_time

    def record_failure(self) -> int:
        """Register one rate-limited primary failure and return the new count."""
        with self._lock:
            self._consecutive_failures += 1
            self._last_failure_time = self._clock()
            return self._consecutive_failures

    def recover_if_cooled_down(self, cooldown_seconds: float) -> bool:
        """Forgive accumulated failures once ``cooldown_seconds`` have passed.

        Returns:
            True if the count was reset
        """
        with self._lock:
            if self._consecutive_failures == 0 or self._last_failure_time is None:
                return False
            if self._clock() - self._last_failure_time <= cooldown_seconds:
                return False
            self._consecutive_failures = 0
            return True

    def reset(self) -> None:
        """Reset the failure count."""
        with self._lock:
            self._consecutive_failures = 0

    def snapshot(self) -> dict[str, Any]:
        """Get current state information."""
        with self._lock:
            return {
                "consecutive_failures": self._consecutive_failures,
                "last_failure_time": self._last_failure_time,
            }
