"""Retry utilities with exponential backoff for rate-limited backends."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..core.logger import get_logger

logger = get_logger("search.retry")


class RetryPolicy(BaseModel):
    """Configuration for HTTP retry behaviour on throttling responses."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(
        default=3,
        ge=0,
        description="Additional attempts after the first request",
    )
    base_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Initial delay in seconds before retrying",
    )
    multiplier: float = Field(
        default=2.0,
        ge=1.0,
        description="Multiplier applied to the delay after each retry",
    )
    retry_on: frozenset[int] = Field(
        default=frozenset({429, 503}),
        description="HTTP status codes that trigger a retry",
    )

    def delay_for(self, attempt: int) -> float:
        """Return the backoff delay in seconds before retry ``attempt`` (0-based)."""
        return self.base_delay * (self.multiplier**attempt)


async def send_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    *,
    policy: RetryPolicy,
    provider: str,
    sleep: Callable[[float], Awaitable[Any]],
) -> httpx.Response:
    """Call ``send`` until it returns a non-throttled response or retries run out.

    The last response is returned as-is; callers decide how to classify it.
    Transport exceptions propagate unchanged and are never retried.
    """
    attempt = 0
    while True:
        response = await send()
        if response.status_code not in policy.retry_on:
            return response
        if attempt >= policy.max_retries:
            logger.error(
                "%s still throttled after %d retries (status=%d)",
                provider,
                policy.max_retries,
                response.status_code,
            )
            return response

        delay = policy.delay_for(attempt)
        logger.warning(
            "%s rate limited, retrying in %dms (%d/%d) (status=%d %s)",
            provider,
            int(delay * 1000),
            attempt + 1,
            policy.max_retries,
            response.status_code,
            response.reason_phrase,
        )
        await sleep(delay)
        attempt += 1
