"""Test configuration hooks."""

from __future__ import annotations

import pytest

from multisearch.search import manager as manager_module

PROVIDER_ENV_VARS = (
    "SERPER_API_KEY",
    "SEARCHAPI_API_KEY",
    "SEARCHAPI_ENGINE",
    "SEARXNG_ENDPOINT",
    "SEARXNG_ENGINES",
    "SEARXNG_CATEGORIES",
    "BRAVE_SEARCH_API_KEY",
    "DUCKDUCKGO_ENABLED",
    "PROXY_SERVER",
    "SEARCH_MAX_FAILURES",
    "SEARCH_FAILURE_COOLDOWN_MINUTES",
    "SEARCH_PROVIDER_PRIORITY",
    "SEARCH_FALLBACK_ORDER",
)


@pytest.fixture(autouse=True)
def clean_search_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials out of the tests."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_global_manager():
    """Drop the process-wide manager between tests."""
    manager_module.set_search_manager(None)
    yield
    manager_module.set_search_manager(None)
