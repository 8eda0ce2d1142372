"""Shared fixtures for search tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from tests.mocks import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Sleep replacement that records requested delays without waiting."""
    return AsyncMock(return_value=None)
