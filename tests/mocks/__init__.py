"""Mock objects shared across the test suite."""

from .mock_providers import FakeClock, StubProvider, make_providers, make_results

__all__ = ["FakeClock", "StubProvider", "make_providers", "make_results"]
