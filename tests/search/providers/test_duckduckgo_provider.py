"""Tests for DuckDuckGoProvider."""

from __future__ import annotations

import pytest
from pytest_httpx import HTTPXMock

from multisearch.search.base import ProviderIdentity, SearchConfigurationError, SearchOptions
from multisearch.search.providers import DuckDuckGoProvider

INSTANT_ANSWER = {
    "Heading": "Python",
    "AbstractTitle": "",
    "AbstractURL": "https://en.wikipedia.org/wiki/Python",
    "AbstractText": "Python is a programming language.",
    "Results": [
        {"FirstURL": "https://www.python.org", "Text": "Official site"},
        {"FirstURL": "https://docs.python.org", "Text": "Documentation"},
    ],
    "RelatedTopics": [
        {
            "Name": "Software",
            "Topics": [
                {"FirstURL": "https://example.com/nested", "Text": "Nested - skipped"},
            ],
        },
        {"FirstURL": "https://example.com/pip", "Text": "pip - Package installer - for Python"},
        {"FirstURL": "https://example.com/plain", "Text": "Plain topic"},
        {"Text": "No URL - ignored"},
    ],
}


class TestDuckDuckGoProvider:
    """Tests for DuckDuckGoProvider."""

    def test_provider_properties(self) -> None:
        """Test provider properties."""
        provider = DuckDuckGoProvider()
        assert provider.name == "DuckDuckGo"
        assert provider.identity == ProviderIdentity.DUCKDUCKGO
        assert provider.requires_api_key is False
        assert provider.is_configured is True
        assert DuckDuckGoProvider(enabled=False).is_configured is False

    @pytest.mark.asyncio
    async def test_disabled(self) -> None:
        """A disabled provider refuses to run."""
        with pytest.raises(SearchConfigurationError):
            await DuckDuckGoProvider(enabled=False).execute("test", SearchOptions())

    def test_merge_order_and_category_skip(self) -> None:
        """Abstract, then results, then topics; categories are skipped."""
        results = DuckDuckGoProvider.merge_sections(INSTANT_ANSWER, 10)

        assert [r.url for r in results] == [
            "https://en.wikipedia.org/wiki/Python",
            "https://www.python.org",
            "https://docs.python.org",
            "https://example.com/pip",
            "https://example.com/plain",
        ]
        abstract = results[0]
        assert abstract.title == "Python"
        assert abstract.description == "Python is a programming language."
        assert results[1].title == results[1].description == "Official site"

    def test_topic_description_split(self) -> None:
        """Topic descriptions come from the text after the separator."""
        results = DuckDuckGoProvider.merge_sections(INSTANT_ANSWER, 10)

        pip, plain = results[3], results[4]
        assert pip.title == "pip - Package installer - for Python"
        assert pip.description == "Package installer"
        assert plain.description == "Plain topic"

    def test_truncates_to_num_results(self) -> None:
        """The merged list is cut to num_results."""
        results = DuckDuckGoProvider.merge_sections(INSTANT_ANSWER, 3)

        assert [r.url for r in results] == [
            "https://en.wikipedia.org/wiki/Python",
            "https://www.python.org",
            "https://docs.python.org",
        ]

    def test_abstract_requires_text(self) -> None:
        """An abstract URL without text is not emitted."""
        data = {"AbstractURL": "https://example.com", "AbstractText": ""}
        assert DuckDuckGoProvider.merge_sections(data, 5) == []

    @pytest.mark.asyncio
    async def test_search(self, httpx_mock: HTTPXMock) -> None:
        """The Instant Answer API is queried with the region from country."""
        httpx_mock.add_response(json=INSTANT_ANSWER)
        provider = DuckDuckGoProvider()

        results = await provider.execute("python", SearchOptions(num_results=2, country="uk-en"))

        assert len(results) == 2
        request = httpx_mock.get_requests()[0]
        assert request.url.host == "api.duckduckgo.com"
        assert request.url.params["format"] == "json"
        assert request.url.params["no_html"] == "1"
        assert request.url.params["kl"] == "uk-en"
