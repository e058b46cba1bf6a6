"""Tests for the priority-ordered fallback search."""

from typing import List, Optional

import httpx
import pytest

from trust_checker.domain.errors import SearchFailure
from trust_checker.domain.ports.search_provider import SearchProvider
from trust_checker.infrastructure.search.fallback_search import FallbackSearchProvider, url_host
from trust_checker.infrastructure.search.serpapi_adapter import SerpAPIConfig, SerpAPISearchAdapter


class StubProvider(SearchProvider):
    """Search provider with canned results."""

    def __init__(self, name: str, urls: List[str] = None, error: bool = False, available: bool = True):
        self.name = name
        self.urls = urls or []
        self.error = error
        self.available = available
        self.calls = 0

    async def search(self, query: str, exclude_domains: Optional[List[str]] = None, max_results: int = 3) -> List[str]:
        self.calls += 1
        if self.error:
            raise SearchFailure(f"{self.name} down", provider=self.name)
        return self.urls

    async def shutdown(self) -> None:
        self.available = False

    @property
    def provider_name(self) -> str:
        return self.name

    @property
    def is_available(self) -> bool:
        return self.available


@pytest.mark.asyncio
async def test_primary_results_are_used():
    primary = StubProvider("tavily", ["https://a.com", "https://b.com", "https://c.com"])
    fallback = StubProvider("duckduckgo", ["https://d.com"])
    search = FallbackSearchProvider([primary, fallback])

    outcome = await search.find("query")

    assert outcome.urls == ["https://a.com", "https://b.com", "https://c.com"]
    assert outcome.source == "tavily"
    assert fallback.calls == 0


@pytest.mark.asyncio
async def test_fallback_fills_remaining_slots_without_duplicates():
    primary = StubProvider("tavily", ["https://a.com"])
    fallback = StubProvider("duckduckgo", ["https://a.com", "https://d.com", "https://e.com", "https://f.com"])
    search = FallbackSearchProvider([primary, fallback])

    outcome = await search.find("query")

    assert outcome.urls == ["https://a.com", "https://d.com", "https://e.com"]
    assert outcome.source == "tavily"


@pytest.mark.asyncio
async def test_failed_primary_falls_back():
    search = FallbackSearchProvider(
        [StubProvider("tavily", error=True), StubProvider("duckduckgo", ["https://d.com"])]
    )

    outcome = await search.find("query")

    assert outcome.urls == ["https://d.com"]
    assert outcome.source == "duckduckgo"


@pytest.mark.asyncio
async def test_excluded_hosts_are_filtered():
    search = FallbackSearchProvider([StubProvider("tavily", ["https://origin.com/a", "https://other.com/b"])])

    outcome = await search.find("query", exclude_domains=["origin.com"])

    assert outcome.urls == ["https://other.com/b"]


@pytest.mark.asyncio
async def test_all_failing_gives_empty_outcome():
    search = FallbackSearchProvider(
        [StubProvider("tavily", error=True), StubProvider("duckduckgo", available=False)]
    )

    outcome = await search.find("query")

    assert outcome.urls == []
    assert outcome.source == "none"
    assert search.available_providers == {"tavily": True, "duckduckgo": False}


@pytest.mark.asyncio
async def test_results_are_cached():
    primary = StubProvider("tavily", ["https://a.com"])
    search = FallbackSearchProvider([primary])

    await search.find("query", ["x.com"])
    await search.find(" query ", ["X.com"])

    assert primary.calls == 1


@pytest.mark.asyncio
async def test_empty_outcomes_are_not_cached():
    primary = StubProvider("tavily", [])
    search = FallbackSearchProvider([primary])

    await search.find("query")
    await search.find("query")

    assert primary.calls == 2


@pytest.mark.asyncio
async def test_malformed_urls_are_skipped():
    primary = StubProvider("tavily", ["https://good.example/a"])
    fallback = StubProvider("duckduckgo", ["http://[bad", "https://other.example/b"])
    search = FallbackSearchProvider([primary, fallback])

    outcome = await search.find("query")

    assert outcome.urls == ["https://good.example/a", "https://other.example/b"]
    assert outcome.source == "tavily"


@pytest.mark.asyncio
async def test_malformed_urls_from_serpapi_keep_primary_results():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"organic_results": [{"link": "http://[bad"}]})

    serpapi = SerpAPISearchAdapter(
        SerpAPIConfig(api_key="key"), client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    search = FallbackSearchProvider([StubProvider("tavily", ["https://good.example/a"]), serpapi])

    outcome = await search.find("query")

    assert outcome.urls == ["https://good.example/a"]
    assert outcome.source == "tavily"


def test_url_host():
    assert url_host("https://WWW.Example.com/path") == "www.example.com"
    assert url_host("http://[bad") is None
    assert url_host("not a url") is None
