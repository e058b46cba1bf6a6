"""Test configuration and common fixtures."""

from typing import Dict, List, Optional, Union

import pytest

from trust_checker.domain.errors import ExtractionFailure
from trust_checker.domain.heuristics.trusted_sources import TrustedCategory, TrustedSourceTable
from trust_checker.domain.models.evidence import SearchOutcome
from trust_checker.domain.ports.article_extractor import ExtractedArticle


class FakeArticleExtractor:
    """Article extractor serving canned pages by URL."""

    def __init__(self, pages: Optional[Dict[str, Union[str, Exception]]] = None):
        self.pages = pages or {}
        self.calls: List[str] = []

    async def extract(self, url: str) -> ExtractedArticle:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise ExtractionFailure("Failed to extract content from the URL", url=url)
        if isinstance(page, Exception):
            raise page
        return ExtractedArticle(url=url, content=page, title=f"Title of {url}")

    async def shutdown(self) -> None:
        pass


class FakeClaimSearch:
    """Claim search returning canned URLs per query prefix."""

    def __init__(self, results: Optional[Dict[str, List[str]]] = None, source: str = "tavily"):
        self.results = results or {}
        self.source = source
        self.queries: List[str] = []
        self.excluded: List[Optional[List[str]]] = []

    async def find(self, query: str, exclude_domains: Optional[List[str]] = None) -> SearchOutcome:
        self.queries.append(query)
        self.excluded.append(exclude_domains)
        for prefix, urls in self.results.items():
            if query.startswith(prefix):
                return SearchOutcome(urls=urls, source=self.source)
        return SearchOutcome()


class FakeEmbedder:
    """Embeds text as keyword counts so similarity is predictable."""

    def __init__(self, vocabulary: List[str], fail_on: Optional[str] = None):
        self.vocabulary = vocabulary
        self.fail_on = fail_on
        self.calls = 0

    async def embed(self, text: str) -> List[float]:
        self.calls += 1
        if self.fail_on and self.fail_on in text:
            return []
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.vocabulary]


@pytest.fixture
def trusted_table() -> TrustedSourceTable:
    """Provide a small trusted source table for testing."""
    return TrustedSourceTable(
        {
            "general": TrustedCategory(sources=["reuters.com", "apnews.com"], weight=0.8),
            "health": TrustedCategory(sources=["who.int", "cdc.gov"], weight=1.0),
            "science": TrustedCategory(sources=["nature.com"], weight=0.9),
        }
    )


@pytest.fixture
def fake_extractor() -> FakeArticleExtractor:
    return FakeArticleExtractor()


@pytest.fixture
def fake_search() -> FakeClaimSearch:
    return FakeClaimSearch()
