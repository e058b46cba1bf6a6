"""Tests for the web article extractor."""

import httpx
import pytest

from trust_checker.domain.errors import ExtractionFailure
from trust_checker.infrastructure.extraction import article_extractor
from trust_checker.infrastructure.extraction.article_extractor import (
    ArticleExtractorConfig,
    WebArticleExtractor,
    clean_text,
    is_valid_url,
)

BODY = "The council approved the new budget on Monday after a long debate about schools and roads. " * 2

PAGE = f"""<html>
<head>
  <title>Budget approved</title>
  <meta name="description" content="Council passes the budget.">
</head>
<body>
  <nav>Home | News | Contact</nav>
  <article><h1>Budget</h1><p>{BODY}</p></article>
</body>
</html>"""


def extractor_for(handler, **config) -> WebArticleExtractor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebArticleExtractor(ArticleExtractorConfig(**config), client=client)


def serve(html: str, status: int = 200):
    return lambda request: httpx.Response(status, text=html, headers={"Content-Type": "text/html"})


def test_clean_text():
    assert clean_text("<p>Hello   <b>world</b></p>\n\n") == "Hello world"
    assert clean_text("a" * 20, max_chars=5) == "aaaaa"


def test_is_valid_url():
    assert is_valid_url("https://example.com/a")
    assert not is_valid_url("ftp://example.com")
    assert not is_valid_url("not a url")


@pytest.mark.asyncio
async def test_invalid_url_is_rejected():
    extractor = WebArticleExtractor()
    with pytest.raises(ExtractionFailure, match="Invalid URL format"):
        await extractor.extract("javascript:alert(1)")


@pytest.mark.asyncio
async def test_http_error_is_extraction_failure():
    extractor = extractor_for(serve("gone", status=404))
    with pytest.raises(ExtractionFailure, match="HTTP 404"):
        await extractor.extract("https://example.com/missing")


@pytest.mark.asyncio
async def test_trafilatura_result_is_preferred(monkeypatch):
    monkeypatch.setattr(
        article_extractor,
        "_trafilatura_parse",
        lambda html: ("Main   article\ntext.", "Budget approved", "Council passes the budget."),
    )
    extractor = extractor_for(serve(PAGE))

    article = await extractor.extract("https://example.com/budget")

    assert article.content == "Main article text."
    assert article.title == "Budget approved"
    assert article.excerpt == "Council passes the budget."
    assert article.source == "trafilatura"


@pytest.mark.asyncio
async def test_selector_fallback(monkeypatch):
    monkeypatch.setattr(article_extractor, "_trafilatura_parse", lambda html: (None, None, None))
    extractor = extractor_for(serve(PAGE))

    article = await extractor.extract("https://example.com/budget")

    assert article.source == "fallback"
    assert article.content.startswith("Budget The council approved")
    assert "Home | News" not in article.content
    assert article.title == "Budget approved"
    assert article.excerpt == "Council passes the budget."


@pytest.mark.asyncio
async def test_trafilatura_errors_fall_back(monkeypatch):
    def broken(html):
        raise ValueError("parser crashed")

    monkeypatch.setattr(article_extractor, "_trafilatura_parse", broken)
    extractor = extractor_for(serve(PAGE))

    article = await extractor.extract("https://example.com/budget")

    assert article.source == "fallback"


@pytest.mark.asyncio
async def test_content_is_capped(monkeypatch):
    monkeypatch.setattr(article_extractor, "_trafilatura_parse", lambda html: ("x" * 50, None, None))
    extractor = extractor_for(serve(PAGE), max_chars=20)

    article = await extractor.extract("https://example.com/budget")

    assert article.content == "x" * 20


@pytest.mark.asyncio
async def test_empty_page_fails(monkeypatch):
    monkeypatch.setattr(article_extractor, "_trafilatura_parse", lambda html: (None, None, None))
    extractor = extractor_for(serve("<html><body></body></html>"))

    with pytest.raises(ExtractionFailure, match="Failed to extract content"):
        await extractor.extract("https://example.com/empty")
