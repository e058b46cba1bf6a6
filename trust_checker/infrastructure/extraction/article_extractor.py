"""Article extraction over HTTP with trafilatura and a BeautifulSoup fallback."""

import asyncio
import logging
import re
from typing import Optional, Tuple
from urllib.parse import urlparse

import httpx
import trafilatura
from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from ...domain.errors import ExtractionFailure
from ...domain.ports.article_extractor import ArticleExtractor, ExtractedArticle

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

FALLBACK_SELECTORS = (
    "article",
    "main",
    '[role="main"]',
    ".post-content",
    ".article-content",
    ".entry-content",
    "body",
)

_TAGS = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


class ArticleExtractorConfig(BaseModel):
    """Configuration for the web article extractor."""

    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")
    max_chars: int = Field(default=10000, description="Characters of article text kept")
    user_agent: str = Field(default=BROWSER_USER_AGENT, description="User agent sent with requests")
    min_selector_chars: int = Field(default=100, description="Selector text length accepted as main content")
    min_content_chars: int = Field(default=500, description="Below this, all paragraphs are used instead")


def clean_text(html: str, max_chars: int = 10000) -> str:
    """Strip tags, collapse whitespace and cap the length."""
    text = _TAGS.sub(" ", html or "")
    return _WHITESPACE.sub(" ", text).strip()[:max_chars]


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class WebArticleExtractor(ArticleExtractor):
    """Fetches a page and extracts its main text."""

    def __init__(self, config: Optional[ArticleExtractorConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self._config = config or ArticleExtractorConfig()
        self._client = client

    async def initialize(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=True,
                headers={"User-Agent": self._config.user_agent},
            )

    async def extract(self, url: str) -> ExtractedArticle:
        """Fetch ``url`` and extract its article text.

        Raises:
            ExtractionFailure: If the URL is invalid, the fetch fails, or no text is found
        """
        if not is_valid_url(url):
            raise ExtractionFailure("Invalid URL format", url=url)
        if not self._client:
            raise RuntimeError("Provider not initialized")

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExtractionFailure(f"HTTP {e.response.status_code} fetching {url}", url=url) from e
        except httpx.HTTPError as e:
            raise ExtractionFailure(f"Failed to fetch {url}: {type(e).__name__}: {e}", url=url) from e

        html = response.text
        article = await self._from_trafilatura(url, html)
        if article is None:
            article = self._from_selectors(url, html)
        if not article.content:
            raise ExtractionFailure("Failed to extract content from the URL", url=url)

        logger.info(f"✅ Extracted {article.char_count} chars from {url} ({article.source})")
        return article

    async def _from_trafilatura(self, url: str, html: str) -> Optional[ExtractedArticle]:
        try:
            text, title, description = await asyncio.to_thread(_trafilatura_parse, html)
        except Exception as e:
            logger.warning(f"⚠️ trafilatura failed for {url}, falling back to selectors: {e}")
            return None
        content = clean_text(text or "", self._config.max_chars)
        if not content:
            return None
        return ExtractedArticle(url=url, content=content, title=title, excerpt=description, source="trafilatura")

    def _from_selectors(self, url: str, html: str) -> ExtractedArticle:
        soup = BeautifulSoup(html, "html.parser")

        content = ""
        for selector in FALLBACK_SELECTORS:
            element = soup.select_one(selector)
            if element is not None:
                content = element.get_text(" ")
                if len(content.strip()) > self._config.min_selector_chars:
                    break

        if len(content.strip()) < self._config.min_content_chars:
            paragraphs = "\n".join(p.get_text(" ") for p in soup.find_all("p"))
            if len(paragraphs.strip()) > len(content.strip()):
                content = paragraphs

        content = clean_text(content, self._config.max_chars)
        title = soup.title.get_text().strip() if soup.title else None
        excerpt = _meta_content(soup, property="og:description") or _meta_content(soup, name="description")
        if not excerpt and content:
            excerpt = content[:200] + "..."
        return ExtractedArticle(url=url, content=content, title=title or None, excerpt=excerpt, source="fallback")

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_available(self) -> bool:
        return self._client is not None


def _trafilatura_parse(html: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    text = trafilatura.extract(html, include_comments=False, include_tables=True)
    metadata = trafilatura.extract_metadata(html)
    title = getattr(metadata, "title", None) if metadata else None
    description = getattr(metadata, "description", None) if metadata else None
    return text, title, description


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    value = tag.get("content")
    return value.strip() if isinstance(value, str) and value.strip() else None
