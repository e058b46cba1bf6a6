"""Port interface for article text extraction."""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field


class ExtractedArticle(BaseModel):
    """Main text and metadata extracted from a web page."""

    url: str
    content: str = Field(..., description="Cleaned, whitespace-normalized article text")
    title: Optional[str] = None
    excerpt: Optional[str] = None
    source: str = Field(default="trafilatura", description="Extraction strategy that produced the text")

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    @property
    def char_count(self) -> int:
        return len(self.content)


class ArticleExtractor(ABC):
    """Abstract interface for turning a URL into article text."""

    @abstractmethod
    async def extract(self, url: str) -> ExtractedArticle:
        """Fetch a URL and extract its main text.

        Raises:
            ExtractionFailure: If the URL is invalid, unreachable, or has no content
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release network resources."""
        pass
