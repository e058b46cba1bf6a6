"""Environment-driven application settings."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .ai.openai_adapter import OpenAIConfig
from .extraction.article_extractor import ArticleExtractorConfig
from .search.serpapi_adapter import SerpAPIConfig
from .search.tavily_adapter import TavilyConfig
from ..domain.services.evidence_gatherer import GathererConfig

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Application settings, read once from the environment."""

    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: str = Field(default="gpt-4o-mini", description="Chat model")
    openai_embedding_model: str = Field(default="text-embedding-3-small", description="Embedding model")
    tavily_api_key: str = Field(default="", description="Tavily API key")
    serpapi_key: str = Field(default="", description="SerpAPI key")
    fetch_timeout: float = Field(default=30.0, gt=0, description="Seconds allowed per evidence fetch")
    max_concurrency: int = Field(default=10, ge=1, description="Concurrent evidence fetches")
    trusted_sources_path: Optional[str] = Field(default=None, description="Trusted source table JSON")
    strict_domains: bool = Field(default=False, description="Only exact or suffix domain matches count as trusted")
    history_size: int = Field(default=50, ge=1, description="Analyses kept in history")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables, loading ``.env`` first."""
        if dotenv and load_dotenv():
            logger.info("📁 Environment variables loaded from .env file via python-dotenv")

        settings = cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            openai_embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
            tavily_api_key=os.getenv("TAVILY_API_KEY", ""),
            serpapi_key=os.getenv("SERPAPI_KEY", ""),
            fetch_timeout=float(os.getenv("TRUST_CHECKER_FETCH_TIMEOUT", "30")),
            max_concurrency=int(os.getenv("TRUST_CHECKER_MAX_CONCURRENCY", "10")),
            trusted_sources_path=os.getenv("TRUST_CHECKER_TRUSTED_SOURCES") or None,
            strict_domains=_env_bool("TRUST_CHECKER_STRICT_DOMAINS"),
            history_size=int(os.getenv("TRUST_CHECKER_HISTORY_SIZE", "50")),
        )
        if not settings.openai_api_key:
            logger.warning("⚠️ OPENAI_API_KEY not found in environment variables")
        if not settings.tavily_api_key and not settings.serpapi_key:
            logger.warning("⚠️ Neither TAVILY_API_KEY nor SERPAPI_KEY is set, evidence search is disabled")
        return settings

    def openai_config(self) -> OpenAIConfig:
        return OpenAIConfig(
            api_key=self.openai_api_key,
            model=self.openai_model,
            embedding_model=self.openai_embedding_model,
        )

    def tavily_config(self) -> TavilyConfig:
        return TavilyConfig(api_key=self.tavily_api_key)

    def serpapi_config(self) -> SerpAPIConfig:
        return SerpAPIConfig(api_key=self.serpapi_key)

    def extractor_config(self) -> ArticleExtractorConfig:
        return ArticleExtractorConfig()

    def gatherer_config(self) -> GathererConfig:
        return GathererConfig(
            fetch_timeout=self.fetch_timeout,
            max_concurrency=self.max_concurrency,
            batch_size=self.max_concurrency,
        )
