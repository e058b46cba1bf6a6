"""SerpAPI (DuckDuckGo engine) implementation of the search provider interface."""

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import SearchFailure
from ...domain.ports.search_provider import SearchProvider
from .fallback_search import url_host

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search"


class SerpAPIConfig(BaseModel):
    """Configuration for the SerpAPI adapter."""

    api_key: str = Field(default="", description="SerpAPI key")
    engine: str = Field(default="duckduckgo", description="SerpAPI search engine")
    region: str = Field(default="us-en", description="DuckDuckGo region code")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class SerpAPISearchAdapter(SearchProvider):
    """Fallback web search through SerpAPI's DuckDuckGo engine.

    DuckDuckGo has no exclusion parameter, so excluded hosts are filtered
    from the organic results here.
    """

    def __init__(self, config: Optional[SerpAPIConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self._config = config or SerpAPIConfig()
        self._client = client

    async def initialize(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout, follow_redirects=True)

    async def search(
        self,
        query: str,
        exclude_domains: Optional[List[str]] = None,
        max_results: int = 3,
    ) -> List[str]:
        if not self._client:
            raise RuntimeError("Provider not initialized")

        params = {
            "engine": self._config.engine,
            "q": query,
            "kl": self._config.region,
            "api_key": self._config.api_key,
        }
        try:
            response = await self._client.get(SERPAPI_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SearchFailure(f"SerpAPI returned HTTP {e.response.status_code}", provider="duckduckgo") from e
        except (httpx.HTTPError, ValueError) as e:
            raise SearchFailure(f"SerpAPI search failed: {type(e).__name__}: {e}", provider="duckduckgo") from e

        excluded = {d.lower() for d in exclude_domains or [] if d}
        urls = []
        for result in data.get("organic_results") or [] if isinstance(data, dict) else []:
            link = result.get("link") if isinstance(result, dict) else None
            if not link or link in urls:
                continue
            host = url_host(link)
            if host is None or host in excluded:
                continue
            urls.append(link)
        return urls[:max_results]

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return "duckduckgo"

    @property
    def is_available(self) -> bool:
        return bool(self._config.api_key) and self._client is not None
