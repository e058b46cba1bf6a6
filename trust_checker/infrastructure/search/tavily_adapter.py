"""Tavily implementation of the search provider interface."""

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import SearchFailure
from ...domain.ports.search_provider import SearchProvider

logger = logging.getLogger(__name__)

TAVILY_URL = "https://api.tavily.com/search"


class TavilyConfig(BaseModel):
    """Configuration for the Tavily adapter."""

    api_key: str = Field(default="", description="Tavily API key")
    timeout: float = Field(default=12.0, description="Request timeout in seconds")
    search_depth: str = Field(default="basic", description="Tavily search depth")


class TavilySearchAdapter(SearchProvider):
    """Primary web search provider backed by the Tavily API."""

    def __init__(self, config: Optional[TavilyConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self._config = config or TavilyConfig()
        self._client = client

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=True,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self._config.api_key}",
                },
            )

    async def search(
        self,
        query: str,
        exclude_domains: Optional[List[str]] = None,
        max_results: int = 3,
    ) -> List[str]:
        if not self._client:
            raise RuntimeError("Provider not initialized")

        payload = {
            "query": query,
            "search_depth": self._config.search_depth,
            "max_results": max_results,
            "include_answer": False,
            "include_raw_content": False,
        }
        excluded = sorted({d.lower().lstrip(".") for d in exclude_domains or [] if d})
        if excluded:
            payload["exclude_domains"] = excluded

        try:
            response = await self._client.post(TAVILY_URL, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SearchFailure(
                f"Tavily returned HTTP {e.response.status_code}: {e.response.text[:200]}", provider="tavily"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise SearchFailure(f"Tavily search failed: {type(e).__name__}: {e}", provider="tavily") from e

        results = data.get("results") or [] if isinstance(data, dict) else []
        return [r["url"] for r in results if isinstance(r, dict) and r.get("url")][:max_results]

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return "tavily"

    @property
    def is_available(self) -> bool:
        return bool(self._config.api_key) and self._client is not None
