"""Composite search that fills results from providers in priority order."""

import logging
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from cachetools import TTLCache

from ...domain.errors import SearchFailure
from ...domain.models.evidence import SearchOutcome
from ...domain.ports.search_provider import SearchProvider

logger = logging.getLogger(__name__)


def url_host(url: str) -> Optional[str]:
    """Lower-cased hostname of ``url``, or None if the URL cannot be parsed."""
    if not isinstance(url, str):
        return None
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host.lower() if host else None


class FallbackSearchProvider:
    """Tries each provider in turn until enough unique URLs are found.

    The outcome records the first provider that contributed a URL. When
    every provider fails the outcome is empty with source ``none``; this
    class never raises for provider failures.
    """

    def __init__(
        self,
        providers: List[SearchProvider],
        max_results: int = 3,
        cache_ttl: int = 3600,
        cache_maxsize: int = 512,
    ):
        self.providers = providers
        self.max_results = max_results
        self._cache: TTLCache = TTLCache(maxsize=cache_maxsize, ttl=cache_ttl)

    async def find(self, query: str, exclude_domains: Optional[List[str]] = None) -> SearchOutcome:
        query = query.strip()
        excluded = {d.lower() for d in exclude_domains or [] if d}
        key: Tuple[str, Tuple[str, ...]] = (query, tuple(sorted(excluded)))
        if key in self._cache:
            return self._cache[key]

        urls: List[str] = []
        source = "none"
        tried = []
        for provider in self.providers:
            if len(urls) >= self.max_results:
                break
            if not provider.is_available:
                continue
            tried.append(provider.provider_name)
            try:
                found = await provider.search(query, sorted(excluded), self.max_results)
            except SearchFailure as e:
                logger.warning(f"⚠️ {provider.provider_name} search failed for '{query[:60]}': {e}")
                continue

            added = False
            for url in found:
                if len(urls) >= self.max_results:
                    break
                if url in urls:
                    continue
                host = url_host(url)
                if host is None:
                    logger.warning(f"⚠️ Skipping malformed URL from {provider.provider_name}: {str(url)[:100]}")
                    continue
                if host in excluded:
                    continue
                urls.append(url)
                added = True
            if added and source == "none":
                source = provider.provider_name

        outcome = SearchOutcome(urls=urls, source=source)
        if urls:
            self._cache[key] = outcome
        else:
            logger.warning(f"⚠️ No search results for '{query[:60]}' (tried: {', '.join(tried) or 'none'})")
        return outcome

    async def shutdown(self) -> None:
        for provider in self.providers:
            await provider.shutdown()

    @property
    def is_available(self) -> bool:
        return any(p.is_available for p in self.providers)

    @property
    def available_providers(self) -> dict:
        return {p.provider_name: p.is_available for p in self.providers}
