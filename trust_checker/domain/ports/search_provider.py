"""Port interface for web search providers."""

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol

from ..models.evidence import SearchOutcome


class SearchProvider(ABC):
    """Abstract interface for a single web search provider.

    Implementations raise ``SearchFailure`` when the provider cannot be
    reached or answers with an error. Composite providers decide how to
    fall back.
    """

    async def initialize(self) -> None:
        """Open network resources. Providers without any need not override this."""
        pass

    @abstractmethod
    async def search(
        self,
        query: str,
        exclude_domains: Optional[List[str]] = None,
        max_results: int = 3,
    ) -> List[str]:
        """Search the web.

        Args:
            query: Search query
            exclude_domains: Hostnames whose pages must not be returned
            max_results: Maximum number of URLs

        Returns:
            Result URLs, best first
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release network resources."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short identifier recorded in search metrics."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured."""
        pass


class ClaimSearch(Protocol):
    """Search that tries its providers in turn and never raises."""

    async def find(self, query: str, exclude_domains: Optional[List[str]] = None) -> SearchOutcome:
        """Return up to 3 URLs and the provider that found them.

        Returns ``SearchOutcome(urls=[], source="none")`` when every
        provider fails.
        """
        ...
