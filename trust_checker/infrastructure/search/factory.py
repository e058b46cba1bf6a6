"""Factory for creating and managing search providers."""

from typing import Any, Dict, List, Optional, Type

from ...domain.ports.search_provider import SearchProvider
from .fallback_search import FallbackSearchProvider
from .serpapi_adapter import SerpAPISearchAdapter
from .tavily_adapter import TavilySearchAdapter


class SearchProviderFactory:
    """Factory for creating and managing search providers.

    Providers are created in priority order and composed into a single
    ``FallbackSearchProvider``.
    """

    def __init__(self):
        """Initialize the factory."""
        self._provider_registry: Dict[str, Type[SearchProvider]] = {}
        self._active_providers: Dict[str, SearchProvider] = {}

        self.register_provider("tavily", TavilySearchAdapter)
        self.register_provider("serpapi", SerpAPISearchAdapter)

    def register_provider(self, name: str, provider_class: Type[SearchProvider]) -> None:
        """Register a new search provider class.

        Args:
            name: Unique identifier for the provider
            provider_class: The provider class to register
        """
        if name in self._provider_registry:
            raise ValueError(f"Provider {name} already registered")
        self._provider_registry[name] = provider_class

    async def create_provider(self, name: str, **config: Any) -> SearchProvider:
        """Create and initialize a search provider.

        Raises:
            ValueError: If provider not found
            RuntimeError: If initialization fails
        """
        if name not in self._provider_registry:
            raise ValueError(f"Provider {name} not registered")

        provider = self._provider_registry[name](**config)
        try:
            await provider.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize provider {name}: {e}") from e
        self._active_providers[name] = provider
        return provider

    async def create_fallback(
        self,
        configs: Dict[str, Dict[str, Any]],
        order: Optional[List[str]] = None,
        **options: Any,
    ) -> FallbackSearchProvider:
        """Create every provider in ``order`` and compose them.

        Args:
            configs: Constructor arguments per provider name
            order: Priority order, registration order by default
            **options: Options for ``FallbackSearchProvider``
        """
        providers = [await self.create_provider(name, **configs.get(name, {})) for name in order or self._provider_registry]
        return FallbackSearchProvider(providers, **options)

    def get_provider(self, name: str) -> Optional[SearchProvider]:
        return self._active_providers.get(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and whether they are usable."""
        return {
            name: bool(self.get_provider(name)) and self._active_providers[name].is_available
            for name in self._provider_registry
        }

    async def shutdown_all(self) -> None:
        """Shutdown all active providers."""
        for provider in self._active_providers.values():
            await provider.shutdown()
        self._active_providers.clear()
