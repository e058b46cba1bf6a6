"""Protocol for text embedding providers."""

from typing import List, Protocol


class EmbeddingProvider(Protocol):
    """Protocol for providers that turn text into vectors."""

    async def embed(self, text: str) -> List[float]:
        """Embed a text. Returns an empty list on failure, never raises."""
        ...
