"""Protocol for structured-output LLM providers."""

from typing import Any, Dict, Optional, Protocol


class LLMProvider(Protocol):
    """Protocol defining the interface for LLM providers.

    ``complete`` returns parsed JSON. Timeouts, provider errors and
    non-JSON output all surface as ``GenerationFailure``.
    """

    async def initialize(self) -> None:
        """Initialize the LLM provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def complete(
        self,
        prompt: str,
        schema: Dict[str, Any],
        system: Optional[str] = None,
    ) -> Any:
        """Run a prompt and return JSON matching ``schema``."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...
