"""OpenAI implementation of the LLM and embedding provider interfaces."""

import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field

from ...domain.errors import GenerationFailure

logger = logging.getLogger(__name__)


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Chat model used for structured output")
    embedding_model: str = Field(default="text-embedding-3-small", description="Embedding model")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=4000, description="Maximum tokens per response")
    timeout: float = Field(default=120.0, description="Completion timeout in seconds")
    embedding_timeout: float = Field(default=30.0, description="Embedding timeout in seconds")
    max_retries: int = Field(default=2, description="Client-level retries on transient errors")


class OpenAIAdapter:
    """OpenAI implementation of ``LLMProvider`` and ``EmbeddingProvider``."""

    def __init__(self, config: Optional[OpenAIConfig] = None, client: Optional[AsyncOpenAI] = None):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            client: Pre-built client, mainly for tests
        """
        self._config = config or OpenAIConfig(api_key="")
        self._client = client
        self._initialized = client is not None

    async def initialize(self) -> None:
        """Create the API client."""
        if self._client is None:
            if not self._config.api_key:
                raise ConnectionError("Failed to initialize OpenAI provider: OPENAI_API_KEY is not set")
            self._client = AsyncOpenAI(
                api_key=self._config.api_key,
                timeout=self._config.timeout,
                max_retries=self._config.max_retries,
            )
        self._initialized = True
        logger.info(f"✅ OpenAI provider ready (model: {self._config.model})")

    async def shutdown(self) -> None:
        """Close the API client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
        self._initialized = False

    async def complete(
        self,
        prompt: str,
        schema: Dict[str, Any],
        system: Optional[str] = None,
    ) -> Any:
        """Run a prompt and parse the JSON answer.

        The schema is given to the model in the system message and the
        response is requested as a JSON object.

        Raises:
            GenerationFailure: On provider errors, timeouts or non-JSON output
        """
        if not self._client:
            raise RuntimeError("Provider not initialized")

        instructions = (system or "Answer with a single JSON object.") + (
            "\nThe JSON must match this schema:\n" + json.dumps(schema)
        )
        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": instructions},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise GenerationFailure(f"{type(e).__name__}: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GenerationFailure("Empty response from model")
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise GenerationFailure(f"Model returned invalid JSON: {e}") from e

    async def embed(self, text: str) -> List[float]:
        """Embed a text, returning an empty vector on any failure."""
        if not text or not text.strip():
            return []
        if not self._client:
            logger.warning("⚠️ Embedding requested before the provider was initialized")
            return []
        try:
            response = await self._client.embeddings.create(
                model=self._config.embedding_model,
                input=text,
                timeout=self._config.embedding_timeout,
            )
        except OpenAIError as e:
            logger.warning(f"⚠️ Error generating embedding ({len(text)} chars): {e}")
            return []
        if not response.data:
            logger.warning("⚠️ Invalid embedding response: no data")
            return []
        return list(response.data[0].embedding)

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def is_available(self) -> bool:
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, Any]:
        """Model settings reported by the health endpoint."""
        return {
            "model": self._config.model,
            "embedding_model": self._config.embedding_model,
            "structured_output": True,
        }
