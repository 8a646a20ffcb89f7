"""
Embedding client for chunk and query vectors.

Wraps an OpenAI-compatible embeddings endpoint (OpenRouter by default) or
the Google GenAI embedding API. One call embeds one text; failures are
logged and raised, never retried.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from google.genai import Client as GenAIClient
from openai import AsyncOpenAI

from .config import SearchConfig
from .errors import ConfigurationError, EmbeddingProviderError

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    """Anything that turns a text into a vector asynchronously."""

    async def generate(self, text: str) -> list[float]:
        """Return the embedding vector for *text*."""


def normalize_input(text: str) -> str:
    """Flatten newlines to spaces before embedding."""
    return text.replace("\n", " ")


class EmbeddingClient:
    """Generate embeddings through the configured provider."""

    def __init__(self, config: SearchConfig, *, client: Any | None = None) -> None:
        self.config = config
        self.model = config.model
        self.provider = config.embedding_provider

        if client is not None:
            self._client = client
        else:
            if not config.api_key:
                raise ConfigurationError(
                    "OPENROUTER_API_KEY not found. "
                    "Provide api_key or set the environment variable."
                )
            self._client = self._build_client(config)

    @staticmethod
    def _build_client(config: SearchConfig) -> Any:
        if config.embedding_provider == "gemini":
            return GenAIClient(api_key=config.api_key)

        return AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            default_headers={
                "HTTP-Referer": config.site_url,
                "X-Title": config.site_name,
            },
        )

    async def generate(self, text: str) -> list[float]:
        """Embed a single text and return its vector."""
        normalized = normalize_input(text)
        try:
            if self.provider == "gemini":
                result = await self._client.aio.models.embed_content(
                    model=self.model,
                    contents=[normalized],
                )
                return list(result.embeddings[0].values)

            response = await self._client.embeddings.create(
                model=self.model,
                input=normalized,
            )
            return list(response.data[0].embedding)
        except Exception as exc:
            logger.error("Embedding provider %s failed: %s", self.provider, exc)
            raise EmbeddingProviderError(
                f"Embedding provider {self.provider} failed: {exc}"
            ) from exc
