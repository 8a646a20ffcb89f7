"""
Runtime configuration for the embedding provider, chunking and search.

Values resolve from explicit overrides first, then environment variables,
then defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from .errors import ConfigurationError


DEFAULT_DB_PATH = "~/.semantic_search/index.duckdb"
ENV_DB_PATH = "SEMANTIC_SEARCH_DB_PATH"

DEFAULT_MODEL = "openai/text-embedding-3-small"
DEFAULT_GEMINI_MODEL = "gemini-embedding-001"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
SUPPORTED_PROVIDERS = ("openrouter", "gemini")


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _split_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    text = str(value or "")
    return tuple(item.strip() for item in text.split(",") if item.strip())


def _parse_tokens(value: Any) -> dict[str, int]:
    """Parse ``token=owner`` pairs separated by commas."""
    if isinstance(value, dict):
        return {str(token): int(owner) for token, owner in value.items()}
    tokens: dict[str, int] = {}
    for pair in _split_list(value):
        token, sep, owner = pair.partition("=")
        if not sep or not token.strip():
            raise ConfigurationError(f"Malformed API token entry: {pair!r}")
        try:
            tokens[token.strip()] = int(owner)
        except ValueError as exc:
            raise ConfigurationError(
                f"API token owner must be an integer, got {owner!r}"
            ) from exc
    return tokens


def resolve_db_path(override_path: str | None = None) -> str:
    """
    Resolve the DuckDB path from an explicit override, env var, or default.

    The parent directory is created so the store can open the file.
    """
    raw_path = override_path or os.getenv(ENV_DB_PATH) or DEFAULT_DB_PATH
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


@dataclass(frozen=True)
class SearchConfig:
    """Settings passed explicitly to every pipeline component."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    embedding_provider: str = "openrouter"
    base_url: str = DEFAULT_BASE_URL
    site_url: str = "http://localhost:1337"
    site_name: str = "SemanticSearch"

    chunk_size: int = 500
    chunk_overlap: int = 50
    similarity_threshold: float | None = 0.7

    content_types: tuple[str, ...] = ()
    content_field: str = "content"

    db_path: str | None = None
    api_tokens: dict[str, int] = field(default_factory=dict)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, overrides: dict[str, Any] | None = None) -> "SearchConfig":
        overrides = overrides or {}

        def pick(name: str, default: Any = "") -> Any:
            if name in overrides:
                return overrides[name]
            lower = name.lower()
            if lower in overrides:
                return overrides[lower]
            return os.getenv(name, default)

        provider = str(pick("SEMANTIC_SEARCH_EMBEDDING_PROVIDER", "openrouter"))
        provider = provider.strip().lower() or "openrouter"
        if provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported embedding provider {provider!r}; "
                f"expected one of {', '.join(SUPPORTED_PROVIDERS)}"
            )
        default_model = DEFAULT_GEMINI_MODEL if provider == "gemini" else DEFAULT_MODEL

        return cls(
            api_key=str(pick("OPENROUTER_API_KEY", "")).strip(),
            model=str(pick("OPENROUTER_MODEL", default_model)).strip() or default_model,
            embedding_provider=provider,
            base_url=str(pick("OPENROUTER_BASE_URL", DEFAULT_BASE_URL)).strip()
            or DEFAULT_BASE_URL,
            site_url=str(pick("SITE_URL", "http://localhost:1337")).strip(),
            site_name=str(pick("SITE_NAME", "SemanticSearch")).strip(),
            chunk_size=_to_int(pick("SEMANTIC_SEARCH_CHUNK_SIZE", 500), 500),
            chunk_overlap=_to_int(pick("SEMANTIC_SEARCH_CHUNK_OVERLAP", 50), 50),
            similarity_threshold=_to_float(
                pick("SEMANTIC_SEARCH_SIMILARITY_THRESHOLD", 0.7), 0.7
            ),
            content_types=_split_list(pick("SEMANTIC_SEARCH_CONTENT_TYPES", "")),
            content_field=str(pick("SEMANTIC_SEARCH_CONTENT_FIELD", "content")).strip()
            or "content",
            db_path=str(pick(ENV_DB_PATH, "")).strip() or None,
            api_tokens=_parse_tokens(pick("SEMANTIC_SEARCH_API_TOKENS", "")),
            log_level=str(pick("SEMANTIC_SEARCH_LOG_LEVEL", "INFO")).strip().upper()
            or "INFO",
        )

    def validate(self) -> "SearchConfig":
        """Raise ConfigurationError when the settings cannot serve requests."""
        if not self.api_key:
            raise ConfigurationError("Semantic Search: OPENROUTER_API_KEY is required")
        if self.chunk_size <= 0:
            raise ConfigurationError("chunk_size must be > 0")
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError("chunk_overlap must be in [0, chunk_size)")
        return self

    def allows_content_type(self, content_type: str) -> bool:
        return not self.content_types or content_type in self.content_types


def load_config(overrides: dict[str, Any] | None = None) -> SearchConfig:
    """Read settings from the environment and fail fast when unusable."""
    return SearchConfig.from_env(overrides).validate()


def configure_logging(level: str = "INFO") -> None:
    """Route package logs through Rich once per process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
