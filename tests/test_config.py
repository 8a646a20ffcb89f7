"""Tests for configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from semantic_search.config import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_MODEL,
    SearchConfig,
    configure_logging,
    load_config,
    resolve_db_path,
)
from semantic_search.errors import ConfigurationError

ENV_NAMES = [
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
    "OPENROUTER_BASE_URL",
    "SITE_URL",
    "SITE_NAME",
    "SEMANTIC_SEARCH_EMBEDDING_PROVIDER",
    "SEMANTIC_SEARCH_CHUNK_SIZE",
    "SEMANTIC_SEARCH_CHUNK_OVERLAP",
    "SEMANTIC_SEARCH_SIMILARITY_THRESHOLD",
    "SEMANTIC_SEARCH_CONTENT_TYPES",
    "SEMANTIC_SEARCH_CONTENT_FIELD",
    "SEMANTIC_SEARCH_DB_PATH",
    "SEMANTIC_SEARCH_API_TOKENS",
    "SEMANTIC_SEARCH_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    config = SearchConfig.from_env()

    assert config.api_key == ""
    assert config.model == DEFAULT_MODEL
    assert config.embedding_provider == "openrouter"
    assert config.site_url == "http://localhost:1337"
    assert config.chunk_size == 500
    assert config.chunk_overlap == 50
    assert config.similarity_threshold == 0.7
    assert config.content_types == ()
    assert config.content_field == "content"
    assert config.db_path is None
    assert config.api_tokens == {}
    assert config.log_level == "INFO"


def test_environment_values_are_parsed(monkeypatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", " sk-test ")
    monkeypatch.setenv("OPENROUTER_MODEL", "custom/embed")
    monkeypatch.setenv("SEMANTIC_SEARCH_CHUNK_SIZE", "200")
    monkeypatch.setenv("SEMANTIC_SEARCH_CHUNK_OVERLAP", "20")
    monkeypatch.setenv("SEMANTIC_SEARCH_SIMILARITY_THRESHOLD", "0.35")
    monkeypatch.setenv("SEMANTIC_SEARCH_CONTENT_TYPES", "article, page,,")
    monkeypatch.setenv("SEMANTIC_SEARCH_API_TOKENS", "alpha=7, beta=8")
    monkeypatch.setenv("SEMANTIC_SEARCH_LOG_LEVEL", "debug")

    config = SearchConfig.from_env()

    assert config.api_key == "sk-test"
    assert config.model == "custom/embed"
    assert (config.chunk_size, config.chunk_overlap) == (200, 20)
    assert config.similarity_threshold == 0.35
    assert config.content_types == ("article", "page")
    assert config.api_tokens == {"alpha": 7, "beta": 8}
    assert config.log_level == "DEBUG"


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SEMANTIC_SEARCH_CHUNK_SIZE", "large")
    monkeypatch.setenv("SEMANTIC_SEARCH_SIMILARITY_THRESHOLD", "high")

    config = SearchConfig.from_env()

    assert config.chunk_size == 500
    assert config.similarity_threshold == 0.7


def test_overrides_take_precedence(monkeypatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", "from-env")

    config = SearchConfig.from_env(
        {"openrouter_api_key": "from-override", "SEMANTIC_SEARCH_CHUNK_SIZE": 64}
    )

    assert config.api_key == "from-override"
    assert config.chunk_size == 64


@pytest.mark.parametrize("raw", ["alpha", "=7", "alpha=seven"])
def test_malformed_tokens_raise(monkeypatch, raw) -> None:
    monkeypatch.setenv("SEMANTIC_SEARCH_API_TOKENS", raw)

    with pytest.raises(ConfigurationError):
        SearchConfig.from_env()


def test_gemini_provider_defaults_to_gemini_model(monkeypatch) -> None:
    monkeypatch.setenv("SEMANTIC_SEARCH_EMBEDDING_PROVIDER", "gemini")

    assert SearchConfig.from_env().model == DEFAULT_GEMINI_MODEL

    monkeypatch.setenv("OPENROUTER_MODEL", "text-embedding-004")
    assert SearchConfig.from_env().model == "text-embedding-004"


def test_unsupported_provider_raises(monkeypatch) -> None:
    monkeypatch.setenv("SEMANTIC_SEARCH_EMBEDDING_PROVIDER", "carrier-pigeon")

    with pytest.raises(ConfigurationError, match="Unsupported embedding provider"):
        SearchConfig.from_env()


def test_load_config_requires_api_key(monkeypatch) -> None:
    with pytest.raises(ConfigurationError, match="OPENROUTER_API_KEY"):
        load_config()

    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")
    assert load_config().api_key == "sk-test"


def test_validate_rejects_bad_window() -> None:
    with pytest.raises(ConfigurationError):
        SearchConfig(api_key="k", chunk_size=0).validate()
    with pytest.raises(ConfigurationError):
        SearchConfig(api_key="k", chunk_size=100, chunk_overlap=100).validate()


def test_allows_content_type() -> None:
    assert SearchConfig().allows_content_type("anything")
    restricted = SearchConfig(content_types=("article",))
    assert restricted.allows_content_type("article")
    assert not restricted.allows_content_type("page")


def test_resolve_db_path_precedence(tmp_path: Path, monkeypatch) -> None:
    env_path = tmp_path / "env" / "index.duckdb"
    monkeypatch.setenv("SEMANTIC_SEARCH_DB_PATH", str(env_path))

    assert resolve_db_path() == str(env_path.resolve())
    assert env_path.parent.is_dir()

    override = tmp_path / "override" / "other.duckdb"
    assert resolve_db_path(str(override)) == str(override.resolve())


def test_configure_logging_sets_root_level() -> None:
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    configure_logging("not-a-level")
    assert logging.getLogger().level == logging.INFO
