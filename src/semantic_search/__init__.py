"""
SemanticSearch - owner-scoped semantic search over stored documents.

Document fields are split into overlapping chunks, embedded through an
external provider and stored with their owner. Queries are embedded and
matched against the caller's chunks by cosine similarity, one best chunk
per document.

Example usage:
    >>> from semantic_search import (
    ...     EmbeddingClient, Indexer, SemanticSearchEngine, load_config,
    ... )
    >>> config = load_config()
    >>> embedder = EmbeddingClient(config)
    >>> indexer = Indexer(documents, chunks, embedder, config=config)
    >>> await indexer.index_document("article", "42", "content", owner_id=7)
    >>> engine = SemanticSearchEngine(documents, chunks, embedder, config=config)
    >>> results = await engine.query_search("feline pets", owner_id=7)
"""

from .config import SearchConfig, load_config
from .embeddings import Embedder, EmbeddingClient
from .errors import (
    AuthenticationError,
    ConfigurationError,
    DocumentNotFoundError,
    EmbeddingProviderError,
    SearchValidationError,
    SemanticSearchError,
)
from .indexing import Indexer, IndexingResult, RemovalResult, TextChunker, split_text
from .search import SearchResult, SemanticSearchEngine
from .similarity import cosine_similarity, euclidean_distance
from .storage import (
    ChunkRecord,
    ChunkStore,
    DocumentStore,
    DuckDBStorage,
    InMemoryChunkStore,
    InMemoryDocumentStore,
)

__all__ = [
    # Configuration
    "SearchConfig",
    "load_config",
    # Embeddings
    "Embedder",
    "EmbeddingClient",
    # Errors
    "AuthenticationError",
    "ConfigurationError",
    "DocumentNotFoundError",
    "EmbeddingProviderError",
    "SearchValidationError",
    "SemanticSearchError",
    # Indexing
    "Indexer",
    "IndexingResult",
    "RemovalResult",
    "TextChunker",
    "split_text",
    # Search
    "SearchResult",
    "SemanticSearchEngine",
    "cosine_similarity",
    "euclidean_distance",
    # Storage
    "ChunkRecord",
    "ChunkStore",
    "DocumentStore",
    "DuckDBStorage",
    "InMemoryChunkStore",
    "InMemoryDocumentStore",
]
