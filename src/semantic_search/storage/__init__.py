"""Storage backends for semantic search chunks and documents."""

from .base import ChunkRecord, ChunkStore, DocumentStore
from .duckdb import DuckDBStorage
from .memory import InMemoryChunkStore, InMemoryDocumentStore

__all__ = [
    "ChunkRecord",
    "ChunkStore",
    "DocumentStore",
    "DuckDBStorage",
    "InMemoryChunkStore",
    "InMemoryDocumentStore",
]
