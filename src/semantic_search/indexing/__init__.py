"""Indexing components for semantic search."""

from .chunker import TextChunker, split_text
from .pipeline import Indexer, IndexingResult, RemovalResult

__all__ = [
    "TextChunker",
    "split_text",
    "Indexer",
    "IndexingResult",
    "RemovalResult",
]
