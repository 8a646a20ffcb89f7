"""Search helpers for owner-scoped chunk indexes."""

from .ranker import ScoredChunk, above_threshold, best_chunk_per_document, rank_documents
from .semantic import SearchResult, SemanticSearchEngine

__all__ = [
    "ScoredChunk",
    "above_threshold",
    "best_chunk_per_document",
    "rank_documents",
    "SearchResult",
    "SemanticSearchEngine",
]
