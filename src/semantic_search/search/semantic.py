"""
Vector-based semantic search engine.

Embeds a query, scores the caller's stored chunks by cosine similarity and
returns one hydrated result per matching document.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from ..config import SearchConfig
from ..embeddings import Embedder
from ..errors import SearchValidationError
from ..similarity import cosine_similarity
from ..storage import ChunkStore, DocumentStore
from .ranker import ScoredChunk, above_threshold, rank_documents

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_THRESHOLD = 0.5


@dataclass(frozen=True)
class SearchResult:
    """A ranked document match."""

    document_id: str
    title: str | None
    text_snippet: str
    full_content: str
    content_type: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        return {
            "documentId": payload["document_id"],
            "title": payload["title"],
            "textSnippet": payload["text_snippet"],
            "fullContent": payload["full_content"],
            "contentType": payload["content_type"],
            "score": payload["score"],
        }


class SemanticSearchEngine:
    """Embed a query and search the owner's stored chunk embeddings."""

    def __init__(
        self,
        document_store: DocumentStore,
        chunk_store: ChunkStore,
        embedder: Embedder,
        *,
        config: SearchConfig | None = None,
    ) -> None:
        self.config = config or SearchConfig()
        self.document_store = document_store
        self.chunk_store = chunk_store
        self.embedder = embedder

    async def query_search(
        self,
        user_query: str,
        *,
        owner_id: int | None = None,
        content_type: str | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """Return up to *limit* documents whose best chunk beats *threshold*."""
        if owner_id is None:
            raise SearchValidationError("owner_id is required for semantic search")
        if not user_query or not user_query.strip():
            raise SearchValidationError("Query is required")

        limit = DEFAULT_LIMIT if limit is None else limit
        if limit < 1:
            raise SearchValidationError("limit must be >= 1")
        threshold = self._resolve_threshold(threshold)

        logger.info(
            "Query: %r | Owner: %s | Threshold: %s", user_query, owner_id, threshold
        )

        query_vector = await self.embedder.generate(user_query)

        stored_chunks = self.chunk_store.find_many(
            owner=owner_id, parent_type=content_type
        )
        logger.info("Found %d chunks for owner %s", len(stored_chunks), owner_id)

        scored = [
            ScoredChunk(chunk=chunk, score=cosine_similarity(query_vector, chunk.embedding))
            for chunk in stored_chunks
        ]
        if logger.isEnabledFor(logging.DEBUG):
            top = sorted(scored, key=lambda item: -item.score)[:10]
            logger.debug(
                "Top scores: %s",
                ", ".join(
                    f"{item.chunk.title_reference}: {item.score * 100:.1f}%"
                    for item in top
                ),
            )

        matches = above_threshold(scored, threshold=threshold)
        logger.info("Results after threshold filter: %d", len(matches))

        results = [self._hydrate(best) for best in rank_documents(matches, limit=limit)]
        logger.info("Unique documents returned: %d", len(results))
        return results

    def _resolve_threshold(self, threshold: float | None) -> float:
        if threshold is not None:
            return threshold
        if self.config.similarity_threshold is not None:
            return self.config.similarity_threshold
        return DEFAULT_THRESHOLD

    def _hydrate(self, best: ScoredChunk) -> SearchResult:
        chunk = best.chunk
        title = chunk.title_reference
        full_content = chunk.content

        try:
            document = self.document_store.find(chunk.parent_type, chunk.parent_doc_id)
        except Exception:
            logger.warning(
                "Error fetching doc %s; using chunk content as fallback",
                chunk.parent_doc_id,
                exc_info=True,
            )
        else:
            content = document.get(self.config.content_field) if document else None
            if document and content:
                full_content = str(content)
                title = title or document.get("title")
            else:
                logger.info(
                    "Using chunk content as fallback for doc %s", chunk.parent_doc_id
                )

        return SearchResult(
            document_id=chunk.parent_doc_id,
            title=title,
            text_snippet=chunk.content,
            full_content=full_content,
            content_type=chunk.parent_type,
            score=best.score,
        )
