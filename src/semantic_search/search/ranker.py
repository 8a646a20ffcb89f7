"""
Ranking helpers for scored chunk matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..storage import ChunkRecord


@dataclass(frozen=True)
class ScoredChunk:
    """A stored chunk paired with its similarity to the query."""

    chunk: ChunkRecord
    score: float

    @property
    def document_id(self) -> str:
        return self.chunk.parent_doc_id


def above_threshold(
    scored: Iterable[ScoredChunk], *, threshold: float
) -> list[ScoredChunk]:
    """Keep matches scoring strictly above *threshold*."""
    return [item for item in scored if item.score > threshold]


def best_chunk_per_document(scored: Iterable[ScoredChunk]) -> dict[str, ScoredChunk]:
    """Collapse matches to the highest-scoring chunk of each parent document."""
    best: dict[str, ScoredChunk] = {}
    for item in scored:
        current = best.get(item.document_id)
        if current is None or current.score < item.score:
            best[item.document_id] = item
    return best


def rank_documents(
    scored: Iterable[ScoredChunk], *, limit: int
) -> list[ScoredChunk]:
    """Deduplicate by document, sort by score and apply limit."""
    ordered = sorted(
        best_chunk_per_document(scored).values(),
        key=lambda item: (-item.score, item.document_id),
    )
    return ordered[: max(limit, 1)]
