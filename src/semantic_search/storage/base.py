"""
Storage interfaces and data models for chunk persistence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol


@dataclass(frozen=True)
class ChunkRecord:
    """A text chunk with its embedding, tied to a source document and owner."""

    content: str
    embedding: list[float]
    parent_doc_id: str
    parent_type: str
    owner: int
    title_reference: str | None = None
    position: int = 0
    id: str | None = None


class DocumentStore(Protocol):
    """Read access to source documents addressed by (content type, id)."""

    def find(self, content_type: str, document_id: str) -> Mapping[str, Any] | None:
        """Return the document's field mapping, or None when absent."""


class ChunkStore(Protocol):
    """Keyed record store for chunk records."""

    def delete_many(self, *, parent_doc_id: str, parent_type: str | None = None) -> int:
        """Delete chunks of a document (optionally of one type). Return count."""

    def create(self, record: ChunkRecord) -> ChunkRecord:
        """Persist a chunk and return it with its assigned id."""

    def find_many(self, *, owner: int, parent_type: str | None = None) -> list[ChunkRecord]:
        """Return every chunk of an owner, optionally restricted to one type."""
