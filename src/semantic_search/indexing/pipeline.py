"""
Indexing pipeline orchestration.

Fetches a document, replaces its chunks, and embeds each new chunk one at
a time. A failure part-way leaves the document under-indexed until the next
successful run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..config import SearchConfig
from ..embeddings import Embedder
from ..errors import ConfigurationError, DocumentNotFoundError, SearchValidationError
from ..storage import ChunkRecord, ChunkStore, DocumentStore
from .chunker import TextChunker

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


@dataclass(frozen=True)
class IndexingResult:
    """Summary output for one indexing call."""

    document_id: str
    content_type: str
    chunks_created: int
    fields: list[str] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class RemovalResult:
    """Summary output for removing a document from the index."""

    document_id: str
    chunks_removed: int
    success: bool = True


class Indexer:
    """Build and replace the chunk set of individual documents."""

    def __init__(
        self,
        document_store: DocumentStore,
        chunk_store: ChunkStore,
        embedder: Embedder | None = None,
        *,
        config: SearchConfig | None = None,
        chunker: TextChunker | None = None,
    ) -> None:
        self.config = config or SearchConfig()
        self.document_store = document_store
        self.chunk_store = chunk_store
        self.embedder = embedder
        self.chunker = chunker or TextChunker(
            chunk_size=self.config.chunk_size,
            chunk_overlap=self.config.chunk_overlap,
        )

    async def index_document(
        self,
        content_type: str,
        document_id: str,
        field: str,
        *,
        title_field: str = "title",
        owner_id: int | None = None,
    ) -> IndexingResult:
        """Index one text field of a document for *owner_id*."""
        self._require_owner(owner_id)
        self._require_content_type(content_type)

        try:
            document = self._fetch(content_type, document_id)
            text = document.get(field)
            if not text:
                raise SearchValidationError(
                    f'Field "{field}" is empty or does not exist on document {document_id}'
                )
            created = await self._replace_chunks(
                content_type=content_type,
                document_id=document_id,
                document=document,
                text=str(text),
                title_field=title_field,
                owner_id=owner_id,  # type: ignore[arg-type]
            )
        except Exception as exc:
            logger.error(
                "Indexing failed for %s:%s: %s", content_type, document_id, exc
            )
            raise

        return IndexingResult(
            document_id=document_id,
            content_type=content_type,
            chunks_created=created,
            fields=[field],
        )

    async def index_document_fields(
        self,
        content_type: str,
        document_id: str,
        fields: list[str],
        *,
        title_field: str = "title",
        owner_id: int | None = None,
    ) -> IndexingResult:
        """Index several fields of a document as one space-joined body."""
        self._require_owner(owner_id)
        self._require_content_type(content_type)

        try:
            document = self._fetch(content_type, document_id)
            combined = " ".join(
                str(document.get(name))
                for name in fields
                if document.get(name)
            )
            if not combined:
                raise SearchValidationError(
                    f"No content found in fields [{', '.join(fields)}] "
                    f"for document {document_id}"
                )
            created = await self._replace_chunks(
                content_type=content_type,
                document_id=document_id,
                document=document,
                text=combined,
                title_field=title_field,
                owner_id=owner_id,  # type: ignore[arg-type]
            )
        except Exception as exc:
            logger.error(
                "Indexing failed for %s:%s: %s", content_type, document_id, exc
            )
            raise

        return IndexingResult(
            document_id=document_id,
            content_type=content_type,
            chunks_created=created,
            fields=list(fields),
        )

    def remove_document(self, document_id: str) -> RemovalResult:
        """Drop every chunk of *document_id*, whatever its content type."""
        removed = self.chunk_store.delete_many(parent_doc_id=document_id)
        logger.info("Removed %d chunks for document %s", removed, document_id)
        return RemovalResult(document_id=document_id, chunks_removed=removed)

    async def _replace_chunks(
        self,
        *,
        content_type: str,
        document_id: str,
        document: Mapping[str, Any],
        text: str,
        title_field: str,
        owner_id: int,
    ) -> int:
        if self.embedder is None:
            raise ConfigurationError("An embedder is required to index documents")

        cleared = self.chunk_store.delete_many(
            parent_doc_id=document_id, parent_type=content_type
        )
        logger.debug(
            "Cleared %d stale chunks for %s:%s", cleared, content_type, document_id
        )

        title = document.get(title_field) or UNTITLED
        pieces = self.chunker.split_text(text)

        created = 0
        for position, piece in enumerate(pieces):
            vector = await self.embedder.generate(piece)
            self.chunk_store.create(
                ChunkRecord(
                    content=piece,
                    embedding=vector,
                    parent_doc_id=document_id,
                    parent_type=content_type,
                    owner=owner_id,
                    title_reference=str(title),
                    position=position,
                )
            )
            created += 1

        logger.info(
            "Indexed %d chunks for %s:%s", created, content_type, document_id
        )
        return created

    def _fetch(self, content_type: str, document_id: str) -> Mapping[str, Any]:
        document = self.document_store.find(content_type, document_id)
        if document is None:
            raise DocumentNotFoundError(content_type, document_id)
        return document

    @staticmethod
    def _require_owner(owner_id: int | None) -> None:
        if owner_id is None:
            raise SearchValidationError("owner_id is required for indexing documents")

    def _require_content_type(self, content_type: str) -> None:
        if not self.config.allows_content_type(content_type):
            raise SearchValidationError(
                f"Content type {content_type} is not enabled for semantic search"
            )
