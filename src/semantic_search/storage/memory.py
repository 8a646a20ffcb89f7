"""
In-memory stores, used for tests and for embedding the pipeline in a host
that keeps its own persistence.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from typing import Any, Mapping

from .base import ChunkRecord


def stable_chunk_id(parent_type: str, parent_doc_id: str, position: int) -> str:
    digest = hashlib.sha1(
        json.dumps([parent_type, parent_doc_id, position]).encode("utf-8")
    ).hexdigest()
    return f"chunk_{digest}"


class InMemoryDocumentStore:
    """Documents kept as plain dicts keyed by (content type, document id)."""

    def __init__(self) -> None:
        self._documents: dict[tuple[str, str], dict[str, Any]] = {}

    def put_document(
        self, content_type: str, document_id: str, fields: Mapping[str, Any]
    ) -> None:
        self._documents[(content_type, document_id)] = dict(fields)

    def delete_document(self, content_type: str, document_id: str) -> bool:
        return self._documents.pop((content_type, document_id), None) is not None

    def find(self, content_type: str, document_id: str) -> Mapping[str, Any] | None:
        document = self._documents.get((content_type, document_id))
        return dict(document) if document is not None else None


class InMemoryChunkStore:
    """A list of chunk records filtered by linear scans."""

    def __init__(self) -> None:
        self._chunks: list[ChunkRecord] = []

    def __len__(self) -> int:
        return len(self._chunks)

    def all(self) -> list[ChunkRecord]:
        return list(self._chunks)

    def delete_many(self, *, parent_doc_id: str, parent_type: str | None = None) -> int:
        kept: list[ChunkRecord] = []
        removed = 0
        for chunk in self._chunks:
            if chunk.parent_doc_id == parent_doc_id and (
                parent_type is None or chunk.parent_type == parent_type
            ):
                removed += 1
            else:
                kept.append(chunk)
        self._chunks = kept
        return removed

    def create(self, record: ChunkRecord) -> ChunkRecord:
        stored = dataclasses.replace(
            record,
            embedding=list(record.embedding),
            id=record.id
            or stable_chunk_id(record.parent_type, record.parent_doc_id, record.position),
        )
        self._chunks.append(stored)
        return stored

    def find_many(self, *, owner: int, parent_type: str | None = None) -> list[ChunkRecord]:
        return [
            chunk
            for chunk in self._chunks
            if chunk.owner == owner
            and (parent_type is None or chunk.parent_type == parent_type)
        ]
