"""
DuckDB storage backend for documents and chunk records.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import duckdb

from .base import ChunkRecord
from .memory import stable_chunk_id


class DuckDBStorage:
    """DuckDB-backed persistence implementing both document and chunk stores."""

    def __init__(
        self,
        db_path: str,
        *,
        read_only: bool = False,
        initialize: bool = True,
    ) -> None:
        if db_path == ":memory:":
            self.db_path = db_path
        else:
            self.db_path = str(Path(db_path).expanduser().resolve())
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.read_only = read_only
        self._conn = duckdb.connect(self.db_path, read_only=read_only)
        if initialize and not read_only:
            self.initialize()

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        self._conn.close()

    def __enter__(self) -> "DuckDBStorage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def initialize(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
                content_type VARCHAR NOT NULL,
                document_id VARCHAR NOT NULL,
                fields_json VARCHAR NOT NULL DEFAULT '{}',
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (content_type, document_id)
            );
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS chunks (
                id VARCHAR PRIMARY KEY,
                content VARCHAR NOT NULL,
                embedding DOUBLE[] NOT NULL,
                parent_doc_id VARCHAR NOT NULL,
                parent_type VARCHAR NOT NULL,
                title_reference VARCHAR,
                owner BIGINT NOT NULL,
                position INTEGER NOT NULL DEFAULT 0
            );
            """
        )

    # -- documents -----------------------------------------------------------

    def put_document(
        self, content_type: str, document_id: str, fields: Mapping[str, Any]
    ) -> None:
        self._conn.execute(
            """
            INSERT INTO documents (content_type, document_id, fields_json)
            VALUES (?, ?, ?)
            ON CONFLICT(content_type, document_id) DO UPDATE SET
                fields_json = excluded.fields_json,
                updated_at = now()
            """,
            [content_type, document_id, json.dumps(dict(fields), sort_keys=True)],
        )

    def delete_document(self, content_type: str, document_id: str) -> bool:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM documents WHERE content_type = ? AND document_id = ?",
            [content_type, document_id],
        ).fetchone()
        self._conn.execute(
            "DELETE FROM documents WHERE content_type = ? AND document_id = ?",
            [content_type, document_id],
        )
        return bool(row and row[0])

    def find(self, content_type: str, document_id: str) -> Mapping[str, Any] | None:
        row = self._conn.execute(
            """
            SELECT fields_json
            FROM documents
            WHERE content_type = ? AND document_id = ?
            LIMIT 1
            """,
            [content_type, document_id],
        ).fetchone()
        if row is None:
            return None
        return json.loads(str(row[0]))

    # -- chunks --------------------------------------------------------------

    def delete_many(self, *, parent_doc_id: str, parent_type: str | None = None) -> int:
        where = "parent_doc_id = ?"
        params: list[Any] = [parent_doc_id]
        if parent_type is not None:
            where += " AND parent_type = ?"
            params.append(parent_type)

        row = self._conn.execute(
            f"SELECT COUNT(*) FROM chunks WHERE {where}", params
        ).fetchone()
        self._conn.execute(f"DELETE FROM chunks WHERE {where}", params)
        return int(row[0]) if row else 0

    def create(self, record: ChunkRecord) -> ChunkRecord:
        chunk_id = record.id or stable_chunk_id(
            record.parent_type, record.parent_doc_id, record.position
        )
        self._conn.execute(
            """
            INSERT INTO chunks (
                id, content, embedding, parent_doc_id, parent_type,
                title_reference, owner, position
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                chunk_id,
                record.content,
                [float(value) for value in record.embedding],
                record.parent_doc_id,
                record.parent_type,
                record.title_reference,
                record.owner,
                record.position,
            ],
        )
        return ChunkRecord(
            content=record.content,
            embedding=list(record.embedding),
            parent_doc_id=record.parent_doc_id,
            parent_type=record.parent_type,
            owner=record.owner,
            title_reference=record.title_reference,
            position=record.position,
            id=chunk_id,
        )

    def find_many(self, *, owner: int, parent_type: str | None = None) -> list[ChunkRecord]:
        sql = """
            SELECT
                id, content, embedding, parent_doc_id, parent_type,
                title_reference, owner, position
            FROM chunks
            WHERE owner = ?
        """
        params: list[Any] = [owner]
        if parent_type is not None:
            sql += " AND parent_type = ?"
            params.append(parent_type)
        sql += " ORDER BY parent_doc_id, position"

        rows = self._conn.execute(sql, params).fetchall()
        return [self._row_to_chunk_record(row) for row in rows]

    def count_chunks(self, *, owner: int | None = None) -> int:
        if owner is None:
            row = self._conn.execute("SELECT COUNT(*) FROM chunks").fetchone()
        else:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM chunks WHERE owner = ?", [owner]
            ).fetchone()
        return int(row[0]) if row else 0

    @staticmethod
    def _row_to_chunk_record(row: tuple[Any, ...]) -> ChunkRecord:
        return ChunkRecord(
            id=str(row[0]),
            content=str(row[1]),
            embedding=[float(value) for value in row[2]],
            parent_doc_id=str(row[3]),
            parent_type=str(row[4]),
            title_reference=None if row[5] is None else str(row[5]),
            owner=int(row[6]),
            position=int(row[7]),
        )
