"""
Chunking utilities for indexing document content.
"""

from __future__ import annotations


DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 50


class TextChunker:
    """
    Sentence-aware chunker with overlap.

    Windows are snapped back to the last period or newline when that break
    lies in the second half of the window; otherwise the text is cut hard.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ) -> None:
        _check_window(chunk_size, chunk_overlap)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def split_text(
        self,
        text: str | None,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
    ) -> list[str]:
        size = chunk_size if chunk_size is not None else self.chunk_size
        overlap = chunk_overlap if chunk_overlap is not None else self.chunk_overlap
        _check_window(size, overlap)

        if not text or not text.strip():
            return []

        cleaned = text.strip()
        total = len(cleaned)
        if total <= size:
            return [cleaned]

        chunks: list[str] = []
        start = 0
        while start < total:
            end = start + size

            if end < total:
                break_point = max(
                    cleaned.rfind(".", start, end + 1),
                    cleaned.rfind("\n", start, end + 1),
                )
                if break_point > start + size / 2:
                    end = break_point + 1

            chunk = cleaned[start:end].strip()
            if chunk:
                chunks.append(chunk)

            # Next start would fall within the overlap of the text's end.
            if end >= total:
                break
            # A snapped end can sit closer to start than the overlap.
            start = max(end - overlap, start + 1)

        return chunks


def _check_window(chunk_size: int, chunk_overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    if chunk_overlap < 0:
        raise ValueError("chunk_overlap must be >= 0")
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")


def split_text(
    text: str | None,
    chunk_size: int | None = None,
    chunk_overlap: int | None = None,
) -> list[str]:
    """Split *text* with the default window when none is given."""
    return TextChunker().split_text(text, chunk_size, chunk_overlap)
