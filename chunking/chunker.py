"""
Document Chunker - Character-window chunking for the RAG pipeline

Splits extracted document text into fixed-size, overlapping windows and
wraps them as Chunk objects ready for embedding.

Algorithm:
1. Empty text yields no chunks; text that fits one window yields itself.
2. Emit text[start:start + chunk_size].
3. The next window starts `overlap` characters before the current end.
4. If that start would not move past the current start (overlap >=
   chunk_size), the next window starts at the current end instead.
5. Stop when start reaches the end of the text, or after MAX_CHUNKS windows.

Once a window reaches the end of the text the loop still steps back by
`overlap`, so the last chunk is the final `overlap` characters and repeats
the tail of the chunk before it (2500 chars at 1000/200 give windows of
1000, 1000, 900 and 200). Every pair of neighbours keeps the shared
`overlap`; the cost is one redundant chunk per document.

Usage:
    from chunking import chunk_text, build_chunks

    pieces = chunk_text(text, chunk_size=1000, overlap=200)
    chunks = build_chunks(text, {"filename": "notes.txt"})
"""

import logging
import time
from typing import Any, Optional

from .models import Chunk

logger = logging.getLogger(__name__)

MAX_CHUNKS = 10_000


def chunk_text(
    text: str,
    chunk_size: int = 1000,
    overlap: int = 200,
    max_chunks: int = MAX_CHUNKS,
) -> list[str]:
    """
    Split text into overlapping fixed-width windows.

    Args:
        text: The text to split.
        chunk_size: Window length in characters.
        overlap: Characters shared by consecutive windows.
        max_chunks: Hard cap on the number of windows; output is truncated
            when it is reached.

    Returns:
        Chunks in document order. Consecutive chunks share `overlap`
        characters whenever overlap < chunk_size; the last chunk may lie
        entirely inside the one before it.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ValueError(f"overlap must not be negative, got {overlap}")

    if not text:
        return []
    if len(text) <= chunk_size:
        return [text]

    chunks: list[str] = []
    start = 0
    while start < len(text):
        if len(chunks) >= max_chunks:
            logger.warning(
                "Chunk limit of %d reached, truncating text at offset %d of %d",
                max_chunks, start, len(text),
            )
            break

        end = min(start + chunk_size, len(text))
        chunks.append(text[start:end])

        next_start = end - overlap
        if next_start <= start:
            next_start = end
        start = next_start

    return chunks


def build_chunks(
    text: str,
    metadata: Optional[dict[str, Any]] = None,
    chunk_size: int = 1000,
    overlap: int = 200,
    timestamp_ms: Optional[int] = None,
) -> list[Chunk]:
    """
    Chunk a document's text and attach metadata to every piece.

    Args:
        text: Extracted document text.
        metadata: Document metadata (filename, fileType, size, uploadedAt, ...).
        chunk_size: Window length in characters.
        overlap: Characters shared by consecutive chunks.
        timestamp_ms: Timestamp used in chunk IDs (defaults to now).

    Returns:
        Chunk objects with chunkIndex / totalChunks added to the metadata.
    """
    metadata = dict(metadata or {})
    pieces = chunk_text(text, chunk_size=chunk_size, overlap=overlap)
    if not pieces:
        return []

    filename = metadata.get("filename", "document")
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    return [
        Chunk(
            id=f"{filename}-{timestamp_ms}-{index}",
            text=piece,
            metadata={
                **metadata,
                "chunkIndex": index,
                "totalChunks": len(pieces),
            },
        )
        for index, piece in enumerate(pieces)
    ]
