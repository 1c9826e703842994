"""
Chunking Module - Overlapping character-window chunking for RAG

Splits extracted document text into overlapping fixed-size chunks with
document metadata attached, ready for embedding.

Quick Start:
    from chunking import build_chunks

    chunks = build_chunks(text, {"filename": "notes.txt"}, chunk_size=1000, overlap=200)
    for chunk in chunks:
        print(chunk.id, len(chunk.text))
"""

__version__ = "1.0.0"

from .chunker import MAX_CHUNKS, build_chunks, chunk_text
from .models import Chunk, ChunkingConfig

__all__ = [
    "__version__",
    "MAX_CHUNKS",
    "Chunk",
    "ChunkingConfig",
    "build_chunks",
    "chunk_text",
]
