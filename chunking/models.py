"""
Data Models for the Chunking Pipeline

Defines:
1. ChunkingConfig - Window size and overlap in characters
2. Chunk - A single immutable text chunk with its metadata

Design Principles:
- Pydantic v2 for validation and serialization
- Metadata is a plain dict so that extraction metadata
  (filename, fileType, size, uploadedAt) and chunk position
  (chunkIndex, totalChunks) travel together, plus any passthrough keys

Usage:
    config = ChunkingConfig(chunk_size=1000, overlap=200)
    chunks = build_chunks(text, metadata, config.chunk_size, config.overlap)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChunkingConfig(BaseModel):
    """
    Configuration for the chunking pipeline.

    overlap >= chunk_size is accepted: the chunker then falls back to
    adjacent, non-overlapping windows.
    """
    chunk_size: int = Field(
        1000,
        description="Window length in characters",
        ge=1,
    )
    overlap: int = Field(
        200,
        description="Characters shared by consecutive chunks",
        ge=0,
    )


class Chunk(BaseModel):
    """A bounded-length substring of a document; the unit of embedding."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Globally unique ID: <filename>-<timestamp_ms>-<ordinal>",
        min_length=1,
    )
    text: str = Field(
        ...,
        description="Chunk text",
        min_length=1,
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Document metadata plus chunkIndex / totalChunks",
    )

    @property
    def filename(self) -> str:
        return self.metadata.get("filename", "")
