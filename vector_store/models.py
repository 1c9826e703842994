"""
Data Models for the Vector Store

Defines:
1. StoreConfig - Backend selection, persistence, Ollama and batching settings
2. StoredVector - A persisted chunk with its embedding
3. SearchResult - A single search hit with its cosine distance
4. StoreStats / DocumentPreview - Store overview for the stats endpoint
5. DeleteResult - Outcome of a delete-by-filename
6. EmbedderHealth / StoreHealth - Health check results

Design Principles:
- Pydantic v2 for validation (consistent with chunking and retrieval)
- JSON field names are camelCase on the wire and on disk; Python attributes
  stay snake_case through aliases
- StoredVector serializes to exactly {id, text, embedding, metadata}
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


PREVIEW_LENGTH = 100


class StoreConfig(BaseModel):
    """Configuration for the vector store and its embedding provider."""
    backend: Literal["local", "chroma"] = Field(
        "local",
        description="Store backend: JSON-file linear index or ChromaDB",
    )
    persist_path: str = Field(
        "./vector-store.json",
        description="JSON file backing the local store",
    )
    persist_directory: str = Field(
        "./chroma_db",
        description="Directory for ChromaDB persistent storage",
    )
    collection_name: str = Field(
        "documents",
        description="ChromaDB collection name",
    )
    chroma_host: Optional[str] = Field(
        None,
        description="Host of a ChromaDB server; PersistentClient is used when unset",
    )
    chroma_port: int = Field(
        8000,
        description="Port of the ChromaDB server",
    )
    embedding_model: str = Field(
        "nomic-embed-text",
        description="Ollama embedding model name",
    )
    ollama_base_url: str = Field(
        "http://localhost:11434",
        description="Ollama API base URL",
    )
    max_batch_size: int = Field(
        100,
        description="Maximum number of texts per embedding call",
        ge=1,
    )
    request_timeout: float = Field(
        60.0,
        description="Timeout in seconds for embedding / index calls",
        gt=0,
    )
    max_retries: int = Field(
        2,
        description="Retries for idempotent provider / index calls",
        ge=0,
    )
    retry_backoff_seconds: float = Field(
        0.5,
        description="Linear back-off step between retries",
        ge=0,
    )


class StoredVector(BaseModel):
    """A chunk as persisted by a store: text, metadata and embedding."""
    id: str
    text: str
    embedding: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)


class SearchResult(BaseModel):
    """A single search result from the vector store."""
    id: str = Field(
        "",
        description="ID of the matching chunk",
    )
    text: str = Field(
        ...,
        description="Text content of the matching chunk",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Chunk metadata",
    )
    distance: float = Field(
        ...,
        description="Cosine distance (0 = same direction, 1 = orthogonal, 2 = opposite)",
    )


class DocumentPreview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text_preview: str = Field(..., alias="textPreview")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_text(
        cls, id: str, text: str, metadata: Optional[dict[str, Any]] = None
    ) -> "DocumentPreview":
        return cls(
            id=id,
            text_preview=text[:PREVIEW_LENGTH] + "...",
            metadata=metadata or {},
        )


class StoreStats(BaseModel):
    """Overview of everything held by a store."""
    model_config = ConfigDict(populate_by_name=True)

    document_count: int = Field(0, alias="documentCount")
    documents: list[DocumentPreview] = Field(default_factory=list)


class DeleteResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_count: int = Field(0, alias="deletedCount")


class EmbedderHealth(BaseModel):
    """Reachability of the embedding provider and its model."""
    name: str
    reachable: bool = False
    available: bool = False
    error: str = ""


class StoreHealth(BaseModel):
    """Result of a store health check, served by the /health endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    backend: Literal["local", "chroma"]
    healthy: bool
    document_count: int = Field(0, alias="documentCount")
    error: str = ""
    embedder: Optional[EmbedderHealth] = None
