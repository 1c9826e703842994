"""
Vector Store Module - Embedding, similarity search and persistence

Stores document chunks as embeddings and answers top-k similarity queries.
Two interchangeable backends implement the same VectorStore protocol:

- LocalVectorStore: in-memory linear index mirrored to a JSON file
- ChromaVectorStore: ChromaDB collection fed with precomputed embeddings

Quick Start:
    from vector_store import StoreConfig, create_vector_store

    store = create_vector_store(StoreConfig(backend="local"))
    store.add(chunks)
    results = store.search("How do I reset my password?", top_k=5)
    print(store.stats().document_count)
"""

__version__ = "1.0.0"

from .chroma_store import ChromaVectorStore, RejectingEmbeddingFunction
from .embedder import OllamaEmbedder
from .exceptions import (
    DegenerateVectorError,
    DimensionMismatchError,
    EmbeddingProviderError,
    ExternalIndexError,
    RetrievalError,
    StoreIOError,
    VectorStoreError,
)
from .factory import create_vector_store
from .interface import VectorStore
from .local_store import LocalVectorStore
from .models import (
    DeleteResult,
    DocumentPreview,
    SearchResult,
    StoreConfig,
    EmbedderHealth,
    StoredVector,
    StoreHealth,
    StoreStats,
)
from .similarity import cosine_similarity, rank

__all__ = [
    "__version__",
    "VectorStore",
    "LocalVectorStore",
    "ChromaVectorStore",
    "RejectingEmbeddingFunction",
    "OllamaEmbedder",
    "create_vector_store",
    "StoreConfig",
    "StoredVector",
    "SearchResult",
    "StoreStats",
    "DocumentPreview",
    "DeleteResult",
    "StoreHealth",
    "EmbedderHealth",
    "cosine_similarity",
    "rank",
    "RetrievalError",
    "EmbeddingProviderError",
    "DegenerateVectorError",
    "VectorStoreError",
    "StoreIOError",
    "ExternalIndexError",
    "DimensionMismatchError",
]
