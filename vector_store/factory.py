"""Select the vector store backend from configuration."""

import logging
from typing import Optional

import chromadb

from .chroma_store import ChromaVectorStore
from .embedder import OllamaEmbedder
from .interface import VectorStore
from .local_store import LocalVectorStore
from .models import StoreConfig

logger = logging.getLogger(__name__)


def create_vector_store(
    config: Optional[StoreConfig] = None,
    embedder: Optional[OllamaEmbedder] = None,
    chroma_client: Optional[chromadb.ClientAPI] = None,
) -> VectorStore:
    """
    Build the store named by ``config.backend``.

    Args:
        config: Store configuration. Uses defaults (local backend) if not provided.
        embedder: Optional shared embedder.
        chroma_client: Optional ChromaDB client, only used by the chroma backend.
    """
    config = config or StoreConfig()
    logger.info("Using '%s' vector store backend", config.backend)

    if config.backend == "chroma":
        return ChromaVectorStore(config=config, embedder=embedder, chroma_client=chroma_client)
    if config.backend == "local":
        return LocalVectorStore(config=config, embedder=embedder)
    raise ValueError(f"Unsupported vector store backend: {config.backend}")
