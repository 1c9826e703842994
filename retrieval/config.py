from dataclasses import dataclass, field
import os

from chunking.models import ChunkingConfig
from vector_store.models import StoreConfig


@dataclass
class RetrievalConfig:
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    top_k: int = 5
    store: StoreConfig = field(default_factory=StoreConfig)

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        chunk_defaults = ChunkingConfig()
        chunking = ChunkingConfig(
            chunk_size=_int("RAG_CHUNK_SIZE", chunk_defaults.chunk_size),
            overlap=_int("RAG_CHUNK_OVERLAP", chunk_defaults.overlap),
        )

        defaults = StoreConfig()
        store = StoreConfig(
            backend=os.environ.get("RAG_STORE_BACKEND", defaults.backend),
            persist_path=os.environ.get("RAG_STORE_PATH", defaults.persist_path),
            persist_directory=os.environ.get("CHROMA_PERSIST_DIR", defaults.persist_directory),
            collection_name=os.environ.get("CHROMA_COLLECTION", defaults.collection_name),
            chroma_host=os.environ.get("CHROMA_HOST") or None,
            chroma_port=_int("CHROMA_PORT", defaults.chroma_port),
            embedding_model=os.environ.get("OLLAMA_EMBED_MODEL", defaults.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", defaults.ollama_base_url),
            max_batch_size=_int("RAG_EMBED_BATCH_SIZE", defaults.max_batch_size),
            request_timeout=_float("RAG_REQUEST_TIMEOUT", defaults.request_timeout),
            max_retries=_int("RAG_MAX_RETRIES", defaults.max_retries),
            retry_backoff_seconds=_float("RAG_RETRY_BACKOFF", defaults.retry_backoff_seconds),
        )
        return cls(
            chunking=chunking,
            top_k=_int("RAG_TOP_K", cls.top_k),
            store=store,
        )
