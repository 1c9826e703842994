"""
Chroma Vector Store - ChromaDB-backed external index

Delegates storage and nearest-neighbour search to ChromaDB:
- Add: embed chunks with our own embedder and upsert ids, embeddings,
  documents and metadatas in one call
- Search: one query-by-embedding call for the top-k
- Delete by filename: look up matching ids, then delete them in bulk
- Clear: drop and recreate the collection; an already dropped collection
  counts as cleared

Design:
- Chroma never embeds anything itself: the collection is created with
  RejectingEmbeddingFunction, which fails loudly if it is ever called
- Cosine distance space, so distances match the local store
- Metadata stored as flat key-value pairs (ChromaDB limitation)
- Idempotent calls are retried on transient failures; bulk delete is not
- A collection dropped by another store is reopened by name and the call
  retried once
- search() degrades to [] when the index fails; every other operation
  propagates ExternalIndexError

Usage:
    from vector_store import ChromaVectorStore, StoreConfig

    store = ChromaVectorStore(StoreConfig(backend="chroma"))
    store.add(chunks)
    results = store.search("What is the refund policy?", top_k=5)
"""

import json
import logging
import time
from typing import Any, Callable, Optional, Sequence

import chromadb
from chromadb.api.types import Documents, EmbeddingFunction, Embeddings
from chromadb.errors import NotFoundError
from chromadb.utils.embedding_functions import register_embedding_function

from chunking.models import Chunk

from .embedder import OllamaEmbedder
from .exceptions import ExternalIndexError, is_retryable
from .models import (
    DeleteResult,
    DocumentPreview,
    SearchResult,
    StoreConfig,
    StoreHealth,
    StoreStats,
)

logger = logging.getLogger(__name__)


@register_embedding_function
class RejectingEmbeddingFunction(EmbeddingFunction[Documents]):
    """
    Collection embedding function that must never run.

    Every call to Chroma passes precomputed embeddings; reaching this
    function means a caller sent raw texts (a configuration defect).
    It is registered under a fixed name so a persisted collection can be
    reopened by any later process.
    """

    def __init__(self) -> None:
        pass

    def __call__(self, input: Documents) -> Embeddings:
        raise ExternalIndexError(
            "embed",
            message=(
                f"Chroma tried to embed {len(input)} texts itself; "
                "all calls must supply precomputed embeddings"
            ),
        )

    @staticmethod
    def name() -> str:
        return "reject-precomputed"

    def get_config(self) -> dict[str, Any]:
        return {}

    @staticmethod
    def build_from_config(config: dict[str, Any]) -> "RejectingEmbeddingFunction":
        return RejectingEmbeddingFunction()


class ChromaVectorStore:
    """
    Vector store backed by a ChromaDB collection with external embeddings.
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        embedder: Optional[OllamaEmbedder] = None,
        chroma_client: Optional[chromadb.ClientAPI] = None,
    ):
        """
        Initialize the store.

        Args:
            config: Store configuration. Uses defaults if not provided.
            embedder: Optional pre-created embedder (for testing).
            chroma_client: Optional pre-created ChromaDB client (for testing).
                           If not provided, an HttpClient is created when
                           chroma_host is set, a PersistentClient otherwise.
        """
        self.config = config or StoreConfig(backend="chroma")
        self._embedder = embedder or OllamaEmbedder(
            model=self.config.embedding_model,
            base_url=self.config.ollama_base_url,
            max_batch_size=self.config.max_batch_size,
            timeout=self.config.request_timeout,
            max_retries=self.config.max_retries,
            retry_backoff_seconds=self.config.retry_backoff_seconds,
        )
        if chroma_client is not None:
            self._client = chroma_client
        elif self.config.chroma_host:
            self._client = chromadb.HttpClient(
                host=self.config.chroma_host,
                port=self.config.chroma_port,
            )
        else:
            self._client = chromadb.PersistentClient(
                path=self.config.persist_directory,
            )
        self._collection = self._open_collection()

    @property
    def embedder(self) -> OllamaEmbedder:
        """Access the underlying embedder."""
        return self._embedder

    # -------------------------------------------------------------------------
    # Store operations
    # -------------------------------------------------------------------------

    def add(self, documents: Sequence[Chunk]) -> int:
        """
        Embed documents and upsert them into the collection in one call.

        Returns:
            Number of documents stored.

        Raises:
            EmbeddingProviderError: If embedding fails (nothing is sent).
            ExternalIndexError: If the upsert fails.
        """
        if not documents:
            return 0

        texts = [doc.text for doc in documents]
        embeddings = self._embedder.embed_batch(texts)

        self._collection_call(
            "add",
            "upsert",
            ids=[doc.id for doc in documents],
            embeddings=embeddings,
            documents=texts,
            metadatas=[flatten_metadata(doc.metadata) for doc in documents],
        )
        logger.info("Added %d documents to collection '%s'",
                    len(documents), self.config.collection_name)
        return len(documents)

    def search(self, query: str, top_k: int = 5) -> list[SearchResult]:
        """
        Query the collection by embedding.

        Index failures are logged and produce an empty result list;
        embedding failures propagate.
        """
        if top_k <= 0:
            return []

        try:
            total = self._collection_call("count", "count")
            if total == 0:
                logger.info("Collection '%s' is empty, nothing to search",
                            self.config.collection_name)
                return []

            query_embedding = self._embedder.embed(query)
            raw = self._collection_call(
                "query",
                "query",
                query_embeddings=[query_embedding],
                n_results=min(top_k, total),
                include=["documents", "metadatas", "distances"],
            )
        except ExternalIndexError as e:
            logger.error("Search failed, returning no results: %s", e)
            return []

        results: list[SearchResult] = []
        if not raw["ids"] or not raw["ids"][0]:
            return results

        for i, chunk_id in enumerate(raw["ids"][0]):
            results.append(SearchResult(
                id=chunk_id,
                text=raw["documents"][0][i],
                metadata=raw["metadatas"][0][i] or {},
                distance=float(raw["distances"][0][i]),
            ))
        return results

    def stats(self) -> StoreStats:
        raw = self._collection_call("get", "get", include=["documents", "metadatas"])
        previews = [
            DocumentPreview.from_text(chunk_id, raw["documents"][i] or "", raw["metadatas"][i])
            for i, chunk_id in enumerate(raw["ids"])
        ]
        return StoreStats(document_count=len(previews), documents=previews)

    def clear(self) -> None:
        """
        Drop and recreate the collection.

        A collection that is already gone (dropped by another store on the
        same server) counts as cleared.
        """
        try:
            self._call(
                "clear",
                self._client.delete_collection,
                name=self.config.collection_name,
                retry=False,
            )
        except ExternalIndexError as e:
            if not is_missing_collection(e.original_error):
                raise
            logger.info("Collection '%s' was already dropped",
                        self.config.collection_name)
        self._collection = self._open_collection()
        logger.info("Recreated collection '%s'", self.config.collection_name)

    def delete_by_filename(self, filename: str) -> DeleteResult:
        """
        Delete all chunks of a file: look up their ids, then bulk-delete.

        The delete itself is not retried; a retry has to look the ids up again.
        """
        found = self._collection_call(
            "get",
            "get",
            where={"filename": filename},
            include=[],
        )
        chunk_ids = found["ids"]

        if chunk_ids:
            self._collection_call("delete", "delete", ids=chunk_ids, retry=False)

        logger.info("Deleted %d chunks for '%s'", len(chunk_ids), filename)
        return DeleteResult(deleted_count=len(chunk_ids))

    def count(self) -> int:
        """Return the total number of chunks in the collection."""
        return self._collection_call("count", "count")

    def health_check(self) -> StoreHealth:
        """Check that the collection answers and the embedder is usable."""
        embedder_health = self._embedder.health_check()
        try:
            total = self.count()
        except ExternalIndexError as e:
            logger.warning("ChromaDB health check failed: %s", e)
            return StoreHealth(
                backend="chroma",
                healthy=False,
                error=str(e),
                embedder=embedder_health,
            )

        return StoreHealth(
            backend="chroma",
            healthy=embedder_health.available,
            document_count=total,
            error=embedder_health.error,
            embedder=embedder_health,
        )

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _open_collection(self):
        return self._call(
            "open_collection",
            self._client.get_or_create_collection,
            name=self.config.collection_name,
            embedding_function=RejectingEmbeddingFunction(),
            metadata={"hnsw:space": "cosine"},
        )

    def _collection_call(
        self,
        operation: str,
        method: str,
        *args: Any,
        retry: bool = True,
        **kwargs: Any,
    ) -> Any:
        """
        Call a method of the current collection.

        If the collection was dropped and recreated elsewhere, the handle
        held here is stale: reopen it by name and try once more.
        """
        try:
            return self._call(operation, getattr(self._collection, method),
                              *args, retry=retry, **kwargs)
        except ExternalIndexError as e:
            if not is_missing_collection(e.original_error):
                raise
            logger.warning("Collection '%s' disappeared during %s, reopening",
                           self.config.collection_name, operation)
            self._collection = self._open_collection()
            return self._call(operation, getattr(self._collection, method),
                              *args, retry=retry, **kwargs)

    def _call(
        self,
        operation: str,
        func: Callable[..., Any],
        *args: Any,
        retry: bool = True,
        **kwargs: Any,
    ) -> Any:
        """Invoke a Chroma call, retrying transient failures when allowed."""
        attempt = 0
        while True:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if retry and attempt < self.config.max_retries and is_retryable(e):
                    attempt += 1
                    delay = self.config.retry_backoff_seconds * attempt
                    logger.warning(
                        "Chroma %s failed (%s), retry %d/%d in %.1fs",
                        operation, e, attempt, self.config.max_retries, delay,
                    )
                    time.sleep(delay)
                    continue
                if isinstance(e, ExternalIndexError):
                    raise
                raise ExternalIndexError(operation, original_error=e) from e


def is_missing_collection(error: Optional[BaseException]) -> bool:
    """True if a Chroma error says the collection does not exist."""
    if error is None:
        return False
    return isinstance(error, NotFoundError) or "does not exist" in str(error)


def flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten chunk metadata for ChromaDB storage.

    ChromaDB only supports flat str/int/float/bool values: lists become
    comma-separated strings, dicts become JSON, None values are dropped.
    """
    flat: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            flat[key] = ",".join(str(item) for item in value)
        elif isinstance(value, dict):
            flat[key] = json.dumps(value, ensure_ascii=False)
        else:
            flat[key] = value
    return flat
