"""
Local Vector Store - JSON-file-backed linear index

Holds every stored vector in memory and mirrors the whole collection to a
single JSON file:
- Every mutation (add, clear, delete_by_filename) rewrites the file
- Every read (search, stats, count) reloads the file first, so several
  processes sharing the file see each other's writes

File layout: a JSON array of {id, text, embedding, metadata} records,
no header or version tag.

Consistency:
- Writes go to a temp file in the same directory and are moved into
  place with os.replace, so a crash never leaves a half-written file
- Mutations within one process are serialized by a lock and reload the
  file before modifying it
- Two processes mutating the same file at the same moment can still lose
  one writer's update (last write wins)

Usage:
    from vector_store import LocalVectorStore, StoreConfig

    store = LocalVectorStore(StoreConfig(persist_path="vector-store.json"))
    store.add(chunks)
    results = store.search("What is the refund policy?", top_k=5)
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from chunking.models import Chunk

from .embedder import OllamaEmbedder
from .exceptions import DimensionMismatchError, EmbeddingProviderError, StoreIOError
from .models import (
    DeleteResult,
    DocumentPreview,
    SearchResult,
    StoreConfig,
    StoredVector,
    StoreHealth,
    StoreStats,
)
from .similarity import rank

logger = logging.getLogger(__name__)


class LocalVectorStore:
    """
    Brute-force cosine-similarity store persisted to one JSON file.
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        embedder: Optional[OllamaEmbedder] = None,
    ):
        """
        Initialize the store and load the persisted collection.

        Args:
            config: Store configuration. Uses defaults if not provided.
            embedder: Optional pre-created embedder (for testing).
        """
        self.config = config or StoreConfig()
        self.path = Path(self.config.persist_path)
        self._embedder = embedder or OllamaEmbedder(
            model=self.config.embedding_model,
            base_url=self.config.ollama_base_url,
            max_batch_size=self.config.max_batch_size,
            timeout=self.config.request_timeout,
            max_retries=self.config.max_retries,
            retry_backoff_seconds=self.config.retry_backoff_seconds,
        )
        self._lock = threading.RLock()

        try:
            self._vectors = self._read_file()
        except StoreIOError as e:
            logger.error("Starting with an empty vector store: %s", e)
            self._vectors = []
        logger.info("Loaded %d documents from %s", len(self._vectors), self.path)

    @property
    def embedder(self) -> OllamaEmbedder:
        """Access the underlying embedder."""
        return self._embedder

    # -------------------------------------------------------------------------
    # Store operations
    # -------------------------------------------------------------------------

    def add(self, documents: Sequence[Chunk]) -> int:
        """
        Embed documents and persist them.

        All texts are embedded before anything is written, so a failed
        embedding call leaves the store untouched.

        Args:
            documents: Chunks to store.

        Returns:
            Number of documents stored.

        Raises:
            EmbeddingProviderError: If embedding fails.
            DimensionMismatchError: If the embeddings do not match the
                dimensionality already held by the store.
            StoreIOError: If the file cannot be written.
        """
        if not documents:
            return 0

        embeddings = self._embedder.embed_batch([doc.text for doc in documents])
        if len(embeddings) != len(documents):
            raise EmbeddingProviderError(
                f"Expected {len(documents)} embeddings, got {len(embeddings)}"
            )

        new_vectors = [
            StoredVector(
                id=doc.id,
                text=doc.text,
                embedding=embedding,
                metadata=dict(doc.metadata),
            )
            for doc, embedding in zip(documents, embeddings)
        ]

        with self._lock:
            self._reload()
            expected = self._dimension()
            if expected is None:
                expected = len(new_vectors[0].embedding)
            for vector in new_vectors:
                if len(vector.embedding) != expected:
                    raise DimensionMismatchError(expected, len(vector.embedding))

            self._commit(self._vectors + new_vectors)
            total = len(self._vectors)

        logger.info("Added %d documents. Total: %d", len(new_vectors), total)
        return len(new_vectors)

    def search(self, query: str, top_k: int = 5) -> list[SearchResult]:
        """
        Rank every stored vector against the query embedding.

        Args:
            query: The search query text.
            top_k: Number of results to return.

        Returns:
            Up to top_k results by ascending distance; [] if the store is empty.
        """
        with self._lock:
            self._reload()
            snapshot = list(self._vectors)

        if not snapshot:
            logger.info("Vector store is empty, nothing to search")
            return []

        query_embedding = self._embedder.embed(query)
        ranked = rank(query_embedding, snapshot, top_k)

        logger.info("Returning %d of %d documents", len(ranked), len(snapshot))
        return [
            SearchResult(
                id=vector.id,
                text=vector.text,
                metadata=vector.metadata,
                distance=distance,
            )
            for vector, distance in ranked
        ]

    def stats(self) -> StoreStats:
        """Document count plus a short preview of every stored chunk."""
        with self._lock:
            self._reload()
            snapshot = list(self._vectors)

        return StoreStats(
            document_count=len(snapshot),
            documents=[
                DocumentPreview.from_text(vector.id, vector.text, vector.metadata)
                for vector in snapshot
            ],
        )

    def clear(self) -> None:
        """Remove every stored vector. Safe to call on an empty store."""
        with self._lock:
            self._commit([])
        logger.info("Cleared vector store %s", self.path)

    def delete_by_filename(self, filename: str) -> DeleteResult:
        """
        Delete all chunks whose metadata.filename equals `filename`.

        Returns:
            DeleteResult with the number of removed chunks (0 if none matched).
        """
        with self._lock:
            self._reload()
            kept = [
                vector for vector in self._vectors
                if vector.metadata.get("filename") != filename
            ]
            deleted = len(self._vectors) - len(kept)
            if deleted:
                self._commit(kept)

        logger.info("Deleted %d chunks for '%s'", deleted, filename)
        return DeleteResult(deleted_count=deleted)

    def count(self) -> int:
        """Return the total number of stored chunks."""
        with self._lock:
            self._reload()
            return len(self._vectors)

    def health_check(self) -> StoreHealth:
        """
        Check that the JSON file is readable and the embedder is usable.

        Unlike the read operations, an unreadable file is reported here
        instead of falling back to the in-memory copy.
        """
        embedder_health = self._embedder.health_check()
        with self._lock:
            try:
                vectors = self._read_file()
            except StoreIOError as e:
                logger.warning("Vector store health check failed: %s", e)
                return StoreHealth(
                    backend="local",
                    healthy=False,
                    document_count=len(self._vectors),
                    error=str(e),
                    embedder=embedder_health,
                )

        return StoreHealth(
            backend="local",
            healthy=embedder_health.available,
            document_count=len(vectors),
            error=embedder_health.error,
            embedder=embedder_health,
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _dimension(self) -> Optional[int]:
        if not self._vectors:
            return None
        return len(self._vectors[0].embedding)

    def _reload(self) -> None:
        """Replace the in-memory collection with the file contents."""
        try:
            self._vectors = self._read_file()
        except StoreIOError as e:
            logger.warning(
                "Reload failed, keeping %d in-memory documents: %s",
                len(self._vectors), e,
            )

    def _read_file(self) -> list[StoredVector]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreIOError("Cannot read vector store", str(self.path), e) from e

        if not isinstance(raw, list):
            raise StoreIOError("Vector store file must hold a JSON array", str(self.path))
        try:
            return [StoredVector.model_validate(record) for record in raw]
        except ValidationError as e:
            raise StoreIOError("Vector store file holds invalid records", str(self.path), e) from e

    def _commit(self, vectors: list[StoredVector]) -> None:
        """
        Write `vectors` to disk, then adopt them in memory.

        The in-memory collection is only replaced after the file was
        written, so a failed write leaves memory and disk in agreement.
        """
        payload = [vector.model_dump() for vector in vectors]
        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error("Error saving vector store to %s: %s", self.path, e)
            raise StoreIOError("Cannot write vector store", str(self.path), e) from e

        self._vectors = vectors
        logger.info("Saved %d documents to disk", len(vectors))
