"""
Ollama Embedder - Batched embedding generation via the Ollama API

Wraps the Ollama Python client to generate text embeddings.

Design:
- Thin wrapper around ollama.Client.embed()
- embed_batch() splits the input into slices of at most max_batch_size
  texts, issues one provider call per slice and concatenates the results
  in input order
- A batch is all-or-nothing: the first failing slice aborts the whole
  call with EmbeddingProviderError and no vectors are returned
- Transient failures (connection errors, 429, 5xx) are retried; embedding
  the same texts again is idempotent

Usage:
    from vector_store.embedder import OllamaEmbedder

    embedder = OllamaEmbedder(model="nomic-embed-text", max_batch_size=100)
    vector = embedder.embed("A sample text")
    vectors = embedder.embed_batch(["Text 1", "Text 2"])
"""

import logging
import time
from typing import Optional

import ollama

from .exceptions import EmbeddingProviderError, is_retryable
from .models import EmbedderHealth

logger = logging.getLogger(__name__)


class OllamaEmbedder:
    """
    Generates text embeddings using an Ollama model.

    The embedder connects to a running Ollama instance and uses a specified
    embedding model (e.g., nomic-embed-text) to convert text into dense
    vector representations.
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        max_batch_size: int = 100,
        timeout: float = 60.0,
        max_retries: int = 2,
        retry_backoff_seconds: float = 0.5,
    ):
        """
        Initialize the embedder.

        Args:
            model: Name of the Ollama embedding model.
            base_url: Base URL of the Ollama API.
            max_batch_size: Provider ceiling for texts per call.
            timeout: Network timeout in seconds for each call.
            max_retries: Retries for transient provider failures.
            retry_backoff_seconds: Linear back-off step between retries.
        """
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        self.model = model
        self.base_url = base_url
        self.max_batch_size = max_batch_size
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self._client = ollama.Client(host=base_url, timeout=timeout)
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        """Embedding dimensionality (known after the first successful call)."""
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text (not batched).

        Args:
            text: The text to embed.

        Returns:
            Embedding vector as a list of floats.

        Raises:
            ValueError: If text is empty.
            EmbeddingProviderError: If the provider call fails.
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")
        embeddings = self._call_provider([text])
        if len(embeddings) != 1:
            raise EmbeddingProviderError(
                f"Expected 1 embedding from model '{self.model}', got {len(embeddings)}"
            )
        self._dimensions = len(embeddings[0])
        return embeddings[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for many texts in bounded-size batches.

        Args:
            texts: Texts to embed, in order.

        Returns:
            One embedding per input text, same order as the input.

        Raises:
            EmbeddingProviderError: If any slice fails, a slice returns the
                wrong number of vectors, or dimensionality is not uniform.
        """
        if not texts:
            return []

        slices = [
            texts[i:i + self.max_batch_size]
            for i in range(0, len(texts), self.max_batch_size)
        ]
        total = len(slices)

        collected: list[list[float]] = []
        for number, batch in enumerate(slices, 1):
            logger.info("Embedding batch %d/%d (%d texts)", number, total, len(batch))
            embeddings = self._call_provider(batch)
            if len(embeddings) != len(batch):
                raise EmbeddingProviderError(
                    f"Batch {number}/{total} returned {len(embeddings)} embeddings "
                    f"for {len(batch)} texts"
                )
            collected.extend(embeddings)

        dimension = len(collected[0])
        if any(len(vector) != dimension for vector in collected):
            raise EmbeddingProviderError(
                f"Model '{self.model}' returned embeddings of non-uniform dimensionality"
            )

        self._dimensions = dimension
        return collected

    def health_check(self) -> EmbedderHealth:
        """Report whether Ollama answers and has the embedding model pulled."""
        health = EmbedderHealth(name=self.model)
        try:
            listing = self._client.list()
        except Exception as e:
            logger.warning("Ollama at %s is unreachable: %s", self.base_url, e)
            health.error = f"Ollama unreachable at {self.base_url}: {e}"
            return health

        health.reachable = True
        pulled = {entry.model for entry in listing.models if entry.model}
        # Ollama reports tagged names ("nomic-embed-text:latest")
        health.available = self.model in pulled or f"{self.model}:latest" in pulled
        if not health.available:
            health.error = (
                f"Embedding model '{self.model}' is not pulled "
                f"(run: ollama pull {self.model})"
            )
        return health

    def _call_provider(self, texts: list[str]) -> list[list[float]]:
        """One provider call with retries for transient failures."""
        attempt = 0
        while True:
            try:
                response = self._client.embed(model=self.model, input=texts)
                return [list(vector) for vector in response["embeddings"]]
            except Exception as e:
                if attempt < self.max_retries and is_retryable(e):
                    attempt += 1
                    delay = self.retry_backoff_seconds * attempt
                    logger.warning(
                        "Embedding call failed (%s), retry %d/%d in %.1fs",
                        e, attempt, self.max_retries, delay,
                    )
                    time.sleep(delay)
                    continue
                raise self._wrap_error(e) from e

    def _wrap_error(self, error: Exception) -> EmbeddingProviderError:
        if isinstance(error, ollama.ResponseError):
            return EmbeddingProviderError(
                f"Ollama embedding failed for model '{self.model}'",
                status_code=error.status_code,
                original_error=error,
            )
        if "Connect" in type(error).__name__ or "refused" in str(error).lower():
            return EmbeddingProviderError(
                f"Cannot connect to Ollama at {self.base_url}. "
                f"Is Ollama running? Start it with: ollama serve",
                original_error=error,
            )
        return EmbeddingProviderError(
            f"Embedding generation failed for model '{self.model}'",
            original_error=error,
        )
