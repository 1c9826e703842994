"""
Custom Exceptions for the Retrieval Core.

Exception Hierarchy:
    RetrievalError (base)
    ├── EmbeddingProviderError
    ├── DegenerateVectorError
    └── VectorStoreError
        ├── StoreIOError
        ├── ExternalIndexError
        └── DimensionMismatchError

Usage:
    from vector_store.exceptions import EmbeddingProviderError, VectorStoreError

    try:
        store.add(documents)
    except EmbeddingProviderError as e:
        print(f"Embedding failed: {e}")
    except VectorStoreError as e:
        print(f"Store failed: {e}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class RetrievalError(Exception):
    """
    Base exception for all retrieval-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A retrieval error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# EMBEDDING / RANKING ERRORS
# =============================================================================


class EmbeddingProviderError(RetrievalError):
    """
    Raised when the embedding provider fails for a single or batched call.

    A batch fails as a whole: callers never receive a partially
    embedded batch.

    Attributes:
        status_code: HTTP status code reported by the provider, if any
        original_error: The underlying client exception
    """

    def __init__(
        self,
        message: str = "Embedding provider call failed",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.original_error = original_error
        if status_code:
            message = f"{message} (HTTP {status_code})"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class DegenerateVectorError(RetrievalError):
    """Raised when cosine similarity is requested for a zero-magnitude vector."""

    def __init__(self, vector_id: Optional[str] = None):
        self.vector_id = vector_id
        message = "Cannot compute cosine similarity for a zero-magnitude vector"
        if vector_id:
            message = f"{message} [{vector_id}]"
        super().__init__(message)


# =============================================================================
# STORE ERRORS
# =============================================================================


class VectorStoreError(RetrievalError):
    """Base class for vector store errors."""

    pass


class StoreIOError(VectorStoreError):
    """
    Raised when the local store file cannot be read or written.

    Attributes:
        path: Path to the store file
        original_error: The underlying OS / JSON error
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.path = path
        self.original_error = original_error
        if path:
            message = f"{message} [{path}]"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class ExternalIndexError(VectorStoreError):
    """
    Raised when a call to the external vector database fails.

    Attributes:
        operation: Name of the failed operation (add, query, delete, ...)
        original_error: The underlying client exception
    """

    def __init__(
        self,
        operation: str,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.operation = operation
        self.original_error = original_error
        msg = message or f"External index operation failed: {operation}"
        details = str(original_error) if original_error else None
        super().__init__(msg, details)


class DimensionMismatchError(VectorStoreError):
    """
    Raised when an embedding's length differs from the store's dimensionality.

    Attributes:
        expected: Dimensionality already held by the store
        actual: Dimensionality of the offending vector
    """

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}"
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """
    Check if a client error is potentially recoverable by retrying.

    Works on the raw exceptions raised by the Ollama / Chroma clients
    (httpx transport errors, ``ollama.ResponseError``) as well as on
    our own wrappers.

    Returns True for:
    - Network/connection errors and timeouts
    - Rate limit errors (HTTP 429)
    - Temporary server failures (HTTP 5xx)
    """
    if isinstance(error, RetrievalError):
        original = getattr(error, "original_error", None)
        status = getattr(error, "status_code", None)
        if status is None and original is not None:
            return is_retryable(original)
    else:
        if isinstance(error, (ConnectionError, TimeoutError)):
            return True
        name = type(error).__name__
        if "Connect" in name or "Timeout" in name:
            return True
        status = getattr(error, "status_code", None)

    if isinstance(status, int):
        return status == 429 or status >= 500
    return False
