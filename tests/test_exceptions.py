"""
Tests for retrieval core and document exceptions.
"""

import ollama
import pytest

from documents import DocumentError, DocumentReadError, UnsupportedFileTypeError
from vector_store import (
    # Base
    RetrievalError,
    # Embedding / ranking errors
    EmbeddingProviderError,
    DegenerateVectorError,
    # Store errors
    VectorStoreError,
    StoreIOError,
    ExternalIndexError,
    DimensionMismatchError,
)
from vector_store.exceptions import is_retryable


class TestRetrievalError:
    """Tests for base RetrievalError."""

    def test_create_simple(self):
        """Test creating error with message only."""
        error = RetrievalError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details is None

    def test_create_with_details(self):
        """Test creating error with details."""
        error = RetrievalError("Error occurred", details="More info here")
        assert "Error occurred" in str(error)
        assert "More info here" in str(error)
        assert error.details == "More info here"


class TestEmbeddingErrors:
    """Tests for embedding and ranking errors."""

    def test_provider_error_with_status(self):
        """Test EmbeddingProviderError carries the HTTP status."""
        error = EmbeddingProviderError("Embedding failed", status_code=503)
        assert error.status_code == 503
        assert "HTTP 503" in str(error)

    def test_provider_error_with_original(self):
        """Test EmbeddingProviderError keeps the client exception."""
        original = ConnectionError("refused")
        error = EmbeddingProviderError("Embedding failed", original_error=original)
        assert error.original_error is original
        assert "refused" in str(error)

    def test_degenerate_vector(self):
        """Test DegenerateVectorError names the vector."""
        error = DegenerateVectorError("chunk-1")
        assert error.vector_id == "chunk-1"
        assert "zero-magnitude" in str(error)
        assert "chunk-1" in str(error)


class TestStoreErrors:
    """Tests for vector store errors."""

    def test_store_io_error(self):
        """Test StoreIOError includes the path."""
        error = StoreIOError("Cannot write vector store", "/data/store.json", OSError("disk full"))
        assert error.path == "/data/store.json"
        assert "/data/store.json" in str(error)
        assert "disk full" in str(error)

    def test_external_index_error_default_message(self):
        """Test ExternalIndexError message falls back to the operation name."""
        error = ExternalIndexError("query")
        assert error.operation == "query"
        assert "query" in str(error)

    def test_dimension_mismatch(self):
        """Test DimensionMismatchError reports both sizes."""
        error = DimensionMismatchError(expected=768, actual=384)
        assert error.expected == 768
        assert error.actual == 384
        assert "768" in str(error)
        assert "384" in str(error)


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize("error_cls", [
        EmbeddingProviderError,
        DegenerateVectorError,
        VectorStoreError,
    ])
    def test_retrieval_errors(self, error_cls):
        """Test that top-level errors inherit from RetrievalError."""
        assert issubclass(error_cls, RetrievalError)

    @pytest.mark.parametrize("error_cls", [
        StoreIOError,
        ExternalIndexError,
        DimensionMismatchError,
    ])
    def test_store_errors(self, error_cls):
        """Test that store errors inherit from VectorStoreError."""
        assert issubclass(error_cls, VectorStoreError)

    def test_catch_by_base_class(self):
        """Test catching specific errors by base class."""
        with pytest.raises(RetrievalError):
            raise DimensionMismatchError(3, 4)

    def test_document_errors(self):
        """Test that document errors share DocumentError."""
        assert issubclass(UnsupportedFileTypeError, DocumentError)
        assert issubclass(DocumentReadError, DocumentError)
        assert not issubclass(DocumentError, RetrievalError)


class TestIsRetryable:
    """Tests for is_retryable utility."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503])
    def test_retryable_status(self, status):
        """Test that rate limits and server errors are retryable."""
        assert is_retryable(EmbeddingProviderError("failed", status_code=status)) is True

    @pytest.mark.parametrize("status", [400, 401, 404, 422])
    def test_client_status_not_retryable(self, status):
        """Test that client errors are not retryable."""
        assert is_retryable(EmbeddingProviderError("failed", status_code=status)) is False

    def test_raw_ollama_errors(self):
        """Test raw client exceptions are classified by status."""
        assert is_retryable(ollama.ResponseError("busy", 503)) is True
        assert is_retryable(ollama.ResponseError("missing", 404)) is False

    def test_connection_errors(self):
        """Test that connection problems and timeouts are retryable."""
        assert is_retryable(ConnectionError("refused")) is True
        assert is_retryable(TimeoutError("slow")) is True

    def test_wrapped_connection_error(self):
        """Test that a wrapper without status looks at its cause."""
        wrapped = ExternalIndexError("query", original_error=ConnectionError("reset"))
        assert is_retryable(wrapped) is True

    def test_non_retryable(self):
        """Test that other errors are not retryable."""
        assert is_retryable(ValueError("bad value")) is False
        assert is_retryable(DimensionMismatchError(3, 4)) is False
        assert is_retryable(StoreIOError("Cannot write vector store")) is False
