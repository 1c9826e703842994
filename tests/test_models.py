"""
Tests for the pydantic models, configuration loading and store selection.
"""

import pytest
from pydantic import ValidationError

from chunking.models import ChunkingConfig
from conftest import FakeEmbedder
from retrieval.config import RetrievalConfig
from retrieval.models import ChatContextRequest, ChatMessage, FileDeleteResponse, RetrieveRequest
from vector_store import ChromaVectorStore, LocalVectorStore, create_vector_store
from vector_store.models import (
    DeleteResult,
    DocumentPreview,
    EmbedderHealth,
    SearchResult,
    StoreConfig,
    StoredVector,
    StoreHealth,
    StoreStats,
)


class TestStoreModels:
    def test_store_config_defaults(self):
        config = StoreConfig()
        assert config.backend == "local"
        assert config.persist_path == "./vector-store.json"
        assert config.embedding_model == "nomic-embed-text"
        assert config.max_batch_size == 100

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            StoreConfig(backend="pinecone")

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            StoreConfig(max_batch_size=0)

    def test_stored_vector_dump(self):
        vector = StoredVector(id="a", text="hello", embedding=[0.1, 0.2])
        assert vector.model_dump() == {
            "id": "a", "text": "hello", "embedding": [0.1, 0.2], "metadata": {},
        }

    def test_search_result_defaults(self):
        result = SearchResult(text="hello", distance=0.3)
        assert result.id == ""
        assert result.metadata == {}

    def test_preview_short_text_gets_ellipsis(self):
        preview = DocumentPreview.from_text("a", "short")
        assert preview.text_preview == "short..."

    def test_stats_aliases(self):
        stats = StoreStats(document_count=2)
        assert stats.model_dump(by_alias=True) == {"documentCount": 2, "documents": []}
        assert StoreStats.model_validate({"documentCount": 3}).document_count == 3

    def test_delete_result_alias(self):
        assert DeleteResult(deleted_count=4).model_dump(by_alias=True) == {"deletedCount": 4}

    def test_store_health_aliases(self):
        health = StoreHealth(
            backend="local",
            healthy=True,
            document_count=3,
            embedder=EmbedderHealth(name="nomic-embed-text", reachable=True, available=True),
        )
        payload = health.model_dump(by_alias=True)

        assert payload["documentCount"] == 3
        assert payload["embedder"] == {
            "name": "nomic-embed-text", "reachable": True, "available": True, "error": "",
        }


class TestRequestModels:
    def test_retrieve_request_bounds(self):
        assert RetrieveRequest(query="q").top_k == 5
        with pytest.raises(ValidationError):
            RetrieveRequest(query="q", top_k=0)
        with pytest.raises(ValidationError):
            RetrieveRequest(query="q", top_k=51)

    def test_chat_request_accepts_camel_case(self):
        request = ChatContextRequest.model_validate({"messages": [], "useRAG": False})
        assert request.use_rag is False

    def test_chat_request_accepts_snake_case(self):
        assert ChatContextRequest(use_rag=False).use_rag is False

    def test_chat_message_text(self):
        assert ChatMessage(role="user", content="hi").text() == "hi"
        assert ChatMessage(role="user", content=[{"type": "image_url"}]).text() == ""

    def test_file_delete_response_alias(self):
        response = FileDeleteResponse(success=True, deleted_count=2)
        assert response.model_dump(by_alias=True) == {"success": True, "deletedCount": 2}


class TestRetrievalConfig:
    def test_defaults(self, monkeypatch):
        for name in ("RAG_STORE_BACKEND", "RAG_CHUNK_SIZE", "RAG_CHUNK_OVERLAP", "RAG_TOP_K", "CHROMA_HOST"):
            monkeypatch.delenv(name, raising=False)

        config = RetrievalConfig.from_env()

        assert config.chunking.chunk_size == 1000
        assert config.chunking.overlap == 200
        assert config.top_k == 5
        assert config.store.backend == "local"
        assert config.store.chroma_host is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RAG_STORE_BACKEND", "chroma")
        monkeypatch.setenv("CHROMA_HOST", "chroma.internal")
        monkeypatch.setenv("CHROMA_PORT", "9000")
        monkeypatch.setenv("RAG_EMBED_BATCH_SIZE", "32")
        monkeypatch.setenv("RAG_RETRY_BACKOFF", "0.25")
        monkeypatch.setenv("RAG_CHUNK_SIZE", "500")
        monkeypatch.setenv("RAG_CHUNK_OVERLAP", "50")
        monkeypatch.setenv("RAG_TOP_K", "8")

        config = RetrievalConfig.from_env()

        assert config.store.backend == "chroma"
        assert config.store.chroma_host == "chroma.internal"
        assert config.store.chroma_port == 9000
        assert config.store.max_batch_size == 32
        assert config.store.retry_backoff_seconds == 0.25
        assert config.chunking.chunk_size == 500
        assert config.chunking.overlap == 50
        assert config.top_k == 8

    def test_invalid_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("RAG_STORE_BACKEND", "redis")
        with pytest.raises(ValidationError):
            RetrievalConfig.from_env()

    @pytest.mark.parametrize("name,value", [
        ("RAG_CHUNK_SIZE", "0"),
        ("RAG_CHUNK_OVERLAP", "-1"),
    ])
    def test_invalid_chunking_from_env(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            RetrievalConfig.from_env()

    def test_default_chunking_is_validated_model(self):
        assert RetrievalConfig().chunking == ChunkingConfig()


class TestFactory:
    def test_local_backend(self, tmp_path):
        config = StoreConfig(persist_path=str(tmp_path / "store.json"))
        store = create_vector_store(config, embedder=FakeEmbedder())
        assert isinstance(store, LocalVectorStore)

    def test_chroma_backend(self, tmp_path):
        config = StoreConfig(backend="chroma", persist_directory=str(tmp_path / "chroma"))
        store = create_vector_store(config, embedder=FakeEmbedder())
        assert isinstance(store, ChromaVectorStore)
