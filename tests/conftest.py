"""
Pytest fixtures for the retrieval core tests.
"""

import string
import uuid

import pytest

import chromadb

from chunking.models import Chunk
from vector_store.chroma_store import ChromaVectorStore
from vector_store.exceptions import EmbeddingProviderError
from vector_store.local_store import LocalVectorStore
from vector_store.models import EmbedderHealth, StoreConfig


_ALPHABET = string.ascii_lowercase + string.digits


class FakeEmbedder:
    """
    Deterministic stand-in for OllamaEmbedder.

    Embeds a text as its character histogram over a-z and 0-9 plus a small
    bias component, so identical texts get identical vectors and texts
    with different letters point in different directions.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.embed_calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    @staticmethod
    def vector_for(text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(ch)) for ch in _ALPHABET] + [0.01]

    def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")
        self.embed_calls.append(text)
        if self.fail:
            raise EmbeddingProviderError("provider down")
        return self.vector_for(text)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        if self.fail:
            raise EmbeddingProviderError("provider down")
        return [self.vector_for(text) for text in texts]

    def health_check(self) -> EmbedderHealth:
        if self.fail:
            return EmbedderHealth(name="fake", error="provider down")
        return EmbedderHealth(name="fake", reachable=True, available=True)


def make_chunk(text: str, filename: str = "notes.txt", index: int = 0, total: int = 1) -> Chunk:
    return Chunk(
        id=f"{filename}-1700000000000-{index}",
        text=text,
        metadata={
            "filename": filename,
            "fileType": filename.rsplit(".", 1)[-1],
            "size": len(text),
            "uploadedAt": "2024-01-01T00:00:00+00:00",
            "chunkIndex": index,
            "totalChunks": total,
        },
    )


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "vector-store.json"


@pytest.fixture
def local_store(store_path, fake_embedder):
    """LocalVectorStore on a temp file with the fake embedder."""
    config = StoreConfig(persist_path=str(store_path))
    return LocalVectorStore(config=config, embedder=fake_embedder)


@pytest.fixture
def chroma_store(fake_embedder):
    """ChromaVectorStore on an in-memory client with a unique collection."""
    client = chromadb.EphemeralClient()
    config = StoreConfig(
        backend="chroma",
        collection_name=f"test_{uuid.uuid4().hex[:8]}",
        max_retries=0,
    )
    return ChromaVectorStore(config=config, embedder=fake_embedder, chroma_client=client)


@pytest.fixture
def corpus():
    """Three files with distinct vocabularies."""
    return [
        make_chunk("The cat sat on the mat with another cat.", "cats.txt", 0, 2),
        make_chunk("Cats like milk and warm blankets.", "cats.txt", 1, 2),
        make_chunk("Quarterly revenue grew by 12 percent in 2023.", "finance.pdf", 0, 1),
        make_chunk("Bring your own keyboard: zxqv jjj kkk.", "misc.docx", 0, 1),
    ]
