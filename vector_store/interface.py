"""
Capability set shared by the vector store backends.

Both LocalVectorStore and ChromaVectorStore satisfy this protocol
structurally; neither inherits from it.
"""

from typing import Protocol, Sequence, runtime_checkable

from chunking.models import Chunk

from .models import DeleteResult, SearchResult, StoreHealth, StoreStats


@runtime_checkable
class VectorStore(Protocol):
    def add(self, documents: Sequence[Chunk]) -> int:
        """Embed and persist documents; returns the number stored."""
        ...

    def search(self, query: str, top_k: int = 5) -> list[SearchResult]:
        """Top-k chunks by ascending cosine distance; [] for an empty store."""
        ...

    def stats(self) -> StoreStats:
        ...

    def clear(self) -> None:
        ...

    def delete_by_filename(self, filename: str) -> DeleteResult:
        ...

    def health_check(self) -> StoreHealth:
        """Reachability of the backing store and its embedder."""
        ...
