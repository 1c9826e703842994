"""
Retrieval Service - Upload ingestion and query-time context building

Ingestion: extracted text -> chunks -> embeddings -> vector store, one file
at a time; a failing file is reported without stopping its siblings.

Query: embed the question, fetch the top-k chunks and turn them into a
context block plus a deduplicated source list. Retrieval problems never
fail a chat turn: they degrade to "no context" and the generic prompt.
"""

import logging
from typing import Iterable, Optional

from chunking import build_chunks
from documents import DocumentError, extract_document
from vector_store import RetrievalError, VectorStore, create_vector_store
from vector_store.models import DeleteResult, SearchResult, StoreHealth, StoreStats

from .config import RetrievalConfig
from .models import ChatContext, ChatMessage, RetrievalContext, Source, UploadResult
from .prompts import build_system_prompt

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"


class RetrievalService:
    def __init__(
        self,
        config: Optional[RetrievalConfig] = None,
        store: Optional[VectorStore] = None,
    ):
        self.config = config or RetrievalConfig()
        self.store = store or create_vector_store(self.config.store)

    def ingest_document(self, filename: str, data: bytes) -> UploadResult:
        """
        Extract, chunk, embed and store one uploaded file.

        Raises:
            DocumentError: If the file type is unsupported or unreadable.
            RetrievalError: If embedding or persisting fails.
        """
        logger.info("Processing file: %s (%d bytes)", filename, len(data))
        extracted = extract_document(filename, data)

        chunks = build_chunks(
            extracted.text,
            extracted.metadata,
            chunk_size=self.config.chunking.chunk_size,
            overlap=self.config.chunking.overlap,
        )
        logger.info("Created %d chunks for %s", len(chunks), filename)

        self.store.add(chunks)
        return UploadResult(filename=filename, chunks=len(chunks))

    def ingest_files(self, files: Iterable[tuple[str, bytes]]) -> list[UploadResult]:
        """Ingest several files; each failure is logged and reported for that file only."""
        results: list[UploadResult] = []
        for filename, data in files:
            try:
                results.append(self.ingest_document(filename, data))
            except (DocumentError, RetrievalError) as e:
                logger.error("Failed to process %s: %s", filename, e)
                results.append(
                    UploadResult(filename=filename, chunks=0, success=False, error=str(e))
                )
        return results

    def retrieve(self, query: str, top_k: Optional[int] = None) -> RetrievalContext:
        """
        Fetch the chunks closest to the query and format them for the prompt.

        Store and embedding failures are logged and yield an empty context.
        """
        top_k = top_k or self.config.top_k
        try:
            results = self.store.search(query, top_k)
        except (RetrievalError, ValueError) as e:
            logger.warning("Retrieval failed, continuing without context: %s", e)
            results = []

        if results:
            logger.info("Found %d chunks, top distance %.4f", len(results), results[0].distance)
        else:
            logger.info("No documents found for query")

        return RetrievalContext(
            query=query,
            results=results,
            context_text=format_context(results),
            sources=collect_sources(results),
        )

    def prepare_chat(
        self,
        messages: list[ChatMessage],
        use_rag: bool = True,
        top_k: Optional[int] = None,
    ) -> ChatContext:
        """
        Build the system prompt and sources for the next completion call.

        The last user message is the retrieval query. Without RAG, or when
        nothing is retrieved, the generic prompt is used.
        """
        query = last_user_query(messages)
        context_text = ""
        sources: list[Source] = []

        if use_rag and query.strip():
            retrieved = self.retrieve(query, top_k)
            context_text = retrieved.context_text
            sources = retrieved.sources

        return ChatContext(
            query=query,
            system_prompt=build_system_prompt(context_text),
            context_text=context_text,
            sources=sources,
        )

    def stats(self) -> StoreStats:
        return self.store.stats()

    def delete_by_filename(self, filename: str) -> DeleteResult:
        return self.store.delete_by_filename(filename)

    def clear(self) -> None:
        self.store.clear()

    def health(self) -> StoreHealth:
        """Store and embedder health; never raises for an unhealthy store."""
        health = self.store.health_check()
        if not health.healthy:
            logger.warning("Vector store unhealthy: %s", health.error)
        return health


def last_user_query(messages: list[ChatMessage]) -> str:
    for message in reversed(messages):
        if message.role == "user":
            return message.text()
    return ""


def format_context(results: list[SearchResult]) -> str:
    return CONTEXT_SEPARATOR.join(result.text.strip() for result in results)


def collect_sources(results: list[SearchResult]) -> list[Source]:
    """
    One source per filename, in first-seen rank order.

    The URL anchors the rank of the first chunk from that file; results
    without a filename get a positional title.
    """
    sources: dict[str, Source] = {}
    for idx, result in enumerate(results):
        filename = result.metadata.get("filename") or f"Source {idx + 1}"
        if filename not in sources:
            sources[filename] = Source(url=f"#doc-{idx}", title=filename)
    return list(sources.values())
