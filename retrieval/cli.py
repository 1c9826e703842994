#!/usr/bin/env python3
"""
Vector store command line - ingest files, search and manage the store

Prerequisites:
    1. Ollama is running: ollama serve
    2. Embedding model is pulled: ollama pull nomic-embed-text

Usage:
    python -m retrieval.cli ingest handbook.pdf notes.txt
    python -m retrieval.cli search "How many vacation days do I get?" -k 5
    python -m retrieval.cli stats
    python -m retrieval.cli delete --filename handbook.pdf
    python -m retrieval.cli delete            # clears the whole store
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from logging_config import setup_logging

from .config import RetrievalConfig
from .service import RetrievalService


def ingest(service: RetrievalService, paths: list[str]) -> int:
    """Ingest files and print one line per file."""
    files = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            print(f"ERROR: file not found: {path}")
            return 1
        files.append((path.name, path.read_bytes()))

    failures = 0
    for result in service.ingest_files(files):
        if result.success:
            print(f"  OK      {result.filename}: {result.chunks} chunks")
        else:
            failures += 1
            print(f"  FAILED  {result.filename}: {result.error}")
    return 1 if failures else 0


def search(service: RetrievalService, query: str, top_k: int) -> int:
    print(f"\n=== Search: \"{query}\" (top {top_k}) ===")
    context = service.retrieve(query, top_k)

    if not context.results:
        print("  No results found.")
        return 0

    for i, result in enumerate(context.results, 1):
        print(f"\n  --- Hit {i} (distance: {result.distance:.4f}) ---")
        print(f"  File:   {result.metadata.get('filename', '?')}")
        print(f"  Chunk:  {result.metadata.get('chunkIndex', '?')}")
        preview = result.text[:150].replace("\n", " ")
        print(f"  Text:   {preview}...")

    print("\n  Sources:")
    for source in context.sources:
        print(f"    - {source.title} ({source.url})")
    return 0


def stats(service: RetrievalService) -> int:
    store_stats = service.stats()
    print("\n=== Store status ===")
    print(f"  Chunks total: {store_stats.document_count}")

    counts: dict[str, int] = {}
    for doc in store_stats.documents:
        filename = doc.metadata.get("filename", "?")
        counts[filename] = counts.get(filename, 0) + 1
    for filename, count in sorted(counts.items()):
        print(f"    - {filename}: {count} chunks")
    return 0


def delete(service: RetrievalService, filename: str | None) -> int:
    if filename:
        result = service.delete_by_filename(filename)
        print(f"Deleted {result.deleted_count} chunks of {filename}")
    else:
        service.clear()
        print("Vector store cleared")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Document chat vector store - ingest, search and manage",
    )
    parser.add_argument(
        "--backend",
        choices=["local", "chroma"],
        default=None,
        help="Store backend (default: RAG_STORE_BACKEND or 'local')",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    ingest_parser = sub.add_parser("ingest", help="Extract, chunk and embed files")
    ingest_parser.add_argument("files", nargs="+", help="PDF, DOCX or TXT files")

    search_parser = sub.add_parser("search", help="Semantic search")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--top-k", "-k", type=int, default=5, help="Number of results (default: 5)")

    sub.add_parser("stats", help="Show stored chunks per file")

    delete_parser = sub.add_parser("delete", help="Delete a file's chunks, or everything")
    delete_parser.add_argument("--filename", default=None, help="File to delete (omit to clear the store)")

    args = parser.parse_args()

    load_dotenv()
    setup_logging()

    config = RetrievalConfig.from_env()
    if args.backend:
        config.store = config.store.model_copy(update={"backend": args.backend})
    service = RetrievalService(config)

    if args.command == "ingest":
        code = ingest(service, args.files)
    elif args.command == "search":
        code = search(service, args.query, args.top_k)
    elif args.command == "stats":
        code = stats(service)
    else:
        code = delete(service, args.filename)
    sys.exit(code)


if __name__ == "__main__":
    main()
