"""
Retrieval component for the document chat backend.

Drives upload ingestion (extract -> chunk -> embed -> store) and builds
query-time context blocks, source lists and system prompts.
"""

__version__ = "1.0.0"

from .config import RetrievalConfig
from .models import (
    ChatContext,
    ChatMessage,
    RetrievalContext,
    Source,
    UploadResult,
)
from .prompts import GENERIC_SYSTEM_PROMPT, build_system_prompt
from .service import RetrievalService, collect_sources, format_context

__all__ = [
    "__version__",
    "RetrievalConfig",
    "RetrievalService",
    "RetrievalContext",
    "ChatContext",
    "ChatMessage",
    "Source",
    "UploadResult",
    "GENERIC_SYSTEM_PROMPT",
    "build_system_prompt",
    "collect_sources",
    "format_context",
]
