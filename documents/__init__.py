"""
Documents Module - Text extraction for uploaded files

Quick Start:
    from documents import extract_document

    extracted = extract_document("handbook.pdf", pdf_bytes)
    print(extracted.metadata["fileType"], len(extracted.text))
"""

__version__ = "1.0.0"

from .exceptions import DocumentError, DocumentReadError, UnsupportedFileTypeError
from .extractor import SUPPORTED_TYPES, extract_document, file_type_of
from .models import ExtractedDocument

__all__ = [
    "__version__",
    "DocumentError",
    "DocumentReadError",
    "UnsupportedFileTypeError",
    "ExtractedDocument",
    "SUPPORTED_TYPES",
    "extract_document",
    "file_type_of",
]
