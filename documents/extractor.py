"""
Text extraction for uploaded documents.

Turns raw upload bytes into plain text plus document metadata:
- .pdf via PyMuPDF: text spans of a page joined by spaces, pages by newlines
- .docx via python-docx: paragraphs joined by newlines
- .txt: UTF-8 decode

Any other extension raises UnsupportedFileTypeError.
"""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from pathlib import PurePath

import docx
import fitz  # PyMuPDF

from .exceptions import DocumentReadError, UnsupportedFileTypeError
from .models import ExtractedDocument

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ("pdf", "docx", "txt")


def file_type_of(filename: str) -> str:
    """Lower-case extension without the dot ('' if there is none)."""
    return PurePath(filename).suffix.lower().lstrip(".")


def extract_document(filename: str, data: bytes) -> ExtractedDocument:
    """
    Extract text and metadata from an uploaded file.

    Args:
        filename: Declared file name; its extension selects the parser.
        data: Raw file bytes.

    Returns:
        ExtractedDocument with stripped text and
        {filename, fileType, size, uploadedAt} metadata.
    """
    file_type = file_type_of(filename)
    if file_type not in SUPPORTED_TYPES:
        raise UnsupportedFileTypeError(file_type)

    if file_type == "pdf":
        text = _extract_pdf(filename, data)
    elif file_type == "docx":
        text = _extract_docx(filename, data)
    else:
        text = _extract_txt(filename, data)

    logger.info("Extracted %d characters from %s", len(text), filename)
    return ExtractedDocument(
        text=text.strip(),
        metadata={
            "filename": filename,
            "fileType": file_type,
            "size": len(data),
            "uploadedAt": datetime.now(timezone.utc).isoformat(),
        },
    )


def _extract_pdf(filename: str, data: bytes) -> str:
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = []
            for page in doc:
                spans = []
                for block in page.get_text("dict")["blocks"]:
                    for line in block.get("lines", []):
                        for span in line.get("spans", []):
                            if span["text"].strip():
                                spans.append(span["text"])
                pages.append(" ".join(spans))
    except (RuntimeError, ValueError) as e:  # fitz.FileDataError is a RuntimeError
        raise DocumentReadError(filename, e) from e
    return "\n".join(pages)


def _extract_docx(filename: str, data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        raise DocumentReadError(filename, e) from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _extract_txt(filename: str, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentReadError(filename, e) from e
