"""
Custom Exceptions for Document Extraction.

Exception Hierarchy:
    DocumentError (base)
    ├── UnsupportedFileTypeError
    └── DocumentReadError
"""

from __future__ import annotations

from typing import Optional


class DocumentError(Exception):
    """
    Base exception for all extraction-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A document extraction error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class UnsupportedFileTypeError(DocumentError):
    """
    Raised when an uploaded file has an extension we cannot extract.

    Attributes:
        extension: The rejected extension (without dot, lower-case)
    """

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file type: {extension or '(none)'}")


class DocumentReadError(DocumentError):
    """
    Raised when a supported file cannot be decoded.

    Attributes:
        filename: Name of the uploaded file
        original_error: The underlying parser error
    """

    def __init__(self, filename: str, original_error: Optional[Exception] = None):
        self.filename = filename
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(f"Cannot read document: {filename}", details)
