# docchat/errors.py
"""
Exception hierarchy for DocChat.

Every error raised on purpose by the pipeline derives from DocChatError
and carries the HTTP status the API answers with. Collaborator failures
(Qdrant, embedding and generation APIs) are wrapped so the original
cause survives as a string in the message.
"""

from typing import Any, Dict, Optional


class DocChatError(Exception):
    """Base exception for all DocChat errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


# ============================================================
# CLIENT INPUT ERRORS
# ============================================================

class InvalidRequestError(DocChatError):
    """Missing file, missing or malformed chat message."""

    status_code = 400


class EmptyDocumentError(DocChatError):
    """Extraction succeeded but produced no usable text."""

    status_code = 400

    def __init__(self, file_name: str):
        super().__init__(
            "No text content found in document",
            {"file_name": file_name},
        )


class EmptyQueryError(DocChatError):

    status_code = 400


class FileTooLargeError(DocChatError):

    status_code = 413


# ============================================================
# PROCESSING ERRORS
# ============================================================

class ExtractionError(DocChatError):
    """Raised when a document cannot be converted to text."""

    def __init__(
        self,
        message: str,
        file_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, details)


class StoreError(DocChatError):
    """Raised when the vector store rejects an add or a query."""


class GenerationError(DocChatError):
    """Raised when the answer generator fails."""


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ChunkingConfigError(ValueError):
    """Raised for chunk size / overlap combinations that cannot advance."""
