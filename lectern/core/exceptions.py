"""
Lectern exception hierarchy.

Every error carries a human-readable `message` and a `details` dict of
identifiers (document, session, field, operation). The API layer maps the
classes to HTTP statuses; the ingestion coordinator stores `message` as the
failed document's content.

Dependencies: None (pure domain layer)
System role: Shared error vocabulary of the service
"""

from typing import Any


def _merge(details: dict[str, Any] | None, **tags: Any) -> dict[str, Any]:
    """Add non-empty tags to a details dict."""
    merged = dict(details or {})
    merged.update({key: value for key, value in tags.items() if value})
    return merged


class LecternError(Exception):
    """Root of all service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} | Details: {self.details}"


# Request errors (400 / 404)


class ValidationError(LecternError):
    """A request value is missing, malformed or unsupported."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, _merge(details, field=field))


class DocumentNotFoundError(LecternError):
    """No document with this id belongs to the requesting owner."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Document not found: {document_id}", _merge(details, document_id=document_id))


class SessionNotFoundError(LecternError):
    """The owner has no documents under this session token."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Session not found: {session_id}", _merge(details, session_id=session_id))


# Ingestion errors (drive a document to the error status)


class DocumentProcessingError(LecternError):
    """A pipeline stage failed for one document."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, _merge(details, document_id=document_id))


class ExtractionError(DocumentProcessingError):
    """
    Text could not be read from the stored file.

    Covers a missing file, an unsupported extension and a parser failure.
    """

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, document_id, _merge(details, file_type=file_type))


class EmbeddingError(DocumentProcessingError):
    """The embedding backend failed or returned vectors of the wrong shape."""


# Infrastructure errors


class VectorStoreError(LecternError):
    """A vector store write, delete or maintenance call failed."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, _merge(details, operation=operation))


class GenerationError(LecternError):
    """The chat model is not configured or failed to answer."""
