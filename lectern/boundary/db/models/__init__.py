"""ORM models."""

from lectern.boundary.db.models.document_model import (
    ERROR_CONTENT_PREFIX,
    DocumentModel,
    DocumentStatus,
    DocumentType,
)

__all__ = ["ERROR_CONTENT_PREFIX", "DocumentModel", "DocumentStatus", "DocumentType"]
