"""
Document domain models and schemas.

Request/response schemas for document operations.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lectern.boundary.db.models.document_model import DocumentStatus, DocumentType


class DocumentResponse(BaseModel):
    """Document metadata and ingestion status."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    document_type: DocumentType
    file_type: str | None = None
    size: int | None = None
    source: str | None = None
    description: str | None = None
    status: DocumentStatus
    subject_id: str | None = None
    topic_id: str | None = None
    session_id: str
    created_at: datetime
    updated_at: datetime


class DocumentDetailResponse(DocumentResponse):
    """Document with its extracted content (or error message)."""

    content: str | None = None


class DocumentListResponse(BaseModel):
    """Document list response."""

    documents: list[DocumentResponse]
    total: int


class IngestionAcceptedResponse(BaseModel):
    """Returned when files are accepted for background ingestion."""

    document_ids: list[uuid.UUID]
    session_id: str
    status: DocumentStatus = DocumentStatus.PROCESSING


class CreateTextDocumentRequest(BaseModel):
    """Direct content submission; no file, no background processing."""

    type: str = Field(description="Document category: pdf, image, docs, video, audio or text")
    source: str = Field(min_length=1, max_length=1024, description="Source label, filename or URL")
    content: str | None = Field(default=None, description="Raw text content")
    name: str | None = Field(default=None, max_length=255, description="Display name, defaults to source")
    subject_id: str | None = Field(default=None, max_length=64)
    topic_id: str | None = Field(default=None, max_length=64)
    session_id: str | None = Field(default=None, max_length=128)
    description: str | None = Field(default=None, max_length=2048)


class TextDocumentCreatedResponse(BaseModel):
    """Result of a direct content submission."""

    document_id: uuid.UUID
    status: DocumentStatus
    session_id: str


class ReingestResponse(BaseModel):
    """Returned when a document is queued for re-ingestion."""

    document_id: uuid.UUID
    status: DocumentStatus = DocumentStatus.PROCESSING


class DeletionResponse(BaseModel):
    """Result of a cascading delete."""

    deleted_documents: int
    scope_id: str | None = None


class VectorIndexResetResponse(BaseModel):
    """Result of an index rebuild."""

    success: bool
    message: str
