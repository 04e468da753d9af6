"""
Upload session schemas.

Dependencies: pydantic
System role: Session progress API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lectern.boundary.db.models.document_model import DocumentStatus, DocumentType


class DocumentSummary(BaseModel):
    """Per-document line of a session status."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    document_type: DocumentType
    status: DocumentStatus
    created_at: datetime


class SessionStatus(BaseModel):
    """Aggregate ingestion progress of one upload batch."""

    session_id: str
    completed: int = Field(ge=0)
    processing: int = Field(ge=0)
    errored: int = Field(ge=0)
    ready: int = Field(ge=0)
    total: int = Field(ge=0)
    is_complete: bool = Field(description="True when no document is still processing")
    documents: list[DocumentSummary] = Field(default_factory=list)
