"""
Ingestion job and outcome models.

An IngestionJob is the unit of work handed to the worker pool: everything a
worker needs to extract, chunk, embed and store one document without going
back to the request that created it.

Dependencies: pydantic
System role: Message passed from the API layer to ingestion workers
"""

import uuid

from pydantic import BaseModel, Field

from lectern.boundary.db.models.document_model import DocumentModel, DocumentStatus


class IngestionJob(BaseModel):
    """Work item for one document."""

    document_id: uuid.UUID
    owner_id: str
    subject_id: str | None = None
    topic_id: str | None = None
    session_id: str | None = None
    file_path: str = Field(description="Stored upload to extract text from")
    file_name: str = Field(description="Original filename, used for type detection and metadata")

    @classmethod
    def from_document(cls, document: DocumentModel) -> "IngestionJob":
        """
        Build a job from a persisted document record.

        Args:
            document: Record carrying ownership, scope and stored file path

        Returns:
            IngestionJob: Job for the record

        Raises:
            ValueError: If the record has no stored file
        """
        if not document.file_path:
            raise ValueError(f"Document {document.id} has no stored file to ingest")
        return cls(
            document_id=document.id,
            owner_id=document.owner_id,
            subject_id=document.subject_id,
            topic_id=document.topic_id,
            session_id=document.session_id,
            file_path=document.file_path,
            file_name=document.name,
        )


class IngestionOutcome(BaseModel):
    """Terminal result of running one job."""

    document_id: uuid.UUID
    status: DocumentStatus
    chunk_count: int = 0
    processing_time_ms: float = 0.0
    error: str | None = None
