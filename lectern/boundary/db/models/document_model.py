"""
Document ORM model.

Represents a submitted study document (uploaded file or raw text) with its
scope, ingestion status and extracted content.

Dependencies: sqlalchemy, lectern.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lectern.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document ingestion lifecycle states.

    PROCESSING: File accepted, background extraction/embedding in progress
    COMPLETED: Text extracted and vectors stored, ready for retrieval
    ERROR: Processing failed; content holds "Error processing: <message>"
    READY: Created without a file or content (metadata-only record)
    """

    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"
    READY = "ready"


class DocumentType(str, enum.Enum):
    """Coarse document category derived from the file extension."""

    PDF = "pdf"
    IMAGE = "image"
    DOCS = "docs"
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"


ERROR_CONTENT_PREFIX = "Error processing: "


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion state.

    Lifecycle: Upload (PROCESSING) → worker pipeline → COMPLETED or ERROR.
    Direct text submissions are created COMPLETED (or READY without content).

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Opaque owner identifier supplied by the caller
        subject_id: Optional coarse scope id
        topic_id: Optional fine scope id
        session_id: Batch token shared by documents uploaded together
        name: Original filename or caller-supplied source label
        document_type: Coarse category (pdf, image, docs, ...)
        file_type: Lower-cased file extension without the dot
        size: Uploaded size in bytes
        source: Original source reference (filename, URL, label)
        description: Free-text description
        file_path: Stored upload path, used for re-ingestion
        status: Current ingestion state
        content: Extracted text, or the error message on failure
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_owner_session", "owner_id", "session_id"),
        Index("ix_documents_owner_subject", "owner_id", "subject_id"),
        Index("ix_documents_owner_topic", "owner_id", "topic_id"),
    )

    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    topic_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False, doc="Original filename")
    document_type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, native_enum=False),
        nullable=False,
        default=DocumentType.TEXT,
    )
    file_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    description: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    file_path: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        doc="Stored upload path for raw document",
    )

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PROCESSING,
    )
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
