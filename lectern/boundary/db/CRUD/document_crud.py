"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with owner-scoped queries, session grouping and ingestion status writes.

Dependencies: sqlalchemy, lectern.boundary.db.models.document_model
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lectern.boundary.db.CRUD.base_crud import BaseCRUD
from lectern.boundary.db.models.document_model import (
    ERROR_CONTENT_PREFIX,
    DocumentModel,
    DocumentStatus,
)

MAX_ERROR_MESSAGE_LENGTH = 2000


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with owner-scoped reads, session aggregation queries
    and the status transitions used by the ingestion pipeline.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner_id: str,
    ) -> DocumentModel | None:
        """
        Retrieve a document only if it belongs to the owner.

        Args:
            session: Async database session
            id: Document UUID
            owner_id: Requesting owner

        Returns:
            DocumentModel if found and owned, None otherwise
        """
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        subject_id: str | None = None,
        topic_id: str | None = None,
        status: DocumentStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        List an owner's documents, newest first, with optional filters.

        Args:
            session: Async database session
            owner_id: Owner whose documents are listed
            subject_id: Only documents in this subject
            topic_id: Only documents in this topic
            status: Only documents in this ingestion state
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of matching DocumentModels
        """
        stmt = select(DocumentModel).where(DocumentModel.owner_id == owner_id)
        if subject_id is not None:
            stmt = stmt.where(DocumentModel.subject_id == subject_id)
        if topic_id is not None:
            stmt = stmt.where(DocumentModel.topic_id == topic_id)
        if status is not None:
            stmt = stmt.where(DocumentModel.status == status)
        stmt = stmt.order_by(DocumentModel.created_at.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_by_status(
        self,
        session: AsyncSession,
        status: DocumentStatus,
    ) -> Sequence[DocumentModel]:
        """List documents of every owner in one ingestion state, oldest first."""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.status == status)
            .order_by(DocumentModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_session(
        self,
        session: AsyncSession,
        owner_id: str,
        session_id: str,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve all documents submitted under one session token.

        Args:
            session: Async database session
            owner_id: Owner of the session
            session_id: Batch token

        Returns:
            Sequence of DocumentModels in submission order
        """
        stmt = (
            select(DocumentModel)
            .where(
                DocumentModel.owner_id == owner_id,
                DocumentModel.session_id == session_id,
            )
            .order_by(DocumentModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def mark_processing(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> DocumentModel | None:
        """Reset a document to PROCESSING and clear previous content."""
        return await self.update_by_id(
            session, id, status=DocumentStatus.PROCESSING, content=None
        )

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        content: str,
    ) -> DocumentModel | None:
        """
        Mark document as successfully processed.

        Args:
            session: Async database session
            id: Document UUID
            content: Full extracted text

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        return await self.update_by_id(
            session, id, status=DocumentStatus.COMPLETED, content=content
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        error_message: str,
    ) -> DocumentModel | None:
        """
        Mark document as failed; the message is stored as the content.

        Args:
            session: Async database session
            id: Document UUID
            error_message: Human-readable error description

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        if len(error_message) > MAX_ERROR_MESSAGE_LENGTH:
            error_message = error_message[: MAX_ERROR_MESSAGE_LENGTH - 3] + "..."
        return await self.update_by_id(
            session,
            id,
            status=DocumentStatus.ERROR,
            content=f"{ERROR_CONTENT_PREFIX}{error_message}",
        )

    async def delete_by_scope(
        self,
        session: AsyncSession,
        owner_id: str,
        scope_id: str,
    ) -> Sequence[DocumentModel]:
        """
        Delete every document of the owner tagged with the scope id.

        A scope id matches either the subject or the topic column.

        Args:
            session: Async database session
            owner_id: Owner of the scope
            scope_id: Subject or topic identifier

        Returns:
            The deleted DocumentModels (for stored-file cleanup)
        """
        condition = (DocumentModel.owner_id == owner_id) & or_(
            DocumentModel.subject_id == scope_id,
            DocumentModel.topic_id == scope_id,
        )
        return await self.delete_where(session, condition)

    async def delete_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
    ) -> Sequence[DocumentModel]:
        """Delete every document of the owner and return the deleted rows."""
        return await self.delete_where(session, DocumentModel.owner_id == owner_id)


document_crud = DocumentCRUD()
