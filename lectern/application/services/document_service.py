"""
Document service orchestrator.

Entry point for document ingestion: stores uploads, creates records in
PROCESSING and hands jobs to the worker pool. Also serves status reads,
listing, re-ingestion, deletion and session progress.

Dependencies: lectern.boundary.db, lectern.boundary.vdb, lectern.boundary.storage, lectern.core
System role: Document management orchestration
"""

import logging
import time
from dataclasses import dataclass
from typing import BinaryIO, Sequence
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from lectern.boundary.db.CRUD.document_crud import document_crud
from lectern.boundary.db.models.document_model import DocumentModel, DocumentStatus, DocumentType
from lectern.boundary.storage.upload_store import LocalUploadStore
from lectern.boundary.vdb.base_store import BaseVectorStore
from lectern.core.document_processing.file_types import detect_document_type, file_extension
from lectern.core.document_processing.models import IngestionJob
from lectern.core.document_processing.worker_pool import IngestionWorkerPool
from lectern.core.exceptions import DocumentNotFoundError, ValidationError
from lectern.core.session.session_tracker import SessionTracker
from lectern.models.document import CreateTextDocumentRequest
from lectern.models.session import SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """An uploaded file as received by the HTTP layer."""

    file_name: str
    stream: BinaryIO


@dataclass
class IngestionAccepted:
    """Documents created for a batch and the session token grouping them."""

    document_ids: list[UUID]
    session_id: str


def new_session_id() -> str:
    """Default session token for uploads that do not supply one."""
    return f"session-{int(time.time() * 1000)}"


class DocumentService:
    """
    Document service orchestrator.

    Request-scoped: holds the request's DB session and commits at the end of
    each write operation. Long-running work goes to the worker pool.
    """

    def __init__(
        self,
        db: AsyncSession,
        vector_store: BaseVectorStore,
        worker_pool: IngestionWorkerPool,
        upload_store: LocalUploadStore,
        session_tracker: SessionTracker | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document records
            vector_store: Vector store for cascade deletes
            worker_pool: Background ingestion pool
            upload_store: Storage for raw uploads
            session_tracker: Session aggregation (created if None)
        """
        self.db = db
        self._vector_store = vector_store
        self._worker_pool = worker_pool
        self._upload_store = upload_store
        self._session_tracker = session_tracker or SessionTracker()

    async def ingest_files(
        self,
        owner_id: str,
        files: Sequence[IncomingFile],
        subject_id: str | None = None,
        topic_id: str | None = None,
        session_id: str | None = None,
        description: str | None = None,
    ) -> IngestionAccepted:
        """
        Accept files for background ingestion.

        Steps:
        1. Store each upload on disk
        2. Create one PROCESSING record per file and commit
        3. Submit one job per record to the worker pool
        4. Return immediately with the document ids and session token

        Args:
            owner_id: Owner of the documents
            files: Uploaded files
            subject_id: Optional subject scope
            topic_id: Optional topic scope
            session_id: Batch token (generated if None)
            description: Optional description applied to every file

        Returns:
            IngestionAccepted: New document ids and the session token

        Raises:
            ValidationError: If no files were given or a file has no name
        """
        if not files:
            raise ValidationError("No file or content provided", field="files")
        for incoming in files:
            if not incoming.file_name:
                raise ValidationError("Uploaded file has no filename", field="files")

        session_id = session_id or new_session_id()
        stored_paths: list[str] = []
        documents: list[DocumentModel] = []

        try:
            for incoming in files:
                stored = await run_in_threadpool(
                    self._upload_store.save, incoming.file_name, incoming.stream
                )
                stored_paths.append(stored.path)
                document = await document_crud.create(
                    self.db,
                    owner_id=owner_id,
                    subject_id=subject_id,
                    topic_id=topic_id,
                    session_id=session_id,
                    name=incoming.file_name,
                    document_type=detect_document_type(incoming.file_name),
                    file_type=file_extension(incoming.file_name) or None,
                    size=stored.size,
                    source=incoming.file_name,
                    description=description,
                    file_path=stored.path,
                    status=DocumentStatus.PROCESSING,
                )
                documents.append(document)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            for path in stored_paths:
                self._upload_store.delete(path)
            raise

        for document in documents:
            self._worker_pool.submit(IngestionJob.from_document(document))

        logger.info(
            f"{__name__}:ingest_files - Accepted {len(documents)} files",
            extra={"owner_id": owner_id, "session_id": session_id},
        )
        return IngestionAccepted(
            document_ids=[document.id for document in documents],
            session_id=session_id,
        )

    async def create_text_document(
        self,
        owner_id: str,
        request: CreateTextDocumentRequest,
    ) -> DocumentModel:
        """
        Create a document from direct content, synchronously.

        The record is COMPLETED when content is supplied, READY otherwise.

        Raises:
            ValidationError: If the type is not a known document category
        """
        try:
            document_type = DocumentType(request.type.strip().lower())
        except ValueError:
            allowed = ", ".join(t.value for t in DocumentType)
            raise ValidationError(
                f"Invalid type '{request.type}'. Expected one of: {allowed}",
                field="type",
            )

        status = DocumentStatus.COMPLETED if request.content else DocumentStatus.READY
        document = await document_crud.create(
            self.db,
            owner_id=owner_id,
            subject_id=request.subject_id,
            topic_id=request.topic_id,
            session_id=request.session_id or new_session_id(),
            name=request.name or request.source,
            document_type=document_type,
            source=request.source,
            description=request.description,
            size=len(request.content.encode("utf-8")) if request.content else None,
            content=request.content,
            status=status,
        )
        await self.db.commit()
        return document

    async def get_document(self, owner_id: str, document_id: UUID) -> DocumentModel:
        """
        Read one of the owner's documents.

        Raises:
            DocumentNotFoundError: If it does not exist or belongs to another owner
        """
        document = await document_crud.get_for_owner(self.db, document_id, owner_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def list_documents(
        self,
        owner_id: str,
        subject_id: str | None = None,
        topic_id: str | None = None,
        status: DocumentStatus | None = None,
    ) -> Sequence[DocumentModel]:
        return await document_crud.list_for_owner(
            self.db,
            owner_id,
            subject_id=subject_id,
            topic_id=topic_id,
            status=status,
        )

    async def reingest_document(self, owner_id: str, document_id: UUID) -> DocumentModel:
        """
        Queue a document for another ingestion run.

        Raises:
            DocumentNotFoundError: If the document does not exist for the owner
            ValidationError: If there is no stored file to ingest from
        """
        document = await self.get_document(owner_id, document_id)
        if not self._upload_store.exists(document.file_path):
            raise ValidationError(
                "Document has no stored file to re-ingest",
                details={"document_id": str(document_id)},
            )

        document = await document_crud.mark_processing(self.db, document_id)
        await self.db.commit()
        self._worker_pool.submit(IngestionJob.from_document(document))

        logger.info(
            f"{__name__}:reingest_document - Re-ingestion queued",
            extra={"document_id": str(document_id), "owner_id": owner_id},
        )
        return document

    async def delete_document(self, owner_id: str, document_id: UUID) -> None:
        """
        Delete a document, its vectors and its stored upload.

        Raises:
            DocumentNotFoundError: If the document does not exist for the owner
            VectorStoreError: If the vectors could not be removed
        """
        document = await self.get_document(owner_id, document_id)

        await run_in_threadpool(self._vector_store.delete_by_document, str(document_id))
        await document_crud.delete_by_id(self.db, document_id)
        await self.db.commit()
        self._upload_store.delete(document.file_path)

        logger.info(
            f"{__name__}:delete_document - Document deleted",
            extra={"document_id": str(document_id), "owner_id": owner_id},
        )

    async def get_session_status(self, owner_id: str, session_id: str) -> SessionStatus:
        """
        Aggregate ingestion progress for an upload session.

        Raises:
            SessionNotFoundError: If no documents carry the token
        """
        return await self._session_tracker.get_status(self.db, owner_id, session_id)
