"""
Ingestion coordinator.

Runs the per-document pipeline and owns the terminal status write:
extract -> chunk -> drop old vectors -> embed -> insert -> COMPLETED,
or ERROR with "Error processing: <message>" on any failure. Each document
is independent; nothing is retried.

Dependencies: sqlalchemy, fastapi.concurrency, lectern.boundary, task modules
System role: Pipeline orchestration for one document
"""

import logging
import time

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import async_sessionmaker

from lectern.boundary.db.CRUD.document_crud import document_crud
from lectern.boundary.db.models.document_model import DocumentStatus
from lectern.boundary.vdb.base_store import BaseVectorStore
from lectern.boundary.vdb.vector_schemas import VectorRecord
from lectern.core.exceptions import LecternError
from lectern.observability.log_utils import log_exception_with_context

from .models import Chunk, IngestionJob, IngestionOutcome
from .tasks import ChunkingTask, EmbeddingTask, ExtractionTask

logger = logging.getLogger(__name__)


def _error_message(error: Exception) -> str:
    if isinstance(error, LecternError):
        return error.message
    return str(error) or type(error).__name__


class IngestionCoordinator:
    """Drive one document from stored file to searchable vectors."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        extraction_task: ExtractionTask,
        chunking_task: ChunkingTask,
        embedding_task: EmbeddingTask,
        vector_store: BaseVectorStore,
    ) -> None:
        """
        Initialize coordinator with its collaborators.

        Args:
            session_factory: Factory for the coordinator's own DB sessions
            extraction_task: File to text
            chunking_task: Text to chunks
            embedding_task: Chunks to vectors
            vector_store: Destination for chunk vectors
        """
        self._session_factory = session_factory
        self._extraction_task = extraction_task
        self._chunking_task = chunking_task
        self._embedding_task = embedding_task
        self._vector_store = vector_store

    async def run(self, job: IngestionJob) -> IngestionOutcome:
        """
        Process one job and persist its outcome. Never raises.

        Args:
            job: Ingestion job for one document

        Returns:
            IngestionOutcome: Terminal status and timing
        """
        start_time = time.perf_counter()
        document_id = str(job.document_id)
        logger.info(
            f"{__name__}:run - Ingestion started",
            extra={"document_id": document_id, "owner_id": job.owner_id, "file_name": job.file_name},
        )

        try:
            content, chunk_count = await self._process(job)
            stored = await self._record_success(job, content)
        except Exception as e:
            message = _error_message(e)
            log_exception_with_context(
                logger,
                f"{__name__}:run - Ingestion failed",
                e,
                document_id=document_id,
                file_name=job.file_name,
            )
            await self._record_failure(job, message)
            return IngestionOutcome(
                document_id=job.document_id,
                status=DocumentStatus.ERROR,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
                error=message,
            )

        if not stored:
            # Record deleted while the job was running; drop the orphaned vectors
            logger.warning(
                f"{__name__}:run - Document deleted during ingestion, removing its vectors",
                extra={"document_id": document_id},
            )
            await run_in_threadpool(self._vector_store.delete_by_document, document_id)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:run - Ingestion completed",
            extra={"document_id": document_id, "chunk_count": chunk_count, "processing_time_ms": round(elapsed_ms, 2)},
        )
        return IngestionOutcome(
            document_id=job.document_id,
            status=DocumentStatus.COMPLETED,
            chunk_count=chunk_count,
            processing_time_ms=elapsed_ms,
        )

    async def _process(self, job: IngestionJob) -> tuple[str, int]:
        document_id = str(job.document_id)

        text = await run_in_threadpool(self._extraction_task.extract, job.file_path, job.file_name)
        if not text.strip():
            logger.warning(
                f"{__name__}:_process - No text extracted",
                extra={"document_id": document_id, "file_name": job.file_name},
            )

        chunks = await run_in_threadpool(self._chunking_task.chunk, text, document_id)

        # Replace, never append: re-ingestion must not duplicate vectors
        await run_in_threadpool(self._vector_store.delete_by_document, document_id)

        embedded = await run_in_threadpool(self._embedding_task.embed, chunks)
        records = [self._to_record(job, chunk) for chunk in embedded]
        await run_in_threadpool(self._vector_store.insert_many, records)

        return text, len(records)

    @staticmethod
    def _to_record(job: IngestionJob, chunk: Chunk) -> VectorRecord:
        return VectorRecord(
            text=chunk.text,
            embedding=chunk.embedding,
            owner_id=job.owner_id,
            subject_id=job.subject_id,
            topic_id=job.topic_id,
            document_id=str(job.document_id),
            metadata={
                "chunk_id": chunk.id,
                "chunk_index": chunk.index,
                "source": job.file_name,
            },
        )

    async def _record_success(self, job: IngestionJob, content: str) -> bool:
        async with self._session_factory() as db:
            document = await document_crud.mark_completed(db, job.document_id, content)
            await db.commit()
        return document is not None

    async def _record_failure(self, job: IngestionJob, message: str) -> None:
        try:
            async with self._session_factory() as db:
                await document_crud.mark_failed(db, job.document_id, message)
                await db.commit()
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_record_failure - Could not persist failure status",
                e,
                document_id=str(job.document_id),
            )
