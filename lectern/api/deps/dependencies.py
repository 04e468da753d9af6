"""
Dependency injection container.

The ServiceContainer owns the process-wide collaborators (engine, vector
store, embeddings, models, worker pool). It is built in the application
lifespan and stored on app.state; request-scoped services are assembled by
the factory functions below.

Dependencies: lectern.configs, lectern.application, lectern.boundary, lectern.core
System role: DI container for service injection
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status
from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lectern.application.services import (
    DocumentService,
    QueryService,
    ScopeService,
    VectorIndexService,
)
from lectern.boundary.db.CRUD import document_crud
from lectern.boundary.db.connection import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
)
from lectern.boundary.db.models.document_model import DocumentStatus
from lectern.boundary.storage import LocalUploadStore
from lectern.boundary.vdb import BaseVectorStore, create_vector_store
from lectern.configs import Settings, get_settings
from lectern.core.document_processing import IngestionCoordinator, IngestionJob, IngestionWorkerPool
from lectern.core.document_processing.embeddings_wrapper import build_embeddings
from lectern.core.document_processing.tasks import ChunkingTask, EmbeddingTask, ExtractionTask
from lectern.core.retrieval import AnswerComposer, RetrievalQueryPlanner, build_chat_model
from lectern.core.session import SessionTracker

logger = logging.getLogger(__name__)

_UNSET = object()
MISSING_FILE_MESSAGE = "Stored file missing after restart"


class ServiceContainer:
    """Container for process-wide service instances, built lazily."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker | None = None
        self._embeddings: Embeddings | None = None
        self._vector_store: BaseVectorStore | None = None
        self._upload_store: LocalUploadStore | None = None
        self._extraction_model = _UNSET
        self._composer = _UNSET
        self._worker_pool: IngestionWorkerPool | None = None
        self._planner: RetrievalQueryPlanner | None = None
        self._session_tracker = SessionTracker()

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_engine_from_settings(self.settings.database)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            self._session_factory = create_session_factory(self.engine)
        return self._session_factory

    @property
    def embeddings(self) -> Embeddings:
        """Get cached embeddings backend."""
        if self._embeddings is None:
            ingestion = self.settings.ingestion
            self._embeddings = build_embeddings(
                provider=ingestion.embedding_provider,
                model=ingestion.embedding_model,
                dimension=self.settings.vector_store.embedding_dimension,
            )
        return self._embeddings

    @property
    def vector_store(self) -> BaseVectorStore:
        """Get cached vector store."""
        if self._vector_store is None:
            self._vector_store = create_vector_store(self.settings.vector_store, self.embeddings)
        return self._vector_store

    @property
    def upload_store(self) -> LocalUploadStore:
        if self._upload_store is None:
            self._upload_store = LocalUploadStore(self.settings.ingestion.upload_directory)
        return self._upload_store

    @property
    def extraction_model(self) -> BaseChatModel | None:
        """
        Get cached multimodal model for non-text extraction.

        None when the model cannot be built; plain-text, PDF and DOCX
        extraction keep working without it.
        """
        if self._extraction_model is _UNSET:
            try:
                self._extraction_model = build_chat_model(
                    self.settings.generation,
                    model_id=self.settings.ingestion.extraction_model,
                )
            except Exception as e:
                logger.warning(
                    f"{__name__}:extraction_model - Extraction model unavailable: {e}"
                )
                self._extraction_model = None
        return self._extraction_model

    @property
    def embedding_task(self) -> EmbeddingTask:
        return EmbeddingTask(
            self.embeddings,
            dimension=self.settings.vector_store.embedding_dimension,
        )

    @property
    def worker_pool(self) -> IngestionWorkerPool:
        """Get cached ingestion worker pool."""
        if self._worker_pool is None:
            ingestion = self.settings.ingestion
            coordinator = IngestionCoordinator(
                session_factory=self.session_factory,
                extraction_task=ExtractionTask(model=self.extraction_model),
                chunking_task=ChunkingTask(
                    chunk_size=ingestion.chunk_size,
                    chunk_overlap=ingestion.chunk_overlap,
                    separators=ingestion.separators,
                ),
                embedding_task=self.embedding_task,
                vector_store=self.vector_store,
            )
            self._worker_pool = IngestionWorkerPool(
                coordinator,
                concurrency=ingestion.worker_concurrency,
                shutdown_timeout=ingestion.shutdown_timeout_seconds,
            )
        return self._worker_pool

    @property
    def planner(self) -> RetrievalQueryPlanner:
        if self._planner is None:
            self._planner = RetrievalQueryPlanner(self.embedding_task, self.vector_store)
        return self._planner

    @property
    def composer(self) -> AnswerComposer | None:
        """Get cached answer composer; None when the chat model cannot be built."""
        if self._composer is _UNSET:
            try:
                self._composer = AnswerComposer(build_chat_model(self.settings.generation))
            except Exception as e:
                logger.error(f"{__name__}:composer - Generative model unavailable: {e}")
                self._composer = None
        return self._composer

    @property
    def session_tracker(self) -> SessionTracker:
        return self._session_tracker

    async def startup(self) -> None:
        """
        Prepare storage, start background workers and resume interrupted ingestion.

        A vector store that is unreachable at startup is logged, not fatal;
        searches return empty results until it comes back.
        """
        if self.settings.database.create_tables:
            await create_tables(self.engine)

        vs_settings = self.settings.vector_store
        try:
            self.vector_store.ensure_collection(
                vs_settings.collection_name, vs_settings.embedding_dimension
            )
        except Exception as e:
            logger.error(f"{__name__}:startup - Vector collection not ready: {e}")

        await self.worker_pool.start()
        await self.resume_pending_ingestion()
        logger.info(f"{__name__}:startup - Service container ready")

    async def resume_pending_ingestion(self) -> tuple[int, int]:
        """
        Settle documents left in PROCESSING by a previous process.

        Records whose stored file is still on disk are queued again; the
        rest are marked as failed. Must run after the worker pool started.

        Returns:
            tuple[int, int]: (resubmitted, failed) counts
        """
        resubmitted, failed = 0, 0
        async with self.session_factory() as db:
            pending = await document_crud.list_by_status(db, DocumentStatus.PROCESSING)
            jobs = []
            for document in pending:
                if self.upload_store.exists(document.file_path):
                    jobs.append(IngestionJob.from_document(document))
                else:
                    await document_crud.mark_failed(db, document.id, MISSING_FILE_MESSAGE)
                    failed += 1
            await db.commit()

        for job in jobs:
            self.worker_pool.submit(job)
            resubmitted += 1

        if resubmitted or failed:
            logger.info(
                f"{__name__}:resume_pending_ingestion - Recovered interrupted ingestion",
                extra={"resubmitted": resubmitted, "failed": failed},
            )
        return resubmitted, failed

    async def shutdown(self) -> None:
        """Drain workers, then release the vector store and the engine."""
        if self._worker_pool is not None:
            await self._worker_pool.stop()
        if self._vector_store is not None:
            self._vector_store.close()
        if self._engine is not None:
            await self._engine.dispose()
        logger.info(f"{__name__}:shutdown - Service container closed")


def get_container(request: Request) -> ServiceContainer:
    """Get the container built by the application lifespan."""
    return request.app.state.container


async def get_db(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for a request-scoped async database session.

    Yields:
        AsyncSession: Session closed after the route completes
    """
    async with container.session_factory() as session:
        yield session


def get_owner_id(x_user_id: str | None = Header(default=None, alias="X-User-ID")) -> str:
    """
    Resolve the owner from the X-User-ID header.

    Raises:
        HTTPException(400): When the header is missing or blank
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-ID header is required",
        )
    return x_user_id.strip()


def get_document_service(
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)
        container: Process-wide services (injected via Depends)

    Returns:
        DocumentService: Document service bound to the request session
    """
    return DocumentService(
        db=db,
        vector_store=container.vector_store,
        worker_pool=container.worker_pool,
        upload_store=container.upload_store,
        session_tracker=container.session_tracker,
    )


def get_scope_service(
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
) -> ScopeService:
    return ScopeService(
        db=db,
        vector_store=container.vector_store,
        upload_store=container.upload_store,
    )


def get_query_service(container: ServiceContainer = Depends(get_container)) -> QueryService:
    """
    Get query service instance.

    Returns:
        QueryService: Planner plus composer (composer may be None)
    """
    return QueryService(
        planner=container.planner,
        composer=container.composer,
        default_top_k=container.settings.generation.default_top_k,
    )


def get_index_service(container: ServiceContainer = Depends(get_container)) -> VectorIndexService:
    return VectorIndexService(container.vector_store)
