"""
Tests for ServiceContainer startup.

System role: Verification that documents interrupted by a restart are
resumed or settled before the service accepts work
"""

from unittest.mock import MagicMock

from lectern.api.deps.dependencies import MISSING_FILE_MESSAGE, ServiceContainer
from lectern.boundary.db.CRUD.document_crud import document_crud
from lectern.boundary.db.models.document_model import ERROR_CONTENT_PREFIX, DocumentStatus
from lectern.configs import Settings
from lectern.configs.database import DatabaseSettings
from lectern.core.document_processing.models import IngestionJob, IngestionOutcome
from lectern.core.document_processing.worker_pool import IngestionWorkerPool


class CompletingCoordinator:
    """Coordinator double that records jobs and reports success."""

    def __init__(self) -> None:
        self.jobs: list[IngestionJob] = []

    async def run(self, job: IngestionJob) -> IngestionOutcome:
        self.jobs.append(job)
        return IngestionOutcome(document_id=job.document_id, status=DocumentStatus.COMPLETED)


def _container(db_engine, session_factory, upload_store, coordinator) -> ServiceContainer:
    settings = Settings(database=DatabaseSettings(url="sqlite+aiosqlite://", create_tables=False))
    container = ServiceContainer(settings)
    container._engine = db_engine
    container._session_factory = session_factory
    container._upload_store = upload_store
    container._vector_store = MagicMock()
    container._worker_pool = IngestionWorkerPool(coordinator, concurrency=1)
    return container


class TestStartupRecovery:
    """Test suite for ServiceContainer.startup() ingestion recovery."""

    async def test_processing_documents_should_be_resumed_or_failed(
        self, db_engine, session_factory, upload_store, create_document, write_file
    ) -> None:
        """A stored file is queued again; a missing one ends in error."""
        # Arrange
        stored = write_file("kept.txt", "Photosynthesis notes")
        resumable = await create_document(name="kept.txt", file_path=str(stored))
        orphaned = await create_document(name="gone.txt", file_path=str(stored.parent / "gone.txt"))
        finished = await create_document(
            name="done.txt",
            file_path=str(stored),
            status=DocumentStatus.COMPLETED,
            content="done",
        )
        coordinator = CompletingCoordinator()
        container = _container(db_engine, session_factory, upload_store, coordinator)

        # Act
        await container.startup()
        await container.worker_pool.join()

        # Assert
        assert [job.document_id for job in coordinator.jobs] == [resumable.id]
        async with session_factory() as db:
            failed = await document_crud.get_by_id(db, orphaned.id)
            untouched = await document_crud.get_by_id(db, finished.id)
            assert failed.status == DocumentStatus.ERROR
            assert failed.content == f"{ERROR_CONTENT_PREFIX}{MISSING_FILE_MESSAGE}"
            assert untouched.status == DocumentStatus.COMPLETED
            pending = await document_crud.list_by_status(db, DocumentStatus.PROCESSING)
            assert [document.id for document in pending] == [resumable.id]

        await container.worker_pool.stop()

    async def test_clean_database_should_submit_nothing(
        self, db_engine, session_factory, upload_store
    ) -> None:
        coordinator = CompletingCoordinator()
        container = _container(db_engine, session_factory, upload_store, coordinator)

        await container.startup()

        assert await container.resume_pending_ingestion() == (0, 0)
        assert coordinator.jobs == []
        await container.worker_pool.stop()
