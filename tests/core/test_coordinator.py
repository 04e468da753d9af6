"""
Tests for IngestionCoordinator.

Runs real extraction, chunking, keyword embeddings, FAISS and SQLite so the
status writes and vector side effects are observed end to end.

System role: Verification of the per-document ingestion state machine
"""

import uuid
from unittest.mock import MagicMock

import pytest

from lectern.boundary.db.CRUD.document_crud import document_crud
from lectern.boundary.db.models.document_model import DocumentStatus
from lectern.core.document_processing.coordinator import IngestionCoordinator
from lectern.core.document_processing.models import IngestionJob
from lectern.core.document_processing.tasks import ChunkingTask, EmbeddingTask, ExtractionTask
from lectern.core.exceptions import VectorStoreError

from conftest import TEST_DIMENSION, axis_vector

LONG_TEXT = "Photosynthesis converts light into chemical energy. " * 60


@pytest.fixture
def coordinator(session_factory, embeddings, faiss_store) -> IngestionCoordinator:
    """Provide coordinator wired to SQLite, keyword embeddings and FAISS."""
    return IngestionCoordinator(
        session_factory=session_factory,
        extraction_task=ExtractionTask(),
        chunking_task=ChunkingTask(chunk_size=500, chunk_overlap=50),
        embedding_task=EmbeddingTask(embeddings, dimension=TEST_DIMENSION),
        vector_store=faiss_store,
    )


@pytest.fixture
def stored_document(create_document, write_file):
    """Provide factory for a PROCESSING record backed by a stored text file."""
    async def _create(text: str = LONG_TEXT, name: str = "notes.txt", **overrides):
        path = write_file(f"{uuid.uuid4().hex}_{name}", text)
        return await create_document(name=name, file_path=str(path), **overrides)

    return _create


async def _reload(session_factory, document_id):
    async with session_factory() as db:
        return await document_crud.get_by_id(db, document_id)


class TestCoordinatorSuccess:
    """Test suite for successful runs."""

    async def test_run_should_complete_document_and_store_vectors(
        self, coordinator, stored_document, session_factory, faiss_store
    ) -> None:
        # Arrange
        document = await stored_document(subject_id="bio", topic_id="plants")

        # Act
        outcome = await coordinator.run(IngestionJob.from_document(document))

        # Assert
        stored = await _reload(session_factory, document.id)
        assert outcome.status == DocumentStatus.COMPLETED
        assert outcome.chunk_count > 1
        assert stored.status == DocumentStatus.COMPLETED
        assert stored.content == LONG_TEXT
        assert faiss_store.count_by_document(str(document.id)) == outcome.chunk_count

    async def test_vectors_should_carry_owner_scope_and_chunk_metadata(
        self, coordinator, stored_document, faiss_store
    ) -> None:
        document = await stored_document(subject_id="bio", topic_id="plants")

        await coordinator.run(IngestionJob.from_document(document))

        results = faiss_store.search(axis_vector(0), owner_id="owner-1", top_k=50)
        assert results
        assert all(r.subject_id == "bio" and r.topic_id == "plants" for r in results)
        assert all(r.document_id == str(document.id) for r in results)
        assert sorted(r.metadata["chunk_index"] for r in results) == list(range(len(results)))
        assert all(r.metadata["source"] == "notes.txt" for r in results)

    async def test_reingestion_should_not_duplicate_vectors(
        self, coordinator, stored_document, faiss_store
    ) -> None:
        """Running the same document twice leaves exactly one run's vectors."""
        document = await stored_document()
        job = IngestionJob.from_document(document)

        first = await coordinator.run(job)
        second = await coordinator.run(job)

        assert first.chunk_count == second.chunk_count
        assert faiss_store.count_by_document(str(document.id)) == first.chunk_count

    async def test_empty_file_should_complete_without_vectors(
        self, coordinator, stored_document, session_factory, faiss_store
    ) -> None:
        document = await stored_document(text="")

        outcome = await coordinator.run(IngestionJob.from_document(document))

        stored = await _reload(session_factory, document.id)
        assert outcome.status == DocumentStatus.COMPLETED
        assert stored.status == DocumentStatus.COMPLETED
        assert stored.content == ""
        assert faiss_store.count_by_document(str(document.id)) == 0

    async def test_deleted_record_should_not_keep_vectors(
        self, coordinator, write_file, faiss_store
    ) -> None:
        """A job whose record disappeared mid-run removes the vectors it wrote."""
        path = write_file("orphan.txt", LONG_TEXT)
        job = IngestionJob(
            document_id=uuid.uuid4(),
            owner_id="owner-1",
            file_path=str(path),
            file_name="orphan.txt",
        )

        await coordinator.run(job)

        assert faiss_store.count_by_document(str(job.document_id)) == 0


class TestCoordinatorFailure:
    """Test suite for failure handling."""

    async def test_missing_file_should_mark_error_with_prefix(
        self, coordinator, create_document, session_factory
    ) -> None:
        # Arrange
        document = await create_document(file_path="/nonexistent/notes.txt")

        # Act
        outcome = await coordinator.run(IngestionJob.from_document(document))

        # Assert
        stored = await _reload(session_factory, document.id)
        assert outcome.status == DocumentStatus.ERROR
        assert stored.status == DocumentStatus.ERROR
        assert stored.content.startswith("Error processing: File not found")

    async def test_embedding_failure_should_mark_error(
        self, session_factory, stored_document, faiss_store
    ) -> None:
        backend = MagicMock()
        backend.embed_documents.side_effect = RuntimeError("embedding quota exceeded")
        coordinator = IngestionCoordinator(
            session_factory=session_factory,
            extraction_task=ExtractionTask(),
            chunking_task=ChunkingTask(chunk_size=500, chunk_overlap=50),
            embedding_task=EmbeddingTask(backend),
            vector_store=faiss_store,
        )
        document = await stored_document()

        outcome = await coordinator.run(IngestionJob.from_document(document))

        stored = await _reload(session_factory, document.id)
        assert stored.status == DocumentStatus.ERROR
        assert "embedding quota exceeded" in stored.content
        assert outcome.error is not None

    async def test_store_failure_should_mark_error(
        self, session_factory, stored_document, embeddings
    ) -> None:
        store = MagicMock()
        store.insert_many.side_effect = VectorStoreError("Milvus insert failed", operation="insert")
        coordinator = IngestionCoordinator(
            session_factory=session_factory,
            extraction_task=ExtractionTask(),
            chunking_task=ChunkingTask(chunk_size=500, chunk_overlap=50),
            embedding_task=EmbeddingTask(embeddings),
            vector_store=store,
        )
        document = await stored_document()

        outcome = await coordinator.run(IngestionJob.from_document(document))

        stored = await _reload(session_factory, document.id)
        assert outcome.status == DocumentStatus.ERROR
        assert stored.content == "Error processing: Milvus insert failed"
