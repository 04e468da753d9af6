"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite async database, FAISS vector store, stub embeddings,
temp upload storage and sample document factories.
Dependencies: pytest, sqlalchemy, aiosqlite, faiss-cpu, langchain_core
System role: Test infrastructure and fixture management
"""

import math
import re
from collections.abc import Sequence
from pathlib import Path

import pytest
from langchain_core.embeddings import Embeddings

TEST_DIMENSION = 8

# Each keyword owns one axis; unknown words fall on the last axis
_VOCABULARY = ("photosynthesis", "mitochondria", "algebra", "calculus", "history", "poetry", "chemistry")


class KeywordEmbeddings(Embeddings):
    """Bag-of-keywords embeddings so similarity is predictable in tests."""

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self.dimension = dimension
        self.calls: list[Sequence[str]] = []

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for word in re.findall(r"[a-z]+", text.lower()):
            if word in _VOCABULARY:
                vector[_VOCABULARY.index(word)] += 1.0
            else:
                vector[self.dimension - 1] += 0.01
        if not any(vector):
            vector[self.dimension - 1] = 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        return [v / norm for v in vector]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._vector(text)


def axis_vector(axis: int, dimension: int = TEST_DIMENSION) -> list[float]:
    """Unit vector along one axis."""
    vector = [0.0] * dimension
    vector[axis] = 1.0
    return vector


@pytest.fixture
def embeddings() -> KeywordEmbeddings:
    """Provide keyword embeddings with the test dimension."""
    return KeywordEmbeddings()


@pytest.fixture
def faiss_store(embeddings: KeywordEmbeddings):
    """Provide an in-memory FAISS store with its index created."""
    from lectern.boundary.vdb.faiss_store import FAISSVectorStore

    store = FAISSVectorStore(embeddings=embeddings, dimension=TEST_DIMENSION)
    store.ensure_collection()
    return store


@pytest.fixture
async def db_engine(tmp_path: Path):
    """
    Create a file-backed SQLite async engine with all tables.

    File-backed so concurrent sessions (worker pool tests) each get
    their own connection.

    Yields:
        AsyncEngine: Engine disposed after the test
    """
    from sqlalchemy.ext.asyncio import create_async_engine

    from lectern.boundary.db.connection import create_tables

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Provide the session factory used by services and the coordinator."""
    from lectern.boundary.db.connection import create_session_factory

    return create_session_factory(db_engine)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Provide a database session for one test.

    Yields:
        AsyncSession: Session rolled back after the test
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def upload_store(tmp_path: Path):
    """Provide upload storage under a temp directory."""
    from lectern.boundary.storage.upload_store import LocalUploadStore

    return LocalUploadStore(str(tmp_path / "uploads"))


@pytest.fixture
def write_file(tmp_path: Path):
    """
    Provide a helper that writes a file under tmp_path.

    Returns:
        Callable[[str, str | bytes], Path]: Writes content and returns the path
    """
    def _write(name: str, content: str | bytes) -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def create_document(test_async_db):
    """
    Provide a factory that persists a DocumentModel and commits.

    Returns:
        Callable: async (**overrides) -> DocumentModel
    """
    from lectern.boundary.db.CRUD.document_crud import document_crud
    from lectern.boundary.db.models.document_model import DocumentStatus, DocumentType

    async def _create(**overrides):
        values = {
            "owner_id": "owner-1",
            "session_id": "session-1",
            "name": "notes.txt",
            "document_type": DocumentType.DOCS,
            "status": DocumentStatus.PROCESSING,
        }
        values.update(overrides)
        document = await document_crud.create(test_async_db, **values)
        await test_async_db.commit()
        return document

    return _create


@pytest.fixture
def app():
    """
    Provide the FastAPI app without running its lifespan.

    Tests override the service dependencies they exercise.
    """
    from lectern.api.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Provide a TestClient that does not start the service container."""
    from fastapi.testclient import TestClient

    return TestClient(app)
