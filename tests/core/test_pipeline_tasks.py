"""
Tests for the extraction and embedding tasks.

System role: Verification of the first and third ingestion stages
"""

from unittest.mock import MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from lectern.core.document_processing.embeddings_wrapper import FixedDimensionEmbeddings, build_embeddings
from lectern.core.document_processing.models import Chunk
from lectern.core.document_processing.tasks import EmbeddingTask, ExtractionTask
from lectern.core.exceptions import EmbeddingError, ExtractionError


def _chunk(text: str, index: int = 0) -> Chunk:
    return Chunk(id=f"c{index}", text=text, index=index, document_id="d1")


class TestExtractionTask:
    """Test suite for ExtractionTask.extract()."""

    def test_plain_text_should_be_read_directly(self, write_file) -> None:
        path = write_file("notes.txt", "Photosynthesis notes\nline two")

        assert ExtractionTask().extract(str(path)) == "Photosynthesis notes\nline two"

    def test_original_name_should_drive_type_detection(self, write_file) -> None:
        """Stored uploads carry a prefix; the original filename decides the format."""
        path = write_file("3f2a_upload", "markdown body")

        assert ExtractionTask().extract(str(path), file_name="readme.md") == "markdown body"

    def test_missing_file_should_raise_extraction_error(self, tmp_path) -> None:
        with pytest.raises(ExtractionError, match="File not found"):
            ExtractionTask().extract(str(tmp_path / "gone.txt"))

    def test_media_without_model_should_be_unsupported(self, write_file) -> None:
        path = write_file("diagram.png", b"\x89PNG fake")

        with pytest.raises(ExtractionError, match="Unsupported file type"):
            ExtractionTask(model=None).extract(str(path))

    def test_image_should_be_transcribed_by_model(self, write_file) -> None:
        # Arrange
        path = write_file("diagram.png", b"\x89PNG fake")
        model = FakeListChatModel(responses=["Label: mitochondria"])

        # Act
        text = ExtractionTask(model=model).extract(str(path))

        # Assert
        assert text == "Label: mitochondria"

    def test_corrupt_pdf_should_raise_extraction_error(self, write_file) -> None:
        path = write_file("broken.pdf", b"not really a pdf")

        with pytest.raises(ExtractionError):
            ExtractionTask().extract(str(path))


class TestEmbeddingTask:
    """Test suite for EmbeddingTask."""

    def test_embed_should_attach_vectors(self, embeddings) -> None:
        task = EmbeddingTask(embeddings, dimension=8)

        embedded = task.embed([_chunk("algebra"), _chunk("poetry", 1)])

        assert [len(c.embedding) for c in embedded] == [8, 8]
        assert embedded[0].text == "algebra"
        assert len(embeddings.calls) == 1

    def test_embed_empty_list_should_skip_backend(self, embeddings) -> None:
        assert EmbeddingTask(embeddings).embed([]) == []
        assert embeddings.calls == []

    def test_backend_failure_should_raise_embedding_error(self) -> None:
        backend = MagicMock()
        backend.embed_documents.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(EmbeddingError, match="quota exceeded"):
            EmbeddingTask(backend).embed([_chunk("x")])

    def test_wrong_dimension_should_raise(self) -> None:
        task = EmbeddingTask(DeterministicFakeEmbedding(size=4), dimension=8)

        with pytest.raises(EmbeddingError):
            task.embed([_chunk("x")])
        with pytest.raises(EmbeddingError):
            task.embed_query("x")

    def test_vector_count_mismatch_should_raise(self) -> None:
        backend = MagicMock()
        backend.embed_documents.return_value = [[0.0] * 4]

        with pytest.raises(EmbeddingError):
            EmbeddingTask(backend).embed([_chunk("a"), _chunk("b", 1)])

    def test_embed_query_should_return_list(self) -> None:
        task = EmbeddingTask(DeterministicFakeEmbedding(size=4), dimension=4)

        assert task.embed_query("q") == task.embed_query("q")


class TestBuildEmbeddings:
    def test_fake_provider_should_build_deterministic_backend(self) -> None:
        backend = build_embeddings("fake", "unused", 16)

        assert isinstance(backend, DeterministicFakeEmbedding)
        assert len(backend.embed_query("hello")) == 16

    def test_unknown_provider_should_raise(self) -> None:
        with pytest.raises(ValueError):
            build_embeddings("openai", "m", 16)


class TestFixedDimensionEmbeddings:
    """Test suite for the configured output dimensionality."""

    def test_calls_should_pass_configured_dimension(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Both embed paths forward the dimension unless the caller overrides it."""
        # Arrange
        seen: list[int | None] = []

        def parent_documents(self, texts, *, batch_size=100, task_type=None, titles=None, output_dimensionality=None):
            seen.append(output_dimensionality)
            return [[0.0] * output_dimensionality for _ in texts]

        def parent_query(self, text, task_type=None, title=None, output_dimensionality=None):
            seen.append(output_dimensionality)
            return [0.0] * output_dimensionality

        monkeypatch.setattr(GoogleGenerativeAIEmbeddings, "embed_documents", parent_documents)
        monkeypatch.setattr(GoogleGenerativeAIEmbeddings, "embed_query", parent_query)
        embeddings = FixedDimensionEmbeddings(output_dimensionality=16, google_api_key="test-key")

        # Act
        vectors = embeddings.embed_documents(["a", "b"])
        query = embeddings.embed_query("q")
        explicit = embeddings.embed_query("q", output_dimensionality=8)

        # Assert
        assert seen == [16, 16, 8]
        assert [len(v) for v in vectors] == [16, 16]
        assert len(query) == 16
        assert len(explicit) == 8
