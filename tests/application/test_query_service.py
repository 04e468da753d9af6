"""
Test suite for QueryService.

System role: Verification of query answering orchestration
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from lectern.application.services.query_service import QueryService
from lectern.boundary.vdb.vector_schemas import VectorRecord
from lectern.core.document_processing.tasks import EmbeddingTask
from lectern.core.exceptions import GenerationError
from lectern.core.retrieval.answer_composer import AnswerComposer
from lectern.core.retrieval.models import ScopeHints
from lectern.core.retrieval.query_planner import RetrievalQueryPlanner

from conftest import TEST_DIMENSION


@pytest.fixture
def planner(embeddings, faiss_store) -> RetrievalQueryPlanner:
    return RetrievalQueryPlanner(EmbeddingTask(embeddings, dimension=TEST_DIMENSION), faiss_store)


class TestQueryService:
    """Test suite for QueryService.answer()."""

    async def test_answer_should_include_sources_and_relevance(self, planner, embeddings, faiss_store) -> None:
        # Arrange
        faiss_store.insert_many([
            VectorRecord(
                text="Mitochondria produce ATP",
                embedding=embeddings.embed_query("Mitochondria produce ATP"),
                owner_id="owner-1",
                document_id="d1",
                metadata={"chunk_index": 3},
            )
        ])
        service = QueryService(planner, AnswerComposer(FakeListChatModel(responses=["They make ATP."])))

        # Act
        response = await service.answer("owner-1", "What do mitochondria do?")

        # Assert
        assert response.answer == "They make ATP."
        assert response.query == "What do mitochondria do?"
        assert response.relevance_score > 0.5
        assert [(s.document_id, s.chunk_index) for s in response.sources] == [("d1", 3)]

    async def test_answer_without_material_should_still_answer(self, planner) -> None:
        service = QueryService(planner, AnswerComposer(FakeListChatModel(responses=["General answer."])))

        response = await service.answer("owner-1", "What is a derivative?")

        assert response.answer == "General answer."
        assert response.relevance_score == 0.0
        assert response.sources == []

    async def test_missing_composer_should_raise_generation_error(self, planner) -> None:
        service = QueryService(planner, composer=None)

        with pytest.raises(GenerationError, match="not initialized"):
            await service.answer("owner-1", "q")

    async def test_defaults_and_hints_should_reach_planner(self) -> None:
        planner = MagicMock()
        planner.retrieve = AsyncMock(return_value=[])
        service = QueryService(
            planner,
            AnswerComposer(FakeListChatModel(responses=["ok"])),
            default_top_k=7,
        )
        hints = ScopeHints(subject_id="bio")

        await service.answer("owner-1", "q", scope_hints=hints)

        planner.retrieve.assert_awaited_once_with("q", "owner-1", top_k=7, scope_hints=hints)
