"""
Query service orchestrator.

Retrieves context for a question and composes the tutoring answer.

Dependencies: lectern.core.retrieval
System role: Query answering orchestration
"""

import logging

from lectern.core.exceptions import GenerationError
from lectern.core.retrieval.answer_composer import AnswerComposer
from lectern.core.retrieval.models import ScopeHints
from lectern.core.retrieval.query_planner import RetrievalQueryPlanner
from lectern.models.query import QueryResponse, SourceReference

logger = logging.getLogger(__name__)


class QueryService:
    """Answer questions from an owner's study material."""

    def __init__(
        self,
        planner: RetrievalQueryPlanner,
        composer: AnswerComposer | None,
        default_top_k: int = 5,
    ) -> None:
        """
        Initialize query service.

        Args:
            planner: Retrieval planner
            composer: Answer composer; None when the chat model could not be built
            default_top_k: Chunks retrieved when the request does not say
        """
        self._planner = planner
        self._composer = composer
        self._default_top_k = default_top_k

    async def answer(
        self,
        owner_id: str,
        query: str,
        scope_hints: ScopeHints | None = None,
        top_k: int | None = None,
    ) -> QueryResponse:
        """
        Retrieve context and generate an answer.

        Args:
            owner_id: Owner whose material is searched
            query: Validated, non-empty question
            scope_hints: Optional narrowing
            top_k: Chunks to retrieve (defaults to configuration)

        Returns:
            QueryResponse: Answer, echoed query, top relevance score and sources

        Raises:
            GenerationError: If the model is not initialized or fails
        """
        if self._composer is None:
            raise GenerationError("Generative model is not initialized")

        chunks = await self._planner.retrieve(
            query,
            owner_id,
            top_k=top_k or self._default_top_k,
            scope_hints=scope_hints,
        )
        composed = await self._composer.compose(query, chunks)

        return QueryResponse(
            answer=composed.answer,
            query=query,
            relevance_score=composed.relevance_score,
            sources=[
                SourceReference(
                    document_id=chunk.document_id,
                    score=chunk.score,
                    chunk_index=chunk.metadata.get("chunk_index"),
                )
                for chunk in chunks
            ],
        )
