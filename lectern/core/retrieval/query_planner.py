"""
Retrieval query planner.

Embeds the query, builds the metadata filter from the owner and scope hints,
searches, and broadens once from explicit documents to subject/topic when
the narrow search comes back empty.

Dependencies: fastapi.concurrency, lectern.boundary.vdb, lectern.core.document_processing
System role: Retrieval stage of query answering
"""

import logging

from fastapi.concurrency import run_in_threadpool

from lectern.boundary.vdb.base_store import BaseVectorStore
from lectern.boundary.vdb.vector_schemas import VectorFilter, VectorScope, VectorSearchResult
from lectern.core.document_processing.tasks import EmbeddingTask
from lectern.core.exceptions import EmbeddingError

from .models import RetrievedChunk, ScopeHints

logger = logging.getLogger(__name__)


class RetrievalQueryPlanner:
    """Turn a question plus scope hints into ranked chunks."""

    def __init__(self, embedding_task: EmbeddingTask, vector_store: BaseVectorStore) -> None:
        self._embedding_task = embedding_task
        self._vector_store = vector_store

    async def retrieve(
        self,
        query_text: str,
        owner_id: str,
        top_k: int = 5,
        scope_hints: ScopeHints | None = None,
    ) -> list[RetrievedChunk]:
        """
        Retrieve the owner's chunks most similar to the query.

        Args:
            query_text: Natural-language question
            owner_id: Owner whose material is searched
            top_k: Maximum chunks to return
            scope_hints: Optional subject/topic/document narrowing

        Returns:
            list[RetrievedChunk]: Ranked chunks; empty when embedding fails
                or nothing matches
        """
        try:
            query_vector = await run_in_threadpool(self._embedding_task.embed_query, query_text)
        except EmbeddingError as e:
            logger.error(
                f"{__name__}:retrieve - Query embedding failed, returning no context",
                extra={"owner_id": owner_id, "error": e.message},
            )
            return []

        hints = scope_hints or ScopeHints()
        vector_filter = VectorFilter.build(
            owner_id,
            VectorScope(subject_id=hints.subject_id, topic_id=hints.topic_id),
            hints.document_ids,
        )

        results = await self._search(query_vector, vector_filter, top_k)

        if not results and vector_filter.uses_document_ids and vector_filter.has_scope:
            logger.info(
                f"{__name__}:retrieve - No hits for selected documents, broadening to subject/topic",
                extra={"owner_id": owner_id, "document_count": len(vector_filter.document_ids)},
            )
            results = await self._search(query_vector, vector_filter.scope_only(), top_k)

        logger.info(
            f"{__name__}:retrieve - Retrieved {len(results)} chunks",
            extra={"owner_id": owner_id, "top_score": results[0].score if results else None},
        )
        return [self._to_chunk(result) for result in results]

    async def _search(
        self,
        query_vector: list[float],
        vector_filter: VectorFilter,
        top_k: int,
    ) -> list[VectorSearchResult]:
        return await run_in_threadpool(
            self._vector_store.search_with_filter, query_vector, vector_filter, top_k
        )

    @staticmethod
    def _to_chunk(result: VectorSearchResult) -> RetrievedChunk:
        return RetrievedChunk(
            text=result.text,
            score=result.score,
            document_id=result.document_id,
            subject_id=result.subject_id,
            topic_id=result.topic_id,
            metadata=result.metadata,
        )
