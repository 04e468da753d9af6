"""
Vector store interface shared by the Milvus and FAISS adapters.

Search is total: backend failures are logged and surface as an empty
result. Writes and deletes raise VectorStoreError so ingestion can record
the failure on the document.

Dependencies: lectern.boundary.vdb.vector_schemas
System role: Contract between the pipeline/retrieval layers and vector backends
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from lectern.boundary.vdb.vector_schemas import (
    VectorFilter,
    VectorRecord,
    VectorScope,
    VectorSearchResult,
)

logger = logging.getLogger(__name__)


def rank_results(results: list[VectorSearchResult], top_k: int) -> list[VectorSearchResult]:
    """Order by similarity descending, ties by insertion order, and cap at top_k."""
    ordered = sorted(results, key=lambda r: (-r.score, r.id))
    return ordered[:top_k]


class BaseVectorStore(ABC):
    """Common operations of every vector backend."""

    @abstractmethod
    def ensure_collection(self, name: str | None = None, dimension: int | None = None) -> None:
        """Create the collection and its similarity index if missing (idempotent)."""

    @abstractmethod
    def insert_many(self, records: Sequence[VectorRecord]) -> int:
        """
        Append records to the collection.

        Returns:
            int: Number of records inserted

        Raises:
            VectorStoreError: When the backend rejects the write
        """

    def insert(self, record: VectorRecord) -> None:
        self.insert_many([record])

    def search(
        self,
        query_vector: list[float],
        owner_id: str,
        scope: VectorScope | None = None,
        document_ids: list[str] | None = None,
        top_k: int = 5,
    ) -> list[VectorSearchResult]:
        """
        Search the owner's vectors, optionally narrowed by scope or documents.

        Args:
            query_vector: Query embedding
            owner_id: Owner whose vectors are searched
            scope: Subject/topic restriction, ignored when document_ids are given
            document_ids: Restrict to these documents
            top_k: Maximum results

        Returns:
            list[VectorSearchResult]: Ranked results, empty on any failure
        """
        vector_filter = VectorFilter.build(owner_id, scope, document_ids)
        return self.search_with_filter(query_vector, vector_filter, top_k)

    def search_with_filter(
        self,
        query_vector: list[float],
        vector_filter: VectorFilter,
        top_k: int = 5,
    ) -> list[VectorSearchResult]:
        """Run a filtered search; never raises."""
        if top_k <= 0:
            return []
        try:
            return self._search(query_vector, vector_filter, top_k)
        except Exception as e:
            logger.error(
                f"{__name__}:search_with_filter - Search failed, returning no results",
                extra={
                    "store": type(self).__name__,
                    "owner_id": vector_filter.owner_id,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            return []

    @abstractmethod
    def _search(
        self,
        query_vector: list[float],
        vector_filter: VectorFilter,
        top_k: int,
    ) -> list[VectorSearchResult]:
        """Backend-specific search; may raise."""

    @abstractmethod
    def delete_by_document(self, document_id: str) -> None:
        """Delete every vector of a document."""

    @abstractmethod
    def delete_by_scope(self, scope_id: str, owner_id: str | None = None) -> None:
        """Delete every vector whose subject or topic equals scope_id."""

    @abstractmethod
    def delete_by_owner(self, owner_id: str) -> None:
        """Delete every vector of an owner."""

    @abstractmethod
    def count_by_document(self, document_id: str) -> int:
        """Number of stored vectors for a document."""

    @abstractmethod
    def reset_index(self) -> None:
        """Drop and rebuild the similarity index."""

    def health_check(self) -> bool:
        """True when the backend answers basic requests."""
        return True

    def close(self) -> None:
        """Release backend connections."""
