"""
Vector index maintenance.

Dependencies: lectern.boundary.vdb
System role: Operator actions on the vector store
"""

import logging

from fastapi.concurrency import run_in_threadpool

from lectern.boundary.vdb.base_store import BaseVectorStore

logger = logging.getLogger(__name__)


class VectorIndexService:
    """Index rebuild and health probing."""

    def __init__(self, vector_store: BaseVectorStore) -> None:
        self._vector_store = vector_store

    async def reset_index(self) -> None:
        """
        Drop and rebuild the similarity index.

        Raises:
            VectorStoreError: If the rebuild fails
        """
        logger.warning(f"{__name__}:reset_index - Rebuilding vector index")
        await run_in_threadpool(self._vector_store.reset_index)

    async def is_healthy(self) -> bool:
        return await run_in_threadpool(self._vector_store.health_check)
