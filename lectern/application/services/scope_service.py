"""
Scope and owner cascade deletion.

When a subject, topic or whole owner is removed upstream, their documents,
vectors and stored uploads go with them.

Dependencies: lectern.boundary
System role: Cascade cleanup orchestration
"""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from lectern.boundary.db.CRUD.document_crud import document_crud
from lectern.boundary.storage.upload_store import LocalUploadStore
from lectern.boundary.vdb.base_store import BaseVectorStore

logger = logging.getLogger(__name__)


class ScopeService:
    """Delete everything under a scope id or an owner."""

    def __init__(
        self,
        db: AsyncSession,
        vector_store: BaseVectorStore,
        upload_store: LocalUploadStore,
    ) -> None:
        self.db = db
        self._vector_store = vector_store
        self._upload_store = upload_store

    async def delete_scope(self, owner_id: str, scope_id: str) -> int:
        """
        Delete the owner's vectors and documents tagged with a subject or topic id.

        Vectors go first so a failure leaves the records in place for a retry.

        Returns:
            int: Number of document records deleted

        Raises:
            VectorStoreError: If the vectors could not be removed
        """
        await run_in_threadpool(self._vector_store.delete_by_scope, scope_id, owner_id)
        documents = await document_crud.delete_by_scope(self.db, owner_id, scope_id)
        await self.db.commit()
        for document in documents:
            self._upload_store.delete(document.file_path)

        logger.info(
            f"{__name__}:delete_scope - Scope deleted",
            extra={"owner_id": owner_id, "scope_id": scope_id, "deleted_documents": len(documents)},
        )
        return len(documents)

    async def purge_owner(self, owner_id: str) -> int:
        """Delete every vector, record and upload of an owner."""
        await run_in_threadpool(self._vector_store.delete_by_owner, owner_id)
        documents = await document_crud.delete_by_owner(self.db, owner_id)
        await self.db.commit()
        for document in documents:
            self._upload_store.delete(document.file_path)

        logger.info(
            f"{__name__}:purge_owner - Owner data deleted",
            extra={"owner_id": owner_id, "deleted_documents": len(documents)},
        )
        return len(documents)
