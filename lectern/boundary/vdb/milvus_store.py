"""
Milvus vector store for production.

One collection holds every chunk vector with its text, owner, scope and
document tags. Similarity is cosine over an HNSW index. Search filters are
rendered to Milvus boolean expressions by VectorFilter.

Dependencies: pymilvus, lectern.boundary.vdb.vector_schemas
System role: Production vector store for RAG retrieval
"""

import logging
from collections.abc import Sequence
from typing import Any

from pymilvus import DataType, MilvusClient, MilvusException

from lectern.boundary.vdb.base_store import BaseVectorStore, rank_results
from lectern.boundary.vdb.vector_schemas import (
    RECORD_FIELDS,
    VectorFilter,
    VectorRecord,
    VectorSearchResult,
    quote_literal,
)
from lectern.configs.vector_store import VectorStoreSettings
from lectern.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

EMBEDDING_FIELD = "embedding"
ID_FIELDS = ("owner_id", "subject_id", "topic_id", "document_id")
INDEX_NOT_FOUND_CODE = 700
_RECOVERABLE_MARKERS = ("index not found", "indexnotexist", "index doesn't exist", "not loaded")


def _is_recoverable_search_error(error: MilvusException) -> bool:
    """True for missing-index or collection-not-loaded failures."""
    if getattr(error, "code", None) == INDEX_NOT_FOUND_CODE:
        return True
    message = str(error).lower()
    return any(marker in message for marker in _RECOVERABLE_MARKERS)


class MilvusVectorStore(BaseVectorStore):
    """
    Milvus-backed vector store.

    The client is created lazily so the application can start while Milvus
    is still coming up; bootstrap happens in ensure_collection.
    """

    def __init__(
        self,
        settings: VectorStoreSettings,
        client: MilvusClient | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            settings: Vector store settings (uri, collection, index params)
            client: Pre-built MilvusClient, mainly for tests
        """
        self._settings = settings
        self._client = client
        self._collection = settings.collection_name
        self._dimension = settings.embedding_dimension

    @property
    def client(self) -> MilvusClient:
        if self._client is None:
            logger.info(f"{__name__}:client - Connecting to Milvus at {self._settings.milvus_uri}")
            self._client = MilvusClient(
                uri=self._settings.milvus_uri,
                token=self._settings.milvus_token or "",
            )
        return self._client

    def ensure_collection(self, name: str | None = None, dimension: int | None = None) -> None:
        """
        Create the collection, its index and load it; safe to call repeatedly.

        Args:
            name: Collection name, defaults to the configured one
            dimension: Vector dimension, defaults to the configured one

        Raises:
            VectorStoreError: When Milvus rejects the bootstrap
        """
        if name:
            self._collection = name
        if dimension:
            self._dimension = dimension

        try:
            if self.client.has_collection(collection_name=self._collection):
                logger.info(f"{__name__}:ensure_collection - Collection {self._collection} already exists")
                self._ensure_index()
            else:
                self.client.create_collection(
                    collection_name=self._collection,
                    schema=self._build_schema(),
                    index_params=self._build_index_params(),
                )
                logger.info(
                    f"{__name__}:ensure_collection - Created collection {self._collection}",
                    extra={"dimension": self._dimension, "index_type": self._settings.index_type},
                )
            self.client.load_collection(collection_name=self._collection)
        except MilvusException as e:
            raise VectorStoreError(
                f"Failed to initialize collection {self._collection}: {e}",
                operation="ensure_collection",
            ) from e

    def insert_many(self, records: Sequence[VectorRecord]) -> int:
        records = list(records)
        if not records:
            return 0
        for record in records:
            if len(record.embedding) != self._dimension:
                raise VectorStoreError(
                    f"Embedding dimension {len(record.embedding)} does not match collection dimension {self._dimension}",
                    operation="insert",
                    details={"document_id": record.document_id},
                )

        rows = [self._to_row(record) for record in records]
        try:
            result = self.client.insert(collection_name=self._collection, data=rows)
        except MilvusException as e:
            raise VectorStoreError(f"Milvus insert failed: {e}", operation="insert") from e

        inserted = int(result.get("insert_count", len(rows)))
        logger.debug(f"{__name__}:insert_many - Inserted {inserted} vectors into {self._collection}")
        return inserted

    def _search(
        self,
        query_vector: list[float],
        vector_filter: VectorFilter,
        top_k: int,
    ) -> list[VectorSearchResult]:
        if not self.client.has_collection(collection_name=self._collection):
            logger.warning(f"{__name__}:_search - Collection {self._collection} does not exist")
            return []

        try:
            return self._run_search(query_vector, vector_filter, top_k)
        except MilvusException as e:
            if not _is_recoverable_search_error(e):
                raise
            logger.warning(
                f"{__name__}:_search - Index unavailable, creating it and retrying once",
                extra={"error": str(e)},
            )
            self._ensure_index()
            self.client.load_collection(collection_name=self._collection)
            return self._run_search(query_vector, vector_filter, top_k)

    def _run_search(
        self,
        query_vector: list[float],
        vector_filter: VectorFilter,
        top_k: int,
    ) -> list[VectorSearchResult]:
        expression = vector_filter.to_expression()
        logger.debug(f"{__name__}:_run_search - filter={expression}, top_k={top_k}")
        results = self.client.search(
            collection_name=self._collection,
            data=[query_vector],
            filter=expression,
            limit=top_k,
            output_fields=list(RECORD_FIELDS),
            search_params={
                "metric_type": self._settings.metric_type,
                "params": {"ef": max(self._settings.search_ef, top_k)},
            },
        )
        hits = results[0] if results else []
        return rank_results([self._to_result(hit) for hit in hits], top_k)

    def delete_by_document(self, document_id: str) -> None:
        self._delete(f"document_id == {quote_literal(document_id)}")

    def delete_by_scope(self, scope_id: str, owner_id: str | None = None) -> None:
        scope = quote_literal(scope_id)
        expression = f"(subject_id == {scope} || topic_id == {scope})"
        if owner_id is not None:
            expression = f"owner_id == {quote_literal(owner_id)} && {expression}"
        self._delete(expression)

    def delete_by_owner(self, owner_id: str) -> None:
        self._delete(f"owner_id == {quote_literal(owner_id)}")

    def count_by_document(self, document_id: str) -> int:
        try:
            rows = self.client.query(
                collection_name=self._collection,
                filter=f"document_id == {quote_literal(document_id)}",
                output_fields=["count(*)"],
            )
        except MilvusException as e:
            raise VectorStoreError(f"Milvus count failed: {e}", operation="count") from e
        return int(rows[0]["count(*)"]) if rows else 0

    def reset_index(self) -> None:
        """Release the collection, drop its indexes, rebuild and reload."""
        try:
            if not self.client.has_collection(collection_name=self._collection):
                self.ensure_collection()
                return
            self.client.release_collection(collection_name=self._collection)
            for index_name in self.client.list_indexes(collection_name=self._collection):
                self.client.drop_index(collection_name=self._collection, index_name=index_name)
            self.client.create_index(
                collection_name=self._collection,
                index_params=self._build_index_params(),
            )
            self.client.load_collection(collection_name=self._collection)
        except MilvusException as e:
            raise VectorStoreError(f"Milvus index reset failed: {e}", operation="reset") from e
        logger.info(f"{__name__}:reset_index - Index rebuilt for {self._collection}")

    def health_check(self) -> bool:
        try:
            self.client.list_collections()
        except Exception as e:
            logger.warning(f"{__name__}:health_check - Milvus unreachable: {e}")
            return False
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _delete(self, expression: str) -> None:
        try:
            if not self.client.has_collection(collection_name=self._collection):
                return
            result = self.client.delete(collection_name=self._collection, filter=expression)
        except MilvusException as e:
            raise VectorStoreError(f"Milvus delete failed: {e}", operation="delete") from e
        logger.info(
            f"{__name__}:_delete - Deleted vectors",
            extra={"filter": expression, "result": str(result)},
        )

    def _ensure_index(self) -> None:
        if self.client.list_indexes(collection_name=self._collection):
            return
        logger.info(f"{__name__}:_ensure_index - Creating index on {self._collection}")
        self.client.create_index(
            collection_name=self._collection,
            index_params=self._build_index_params(),
        )

    def _build_schema(self):
        schema = MilvusClient.create_schema(auto_id=True, enable_dynamic_field=False)
        schema.add_field(field_name="id", datatype=DataType.INT64, is_primary=True)
        schema.add_field(
            field_name="text",
            datatype=DataType.VARCHAR,
            max_length=self._settings.text_max_length,
        )
        schema.add_field(field_name=EMBEDDING_FIELD, datatype=DataType.FLOAT_VECTOR, dim=self._dimension)
        for field_name in ID_FIELDS:
            schema.add_field(
                field_name=field_name,
                datatype=DataType.VARCHAR,
                max_length=self._settings.id_max_length,
            )
        schema.add_field(field_name="metadata", datatype=DataType.JSON)
        return schema

    def _build_index_params(self):
        index_params = self.client.prepare_index_params()
        index_params.add_index(
            field_name=EMBEDDING_FIELD,
            index_type=self._settings.index_type,
            metric_type=self._settings.metric_type,
            params={
                "M": self._settings.hnsw_m,
                "efConstruction": self._settings.hnsw_ef_construction,
            },
        )
        return index_params

    def _to_row(self, record: VectorRecord) -> dict[str, Any]:
        text = self._fit_text(record.text)
        metadata = record.metadata
        if text != record.text:
            # Stored text is a prefix of the chunk; readers see the flag
            metadata = {**metadata, "truncated": True}
            logger.warning(
                f"{__name__}:_to_row - Truncated chunk text to {self._settings.text_max_length} bytes",
                extra={
                    "document_id": record.document_id,
                    "chunk_index": record.metadata.get("chunk_index"),
                    "original_bytes": len(record.text.encode("utf-8")),
                },
            )
        return {
            "text": text,
            EMBEDDING_FIELD: record.embedding,
            "owner_id": record.owner_id,
            "subject_id": record.subject_id,
            "topic_id": record.topic_id,
            "document_id": record.document_id,
            "metadata": metadata,
        }

    def _fit_text(self, text: str) -> str:
        # VARCHAR max_length counts bytes
        encoded = text.encode("utf-8")
        limit = self._settings.text_max_length
        if len(encoded) <= limit:
            return text
        return encoded[:limit].decode("utf-8", errors="ignore")

    @staticmethod
    def _to_result(hit: Any) -> VectorSearchResult:
        entity = hit["entity"]
        return VectorSearchResult(
            id=hit["id"],
            text=entity.get("text", ""),
            score=float(hit["distance"]),
            owner_id=entity.get("owner_id", ""),
            subject_id=entity.get("subject_id", ""),
            topic_id=entity.get("topic_id", ""),
            document_id=entity.get("document_id", ""),
            metadata=entity.get("metadata") or {},
        )
