"""
FAISS vector store for local development and tests.

Provides the same interface as MilvusVectorStore on top of LangChain's FAISS
wrapper. Vectors are L2-normalized and indexed with inner product, so scores
are cosine similarities. Filtering happens in-process on record metadata.

Dependencies: faiss-cpu, numpy, langchain_community
System role: Local vector store for development RAG
"""

import logging
import threading
import uuid
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import faiss
import numpy as np
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_community.vectorstores.utils import DistanceStrategy
from langchain_core.embeddings import Embeddings

from lectern.boundary.vdb.base_store import BaseVectorStore, rank_results
from lectern.boundary.vdb.vector_schemas import VectorFilter, VectorRecord, VectorSearchResult
from lectern.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

SEQUENCE_KEY = "_seq"


class FAISSVectorStore(BaseVectorStore):
    """
    FAISS-backed vector store.

    A flat inner-product index holds the vectors; the LangChain docstore holds
    text and tags. A monotonically increasing sequence number is stored with
    every record to keep tie ordering stable. Persists to disk when a
    directory is configured.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int = 768,
        index_name: str = "study_material_chunks",
        persist_directory: str | None = None,
    ) -> None:
        """
        Initialize the store. The index is created on first use.

        Args:
            embeddings: Embedding function required by the LangChain wrapper
            dimension: Vector dimension
            index_name: File stem used when persisting
            persist_directory: Directory for index files, None for in-memory only
        """
        self._embeddings = embeddings
        self._dimension = dimension
        self._index_name = index_name
        self._persist_directory = Path(persist_directory) if persist_directory else None
        self._lock = threading.RLock()
        self._store: FAISS | None = None
        self._next_seq = 0

    def ensure_collection(self, name: str | None = None, dimension: int | None = None) -> None:
        with self._lock:
            if self._store is not None:
                if dimension and dimension != self._store.index.d:
                    raise VectorStoreError(
                        f"Existing index has dimension {self._store.index.d}, requested {dimension}",
                        operation="ensure_collection",
                    )
                return
            if name:
                self._index_name = name
            if dimension:
                self._dimension = dimension
            self._store = self._load_index() or self._create_index()
            logger.info(
                f"{__name__}:ensure_collection - Index ready",
                extra={"index_name": self._index_name, "dimension": self._dimension},
            )

    def insert_many(self, records: Sequence[VectorRecord]) -> int:
        records = list(records)
        if not records:
            return 0
        for record in records:
            if len(record.embedding) != self._dimension:
                raise VectorStoreError(
                    f"Embedding dimension {len(record.embedding)} does not match index dimension {self._dimension}",
                    operation="insert",
                    details={"document_id": record.document_id},
                )

        vectors = self._normalize([record.embedding for record in records])
        with self._lock:
            store = self._require_store()
            metadatas = []
            for record in records:
                metadatas.append({
                    "owner_id": record.owner_id,
                    "subject_id": record.subject_id,
                    "topic_id": record.topic_id,
                    "document_id": record.document_id,
                    "metadata": record.metadata,
                    SEQUENCE_KEY: self._next_seq,
                })
                self._next_seq += 1
            try:
                store.add_embeddings(
                    text_embeddings=list(zip([r.text for r in records], vectors.tolist())),
                    metadatas=metadatas,
                    ids=[str(uuid.uuid4()) for _ in records],
                )
            except Exception as e:
                raise VectorStoreError(f"FAISS insert failed: {e}", operation="insert") from e
            self._persist()

        logger.debug(f"{__name__}:insert_many - Inserted {len(records)} vectors")
        return len(records)

    def _search(
        self,
        query_vector: list[float],
        vector_filter: VectorFilter,
        top_k: int,
    ) -> list[VectorSearchResult]:
        with self._lock:
            store = self._require_store()
            total = store.index.ntotal
            if total == 0:
                return []
            query = self._normalize([query_vector])[0].tolist()
            # Filter over the whole index so narrow filters still reach top_k
            hits = store.similarity_search_with_score_by_vector(
                query,
                k=total,
                filter=vector_filter.matches,
                fetch_k=total,
            )

        results = [
            VectorSearchResult(
                id=doc.metadata[SEQUENCE_KEY],
                text=doc.page_content,
                score=float(score),
                owner_id=doc.metadata["owner_id"],
                subject_id=doc.metadata.get("subject_id", ""),
                topic_id=doc.metadata.get("topic_id", ""),
                document_id=doc.metadata["document_id"],
                metadata=doc.metadata.get("metadata", {}),
            )
            for doc, score in hits
        ]
        return rank_results(results, top_k)

    def delete_by_document(self, document_id: str) -> None:
        self._delete_where(lambda meta: meta.get("document_id") == document_id)

    def delete_by_scope(self, scope_id: str, owner_id: str | None = None) -> None:
        def in_scope(meta: Mapping[str, Any]) -> bool:
            if owner_id is not None and meta.get("owner_id") != owner_id:
                return False
            return scope_id in (meta.get("subject_id"), meta.get("topic_id"))

        self._delete_where(in_scope)

    def delete_by_owner(self, owner_id: str) -> None:
        self._delete_where(lambda meta: meta.get("owner_id") == owner_id)

    def count_by_document(self, document_id: str) -> int:
        with self._lock:
            return len(self._matching_ids(lambda meta: meta.get("document_id") == document_id))

    def reset_index(self) -> None:
        """Rebuild the flat index from its own stored vectors, preserving order."""
        with self._lock:
            store = self._require_store()
            total = store.index.ntotal
            rebuilt = faiss.IndexFlatIP(self._dimension)
            if total:
                rebuilt.add(store.index.reconstruct_n(0, total))
            store.index = rebuilt
            self._persist()
        logger.info(f"{__name__}:reset_index - Index rebuilt with {total} vectors")

    def _delete_where(self, predicate: Callable[[Mapping[str, Any]], bool]) -> None:
        with self._lock:
            ids = self._matching_ids(predicate)
            if not ids:
                return
            try:
                self._store.delete(ids)
            except Exception as e:
                raise VectorStoreError(f"FAISS delete failed: {e}", operation="delete") from e
            self._persist()
        logger.info(f"{__name__}:_delete_where - Deleted {len(ids)} vectors")

    def _matching_ids(self, predicate: Callable[[Mapping[str, Any]], bool]) -> list[str]:
        store = self._require_store()
        return [
            doc_id
            for doc_id in store.index_to_docstore_id.values()
            if predicate(store.docstore.search(doc_id).metadata)
        ]

    def _require_store(self) -> FAISS:
        if self._store is None:
            self.ensure_collection()
        return self._store

    def _create_index(self) -> FAISS:
        return FAISS(
            embedding_function=self._embeddings,
            index=faiss.IndexFlatIP(self._dimension),
            docstore=InMemoryDocstore(),
            index_to_docstore_id={},
            distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
        )

    def _load_index(self) -> FAISS | None:
        if self._persist_directory is None:
            return None
        if not (self._persist_directory / f"{self._index_name}.faiss").exists():
            return None
        store = FAISS.load_local(
            str(self._persist_directory),
            self._embeddings,
            index_name=self._index_name,
            allow_dangerous_deserialization=True,
            distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
        )
        if store.index.d != self._dimension:
            raise VectorStoreError(
                f"Persisted index has dimension {store.index.d}, expected {self._dimension}",
                operation="ensure_collection",
            )
        sequences = [
            store.docstore.search(doc_id).metadata.get(SEQUENCE_KEY, -1)
            for doc_id in store.index_to_docstore_id.values()
        ]
        self._next_seq = max(sequences, default=-1) + 1
        logger.info(f"{__name__}:_load_index - Loaded {store.index.ntotal} vectors from {self._persist_directory}")
        return store

    def _persist(self) -> None:
        if self._persist_directory is None or self._store is None:
            return
        self._persist_directory.mkdir(parents=True, exist_ok=True)
        self._store.save_local(str(self._persist_directory), index_name=self._index_name)

    @staticmethod
    def _normalize(vectors: list[list[float]]) -> np.ndarray:
        array = np.ascontiguousarray(np.asarray(vectors, dtype=np.float32))
        faiss.normalize_L2(array)
        return array
