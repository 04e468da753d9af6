"""
Vector store factory.

Returns the configured vector store implementation based on settings.

Dependencies: lectern.configs, lectern.boundary.vdb
System role: Vector store selection for dependency injection
"""

import logging

from langchain_core.embeddings import Embeddings

from lectern.boundary.vdb.base_store import BaseVectorStore
from lectern.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def create_vector_store(settings: VectorStoreSettings, embeddings: Embeddings) -> BaseVectorStore:
    """
    Build the vector store selected by ``settings.store_type``.

    Args:
        settings: Vector store settings
        embeddings: Embedding function (needed by the FAISS wrapper)

    Returns:
        BaseVectorStore: MilvusVectorStore or FAISSVectorStore

    Raises:
        ValueError: If store_type is not 'milvus' or 'faiss'
    """
    store_type = settings.store_type.lower()
    logger.info(f"{__name__}:create_vector_store - Using store_type={store_type}")

    if store_type == "milvus":
        from lectern.boundary.vdb.milvus_store import MilvusVectorStore

        return MilvusVectorStore(settings)

    if store_type == "faiss":
        from lectern.boundary.vdb.faiss_store import FAISSVectorStore

        return FAISSVectorStore(
            embeddings=embeddings,
            dimension=settings.embedding_dimension,
            index_name=settings.collection_name,
            persist_directory=settings.faiss_persist_directory,
        )

    raise ValueError(f"Invalid store_type: {settings.store_type}. Use 'milvus' or 'faiss'.")
