"""
Vector database boundary layer.

Exports the store interface, schemas and the settings-driven factory.
Backends (Milvus, FAISS) are imported lazily by the factory.
"""

from lectern.boundary.vdb.base_store import BaseVectorStore
from lectern.boundary.vdb.vector_schemas import (
    VectorFilter,
    VectorRecord,
    VectorScope,
    VectorSearchResult,
)
from lectern.boundary.vdb.vector_store_factory import create_vector_store

__all__ = [
    "BaseVectorStore",
    "VectorFilter",
    "VectorRecord",
    "VectorScope",
    "VectorSearchResult",
    "create_vector_store",
]
