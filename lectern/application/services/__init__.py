"""Service orchestrators."""

from .document_service import DocumentService, IncomingFile, IngestionAccepted
from .index_service import VectorIndexService
from .query_service import QueryService
from .scope_service import ScopeService

__all__ = [
    "DocumentService",
    "IncomingFile",
    "IngestionAccepted",
    "QueryService",
    "ScopeService",
    "VectorIndexService",
]
