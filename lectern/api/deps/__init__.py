"""API-specific dependencies."""

from .dependencies import (
    ServiceContainer,
    get_container,
    get_db,
    get_document_service,
    get_index_service,
    get_owner_id,
    get_query_service,
    get_scope_service,
)

__all__ = [
    "ServiceContainer",
    "get_container",
    "get_db",
    "get_document_service",
    "get_index_service",
    "get_owner_id",
    "get_query_service",
    "get_scope_service",
]
