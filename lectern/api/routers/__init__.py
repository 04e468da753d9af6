"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .query import router as query_router
from .scopes import router as scopes_router
from .vector_store import router as vector_store_router

__all__ = [
    "documents_router",
    "health_router",
    "query_router",
    "scopes_router",
    "vector_store_router",
]
