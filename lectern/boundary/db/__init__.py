"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - create_engine_from_settings(), create_session_factory(), create_tables()
  - DocumentModel, DocumentStatus, DocumentType: Core domain entity and enums
  - document_crud: CRUD operation singleton

Dependencies: sqlalchemy, lectern.configs
System role: Database adapter providing persistent storage for documents
and their ingestion status.
"""

from lectern.boundary.db.base import Base, TimestampMixin, UUIDMixin
from lectern.boundary.db.connection import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
)
from lectern.boundary.db.models.document_model import (
    ERROR_CONTENT_PREFIX,
    DocumentModel,
    DocumentStatus,
    DocumentType,
)
from lectern.boundary.db.CRUD import BaseCRUD, DocumentCRUD, document_crud

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "create_engine_from_settings",
    "create_session_factory",
    "create_tables",
    # Models
    "ERROR_CONTENT_PREFIX",
    "DocumentModel",
    "DocumentStatus",
    "DocumentType",
    # CRUD
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
]
