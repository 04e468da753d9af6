"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from lectern.boundary.db.CRUD import document_crud

    document = await document_crud.get_for_owner(db, document_id, owner_id)
"""

from lectern.boundary.db.CRUD.base_crud import BaseCRUD
from lectern.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
]
