"""
Scope and owner cascade deletion endpoints.

Routes:
- DELETE /scopes/{scope_id} - Delete documents and vectors tagged with a subject or topic id
- DELETE /owner-data - Delete everything the owner has

Dependencies: lectern.application.services
System role: Cascade deletion HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from lectern.api.deps import get_owner_id, get_scope_service
from lectern.application.services.scope_service import ScopeService
from lectern.models.document import DeletionResponse

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scopes"])


@router.delete("/scopes/{scope_id}", response_model=DeletionResponse)
@handle_api_errors
async def delete_scope(
    scope_id: str,
    owner_id: str = Depends(get_owner_id),
    scope_service: ScopeService = Depends(get_scope_service),
) -> DeletionResponse:
    """
    Cascade-delete a subject or topic.

    Raises:
        HTTPException(500): Vector deletion failed; records are left in place
    """
    deleted = await scope_service.delete_scope(owner_id, scope_id)
    return DeletionResponse(deleted_documents=deleted, scope_id=scope_id)


@router.delete("/owner-data", response_model=DeletionResponse)
@handle_api_errors
async def delete_owner_data(
    owner_id: str = Depends(get_owner_id),
    scope_service: ScopeService = Depends(get_scope_service),
) -> DeletionResponse:
    """Delete every document, vector and stored upload of the owner."""
    logger.warning("Owner data purge requested", extra={"owner_id": owner_id})
    deleted = await scope_service.purge_owner(owner_id)
    return DeletionResponse(deleted_documents=deleted)
