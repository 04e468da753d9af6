"""
Vector store maintenance endpoints.

Routes: POST /vector-store/reset

Dependencies: lectern.application.services
System role: Operator HTTP API for the vector index
"""

from fastapi import APIRouter, Depends

from lectern.api.deps import get_index_service
from lectern.application.services.index_service import VectorIndexService
from lectern.models.document import VectorIndexResetResponse

from .error_handling import handle_api_errors

router = APIRouter(prefix="/vector-store", tags=["vector-store"])


@router.post("/reset", response_model=VectorIndexResetResponse)
@handle_api_errors
async def reset_vector_index(
    index_service: VectorIndexService = Depends(get_index_service),
) -> VectorIndexResetResponse:
    """Drop and recreate the similarity index, then reload the collection."""
    await index_service.reset_index()
    return VectorIndexResetResponse(success=True, message="Vector index rebuilt")
