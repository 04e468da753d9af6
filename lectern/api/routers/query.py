"""
Query API endpoint.

Routes: POST /query

Dependencies: lectern.application.services, lectern.models.query
System role: Question answering HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from lectern.api.deps import get_owner_id, get_query_service
from lectern.application.services.query_service import QueryService
from lectern.models.query import QueryRequest, QueryResponse

from .error_handling import handle_api_errors
from .validators import validate_query_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
@handle_api_errors
async def query_documents(
    request: QueryRequest,
    owner_id: str = Depends(get_owner_id),
    query_service: QueryService = Depends(get_query_service),
) -> QueryResponse:
    """
    Answer a question from the owner's study material.

    Args:
        request: Question, optional scope hints and top_k
        owner_id: Injected from X-User-ID
        query_service: Injected QueryService

    Returns:
        QueryResponse: Answer, relevance score and sources

    Raises:
        HTTPException(400): Query missing, not a string, or blank
        HTTPException(500): Generative model unavailable or failed
    """
    query_text = validate_query_text(request.query)

    logger.info(
        "Query received",
        extra={"owner_id": owner_id, "query_length": len(query_text)},
    )

    return await query_service.answer(
        owner_id,
        query_text,
        scope_hints=request.scope_hints,
        top_k=request.top_k,
    )
