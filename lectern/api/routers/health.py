"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/vector-store

Dependencies: lectern.api.deps
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from lectern.api.deps import get_db, get_index_service
from lectern.application.services.index_service import VectorIndexService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"{__name__}:health_check_db - Database unreachable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        )
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/vector-store", response_model=HealthResponse)
async def health_check_vector_store(
    index_service: VectorIndexService = Depends(get_index_service),
) -> HealthResponse:
    """Vector store health check."""
    if not await index_service.is_healthy():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Vector store unreachable",
        )
    return HealthResponse(status="healthy", message="Vector store accessible")
