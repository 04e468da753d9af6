"""
FastAPI application with assembled routers.

Initializes the FastAPI app, builds the service container in the lifespan
and configures the uvicorn server.

Dependencies: fastapi, lectern.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lectern.api.deps.dependencies import ServiceContainer
from lectern.configs import get_settings
from lectern.observability.logger import configure_logging
from lectern.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    documents_router,
    health_router,
    query_router,
    scopes_router,
    vector_store_router,
)

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the service container (unless one was provided), starts the
    ingestion workers and releases everything on shutdown.
    """
    container = getattr(app.state, "container", None)
    if container is None:
        container = ServiceContainer(get_settings())
        app.state.container = container

    # Startup
    logger.info("Starting service container...")
    await container.startup()

    yield

    # Shutdown
    await container.shutdown()
    logger.info("Service container stopped")


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        container: Pre-built service container (tests); built from settings if None

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = container.settings if container is not None else get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Lectern Study Material API",
        description="Ingestion and retrieval of owner-scoped study material",
        version="0.1.0",
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(scopes_router, prefix="/api/v1")
    app.include_router(query_router, prefix="/api/v1")
    app.include_router(vector_store_router, prefix="/api/v1")

    return app


if __name__ == "__main__":
    uvicorn.run(
        "lectern.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
