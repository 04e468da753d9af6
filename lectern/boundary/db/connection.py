"""
Database connection management.

Provides async SQLAlchemy engine and session factory construction, plus
table bootstrap for local development.

Dependencies: sqlalchemy, lectern.configs
System role: Database connection lifecycle management
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from lectern.boundary.db.base import Base
from lectern.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def create_engine_from_settings(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early. SQLite URLs skip pool sizing.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = create_engine_from_settings(get_settings().database)
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    if db_config.is_sqlite:
        return create_async_engine(
            db_config.async_database_url,
            echo=db_config.echo_sql,
        )

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Sessions use autoflush=False and expire_on_commit=False for explicit
    transaction control; ORM instances stay readable after commit.

    Args:
        engine: Async engine to bind sessions to

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = create_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all registered tables that do not exist yet.

    Args:
        engine: Async engine to run DDL on
    """
    # Import models so they register with Base.metadata
    from lectern.boundary.db.models import document_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Tables ensured")
