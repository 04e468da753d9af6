"""
Aggregated application settings.

Groups the per-concern settings (database, vector store, ingestion,
generation) under one object that the service container is built from.

Dependencies: pydantic_settings, lectern.configs.*
System role: Single configuration entry point
"""

from functools import lru_cache

from pydantic import Field

from lectern.configs.base import BaseSettings
from lectern.configs.database import DatabaseSettings
from lectern.configs.generation import GenerationSettings
from lectern.configs.ingestion import IngestionSettings
from lectern.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """All settings groups; each reads its own prefixed environment variables."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide settings, read from the environment and .env once.

    Usage:
        from lectern.configs import get_settings
        settings = get_settings()
    """
    return Settings()
