"""
Ingestion pipeline configuration.

Chunking parameters, upload storage, worker pool sizing and the
embedding/extraction model selection.

Dependencies: pydantic, pydantic_settings
System role: Configuration for the document ingestion pipeline
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from lectern.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """Document ingestion pipeline configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=2000, gt=0, description="Maximum merged chunk size in characters")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters carried over from the previous chunk")
    separators: list[str] = Field(
        default=["\n\n", "\n", " ", ""],
        description="Separators tried in order, coarse to fine",
    )

    upload_directory: str = Field(default="./uploads", description="Where uploaded files are stored")
    worker_concurrency: int = Field(default=4, gt=0, description="Number of ingestion workers")
    shutdown_timeout_seconds: float = Field(
        default=30.0,
        description="How long shutdown waits for queued ingestion jobs",
    )

    embedding_provider: str = Field(
        default="google",
        description="Embedding backend: 'google' (Gemini) or 'fake' (deterministic, offline)",
    )
    embedding_model: str = Field(
        default="models/text-embedding-004",
        description="Google embedding model ID",
    )
    extraction_model: str = Field(
        default="gemini-2.0-flash-lite",
        description="Multimodal model used to extract text from images and media",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self
