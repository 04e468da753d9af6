"""
Models for document processing pipeline.

Exports: Chunk, IngestionJob, IngestionOutcome
"""

from .chunk import Chunk
from .ingestion_job import IngestionJob, IngestionOutcome

__all__ = [
    "Chunk",
    "IngestionJob",
    "IngestionOutcome",
]
