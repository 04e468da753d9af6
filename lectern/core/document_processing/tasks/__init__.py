"""
Task modules for document processing pipeline.

Exports: ExtractionTask, ChunkingTask, EmbeddingTask
"""

from .chunking_task import DEFAULT_SEPARATORS, ChunkingTask
from .embedding_task import EmbeddingTask
from .extraction_task import ExtractionTask

__all__ = [
    "DEFAULT_SEPARATORS",
    "ChunkingTask",
    "EmbeddingTask",
    "ExtractionTask",
]
