"""
Document processing pipeline for ingestion.

Extraction, chunking and embedding tasks, the per-document coordinator and
the background worker pool that runs it.

Dependencies: langchain_community, langchain_text_splitters, langchain_google_genai, pydantic
System role: Document ingestion pipeline
"""

from .coordinator import IngestionCoordinator
from .models import Chunk, IngestionJob, IngestionOutcome
from .tasks import ChunkingTask, EmbeddingTask, ExtractionTask
from .worker_pool import IngestionWorkerPool

__all__ = [
    "Chunk",
    "ChunkingTask",
    "EmbeddingTask",
    "ExtractionTask",
    "IngestionCoordinator",
    "IngestionJob",
    "IngestionOutcome",
    "IngestionWorkerPool",
]
