"""
Chunk domain model for document processing pipeline.

Represents a contiguous slice of extracted text with its position in the
chunk sequence, a deterministic ID and an optional embedding.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Document chunk with optional embedding vector."""

    id: str = Field(description="Deterministic chunk identifier (content hash)")
    text: str = Field(description="Chunk text content, including leading overlap")
    index: int = Field(ge=0, description="Zero-based position in the chunk sequence")
    document_id: str | None = Field(default=None, description="Source document id")
    metadata: dict = Field(default_factory=dict, description="Chunk metadata (source, index)")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
