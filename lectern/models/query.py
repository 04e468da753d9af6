"""
Query schemas.

The query field is typed loosely so a missing or non-string query is
reported as a 400 by the router rather than a schema error.

Dependencies: pydantic
System role: Query API contracts
"""

from typing import Any

from pydantic import BaseModel, Field

from lectern.core.retrieval.models import ScopeHints


class QueryRequest(BaseModel):
    """Question plus optional scope narrowing."""

    query: Any = Field(default=None, description="The question to answer")
    scope_hints: ScopeHints | None = Field(default=None, description="Subject/topic/document narrowing")
    top_k: int | None = Field(default=None, ge=1, le=50, description="Chunks to retrieve")


class SourceReference(BaseModel):
    """A chunk that was used as context."""

    document_id: str
    score: float
    chunk_index: int | None = None


class QueryResponse(BaseModel):
    """Generated answer with retrieval provenance."""

    answer: str
    query: str
    relevance_score: float
    sources: list[SourceReference] = Field(default_factory=list)
