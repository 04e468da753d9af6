"""
Retrieval domain models.

Dependencies: pydantic
System role: Data passed between the query planner, answer composer and services
"""

from pydantic import BaseModel, Field


class ScopeHints(BaseModel):
    """Optional narrowing of a query to a subject, topic or explicit documents."""

    subject_id: str | None = Field(default=None, description="Restrict to this subject")
    topic_id: str | None = Field(default=None, description="Restrict to this topic")
    document_ids: list[str] | None = Field(
        default=None,
        description="Restrict to these documents; takes precedence over subject/topic",
    )


class RetrievedChunk(BaseModel):
    """One chunk returned for a query, with its cosine similarity."""

    text: str
    score: float = Field(description="Cosine similarity in [-1, 1]")
    document_id: str
    subject_id: str = ""
    topic_id: str = ""
    metadata: dict = Field(default_factory=dict)


class ComposedAnswer(BaseModel):
    """Generated answer and the top retrieval score behind it."""

    answer: str
    relevance_score: float = Field(description="Score of the best chunk, 0 when none")
