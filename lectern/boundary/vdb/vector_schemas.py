"""
Vector database schemas.

Pydantic models for vector operations (records, filters, results).
Used for type-safe vector store interactions.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Payload fields stored next to every vector
RECORD_FIELDS = ("text", "owner_id", "subject_id", "topic_id", "document_id", "metadata")


def quote_literal(value: str) -> str:
    """Render a string as a double-quoted Milvus expression literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class VectorRecord(BaseModel):
    """
    One stored chunk vector with ownership and scoping tags.

    Missing scope ids are stored as empty strings so every record carries
    the full set of filterable fields.
    """

    text: str = Field(description="Chunk text")
    embedding: list[float] = Field(description="Chunk embedding vector")
    owner_id: str = Field(min_length=1, description="Owner of the source document")
    subject_id: str = Field(default="", description="Coarse scope id, empty when unscoped")
    topic_id: str = Field(default="", description="Fine scope id, empty when unscoped")
    document_id: str = Field(min_length=1, description="Source document id")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Chunk metadata (index, source)")

    @field_validator("subject_id", "topic_id", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class VectorScope(BaseModel):
    """Optional subject/topic scope applied to a search."""

    subject_id: str | None = None
    topic_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.subject_id or self.topic_id)


class VectorFilter(BaseModel):
    """
    Metadata filter for similarity search.

    The owner condition is always applied. When document ids are given they
    replace the subject/topic conditions entirely.
    """

    owner_id: str
    subject_id: str | None = None
    topic_id: str | None = None
    document_ids: list[str] | None = None

    @classmethod
    def build(
        cls,
        owner_id: str,
        scope: VectorScope | None = None,
        document_ids: list[str] | None = None,
    ) -> "VectorFilter":
        scope = scope or VectorScope()
        return cls(
            owner_id=owner_id,
            subject_id=scope.subject_id or None,
            topic_id=scope.topic_id or None,
            document_ids=list(document_ids) if document_ids else None,
        )

    @property
    def uses_document_ids(self) -> bool:
        return bool(self.document_ids)

    @property
    def has_scope(self) -> bool:
        return bool(self.subject_id or self.topic_id)

    def scope_only(self) -> "VectorFilter":
        """Same filter with the document id restriction removed."""
        return self.model_copy(update={"document_ids": None})

    def to_expression(self) -> str:
        """
        Render the filter as a Milvus boolean expression.

        Returns:
            str: e.g. ``owner_id == "u1" && (document_id in ["d1", "d2"])``
        """
        clauses = [f"owner_id == {quote_literal(self.owner_id)}"]
        if self.uses_document_ids:
            ids = ", ".join(quote_literal(doc_id) for doc_id in self.document_ids)
            clauses.append(f"(document_id in [{ids}])")
        else:
            if self.subject_id:
                clauses.append(f"subject_id == {quote_literal(self.subject_id)}")
            if self.topic_id:
                clauses.append(f"topic_id == {quote_literal(self.topic_id)}")
        return " && ".join(clauses)

    def matches(self, fields: Mapping[str, Any]) -> bool:
        """Evaluate the filter against a record's stored fields."""
        if fields.get("owner_id") != self.owner_id:
            return False
        if self.uses_document_ids:
            return fields.get("document_id") in self.document_ids
        if self.subject_id and fields.get("subject_id") != self.subject_id:
            return False
        if self.topic_id and fields.get("topic_id") != self.topic_id:
            return False
        return True


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    id: int | str = Field(description="Store-assigned record id (monotonic per insert)")
    text: str = Field(description="Chunk text content")
    score: float = Field(description="Cosine similarity in [-1, 1]")
    owner_id: str
    subject_id: str = ""
    topic_id: str = ""
    document_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)
