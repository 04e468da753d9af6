"""
Request validation utilities.

Business validation not covered by Pydantic models.

Dependencies: lectern.core.exceptions
System role: Request validation
"""

from typing import Any

from lectern.core.exceptions import ValidationError

MAX_QUERY_LENGTH = 4000


def validate_query_text(query: Any) -> str:
    """
    Validate the question of a query request.

    Args:
        query: Raw query value from the request body

    Returns:
        str: The stripped question

    Raises:
        ValidationError: If the query is missing, not a string, blank or too long
    """
    if query is None:
        raise ValidationError("Query is required", field="query")
    if not isinstance(query, str):
        raise ValidationError("Query must be a string", field="query")

    text = query.strip()
    if not text:
        raise ValidationError("Query cannot be empty or whitespace-only", field="query")
    if len(text) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"Query cannot exceed {MAX_QUERY_LENGTH} characters",
            field="query",
        )
    return text
