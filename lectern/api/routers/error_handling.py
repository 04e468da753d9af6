"""
API error handling utilities.

Provides a decorator that maps domain exceptions to HTTP responses
consistently across routers.

Dependencies: fastapi, lectern.core.exceptions
System role: Exception to HTTP status translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from lectern.core.exceptions import (
    DocumentNotFoundError,
    GenerationError,
    SessionNotFoundError,
    ValidationError,
    VectorStoreError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_api_errors(func: F) -> F:
    """
    Decorator to transform domain errors into HTTPExceptions.

    Mapping:
    - ValidationError -> 400
    - DocumentNotFoundError, SessionNotFoundError -> 404
    - GenerationError, VectorStoreError, anything else -> 500
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ValidationError as e:
            logger.warning(
                "Invalid request",
                extra={"error": e.message, "details": e.details},
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except (DocumentNotFoundError, SessionNotFoundError) as e:
            logger.warning("Resource not found", extra={"error": e.message, "details": e.details})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except GenerationError as e:
            logger.error("Answer generation failed", extra={"error": e.message})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except VectorStoreError as e:
            logger.error(
                "Vector store operation failed",
                extra={"error": e.message, "details": e.details},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Vector store operation failed: {e.message}",
            )

        except Exception as e:
            logger.exception(
                "Unexpected failure in API operation",
                extra={"error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"An internal error occurred: {str(e)}",
            )

    return wrapper  # type: ignore
