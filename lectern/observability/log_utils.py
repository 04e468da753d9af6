"""
Structured logging helpers.

Log records must never carry chunk text, extracted documents or embedding
vectors in full: strings are clipped, sequences and mappings are reduced to
their size, raw bytes to their length.

Dependencies: logging (stdlib)
System role: Safe `extra=` payloads for pipeline and API logs
"""

import logging
from collections.abc import Mapping
from typing import Any


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a value for a log record.

    Args:
        value: Anything, including vectors and document text
        max_length: Longest string kept before clipping

    Returns:
        str: Loggable representation
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        return f"bytes({len(value)})"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, Mapping):
        return f"dict({len(value)} keys)"

    try:
        text = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"
    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log at `level` with every context value passed through safe_log_value()."""
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context: Any,
) -> None:
    """
    Log an exception with traceback, its type and a clipped message.

    Args:
        logger: Destination logger
        message: Log message
        exc: The exception being handled
        **context: Extra fields (document id, file name, ...)
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc), max_length=500)
    logger.exception(message, extra=extra)
