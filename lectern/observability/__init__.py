"""Logging configuration, structured log helpers and HTTP middleware."""

from lectern.observability.logger import configure_logging
from lectern.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)

__all__ = [
    "configure_logging",
    "log_exception_with_context",
    "log_with_context",
    "safe_log_value",
]
