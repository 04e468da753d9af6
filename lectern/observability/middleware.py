"""
HTTP middleware for request tracing.

CorrelationMiddleware accepts or mints an X-Correlation-ID and echoes it on
the response. RequestLoggingMiddleware logs one line per request with the
status, latency and the calling owner.

Dependencies: fastapi, starlette
System role: Per-request observability
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
OWNER_HEADER = "X-User-ID"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with timing; unhandled errors are logged and re-raised."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "owner_id": request.headers.get(OWNER_HEADER),
            "correlation_id": getattr(request.state, "correlation_id", None),
        }

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{context['method']} {context['path']} - Unhandled {type(e).__name__}",
                extra={**context, "process_time_ms": _elapsed_ms(start), "error_msg": str(e)},
            )
            raise

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{context['method']} {context['path']} - {response.status_code}",
            extra={**context, "status_code": response.status_code, "process_time_ms": _elapsed_ms(start)},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to request.state and the response headers."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
