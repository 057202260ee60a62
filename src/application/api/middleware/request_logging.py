"""
Request Logging Middleware
==========================

Logs one line when a request arrives and one when it completes (status
code and duration). Query strings are logged with the ``sig`` value
replaced, and sensitive headers are redacted.

Request bodies are never logged; responses are images.
"""

import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.core.config.constants import PARAM_SIGNATURE
from src.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
    "x-auth-token",
}


def sanitize_query(request: Request) -> str | None:
    """Render the query string with the signature value redacted."""
    if not request.query_params:
        return None
    return "&".join(
        f"{key}={'[REDACTED]' if key == PARAM_SIGNATURE else value}"
        for key, value in request.query_params.multi_items()
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    Logs:
    - Request: method, path, sanitized query, sanitized headers
    - Response: status code, duration
    - Errors: exception type (the exception is re-raised)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path

        logger.info(
            f"Incoming request: {method} {path}",
            method=method,
            path=path,
            query_params=sanitize_query(request),
            headers=self._sanitize_headers(dict(request.headers)),
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path}",
                method=method,
                path=path,
                error_type=type(e).__name__,
                duration_seconds=round(time.perf_counter() - start_time, 4),
            )
            raise

        logger.info(
            f"Request completed: {method} {path}",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_seconds=round(time.perf_counter() - start_time, 4),
        )
        return response

    def _sanitize_headers(self, headers: dict) -> dict:
        """Replace values of sensitive headers with "[REDACTED]"."""
        return {
            key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }
