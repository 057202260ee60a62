"""
Error Handling Middleware
=========================

Last line of defence for exceptions that escaped both the route handlers
and the exception handlers registered in ``create_app``.

FastAPI error handling layers in this application:

1. ``ScreenshotGatewayError`` handler: known errors → ``public_message``
   with the error's status code
2. This middleware: anything else → plain-text 500 "Internal server error"

The full exception is logged server-side; the response body never carries
exception text, types or tracebacks.
"""

from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.core.config.constants import MSG_INTERNAL_ERROR, RequestOutcome
from src.core.logging.logger import get_logger
from src.infrastructure.monitoring.metrics_collector import get_metrics_collector

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware converting unhandled exceptions into a generic 500.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request; on an unhandled exception log it and return 500.

        Args:
            request: The incoming HTTP request
            call_next: Callable to invoke the next middleware/handler

        Returns:
            Response: Either normal response or the generic error response
        """
        try:
            return await call_next(request)

        except Exception as e:
            # Query strings carry signatures; log the path only
            logger.error(
                f"Unhandled exception in request: {request.method} {request.url.path}",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                exc_info=True,
            )

            get_metrics_collector().record_request(RequestOutcome.INTERNAL_ERROR.value)

            return PlainTextResponse(MSG_INTERNAL_ERROR, status_code=500)
