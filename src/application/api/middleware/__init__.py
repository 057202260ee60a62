"""
Middleware Package
==================

AVAILABLE MIDDLEWARE:
---------------------
1. error_handler: Last-resort plain-text 500 for unhandled exceptions
2. request_logging: Request/response log lines with signatures redacted

MIDDLEWARE ORDERING:
--------------------
Middleware executes in order for requests and in reverse order for
responses; the last one added runs first:

Request flow:  Client → ErrorHandling → RequestLogging → Handler
Response flow: Handler → RequestLogging → ErrorHandling → Client
"""

from fastapi import FastAPI

from src.core.logging.logger import get_logger

from .error_handler import ErrorHandlingMiddleware
from .request_logging import RequestLoggingMiddleware

logger = get_logger(__name__)


def setup_middleware(app: FastAPI) -> None:
    """
    Register all middleware components in the correct order.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(RequestLoggingMiddleware)
    # Added last so it runs first and wraps everything else
    app.add_middleware(ErrorHandlingMiddleware)

    logger.info("Middleware components registered")


__all__ = [
    "setup_middleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
]
