"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions inherit from.
All specialized exceptions are in their respective themed modules.

Author: System Architect
Date: 2025-12-08
"""

from typing import Any

from src.core.config.constants import MSG_INTERNAL_ERROR


class ScreenshotGatewayError(Exception):
    """
    Base exception for all screenshot gateway errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Thread ID correlation
    - Structured error logging
    - A fixed, non-leaking public response body per error type

    Attributes:
        message: Internal error message (logged, never returned to callers)
        thread_id: Thread ID for correlation (if available)
        details: Additional error details (dict)
        status_code: HTTP status the API layer maps this error to
        public_message: Plain-text body returned to the caller

    Example:
        raise UpstreamFailureError(
            "Rendering API returned 429",
            details={"upstream_status": 429},
        )
    """

    status_code: int = 500
    public_message: str = MSG_INTERNAL_ERROR

    def __init__(
        self,
        message: str | None = None,
        thread_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.public_message
        self.thread_id = thread_id
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, message, thread_id, status_code and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "thread_id": self.thread_id,
            "status_code": self.status_code,
            "details": self.details,
        }

    def with_context(self, **context) -> "ScreenshotGatewayError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        thread_id_str = f", thread_id='{self.thread_id}'" if self.thread_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{thread_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        thread_id: str | None = None,
        **details
    ) -> "ScreenshotGatewayError":
        """
        Create an error from another exception.

        Useful for wrapping third-party exceptions with additional context.

        Example:
            >>> try:
            ...     await redis.connect()
            ... except redis.ConnectionError as e:
            ...     raise CacheConnectionError.from_exception(e, host="localhost")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, thread_id=thread_id, details=error_details)


class ConfigurationError(ScreenshotGatewayError):
    """Raised when configuration is invalid or missing."""
    pass


class InternalServiceError(ScreenshotGatewayError):
    """
    Raised when an unexpected failure happens while serving a request.

    The original exception is chained (``raise ... from exc``) and logged;
    callers only ever see the generic public message.
    """
    pass
