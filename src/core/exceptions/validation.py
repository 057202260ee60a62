"""
Validation Exceptions

All exceptions raised while parsing and bounds-checking request parameters.
Every subclass maps to HTTP 400 with its own response body.

Author: System Architect
Date: 2025-12-08
"""

from src.core.config.constants import (
    MSG_INVALID_HEIGHT,
    MSG_INVALID_URL,
    MSG_INVALID_WIDTH,
    MSG_MISSING_PARAMETERS,
)
from src.core.exceptions.base import ScreenshotGatewayError


class ValidationError(ScreenshotGatewayError):
    """
    Raised when request validation fails.

    This is the base class for all validation-related errors.
    """

    status_code = 400

    def __init__(self, message: str | None = None, field: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        if field:
            self.details["field"] = field


class MissingParameterError(ValidationError):
    """Raised when ``url``, ``version`` or ``sig`` is absent or empty."""

    public_message = MSG_MISSING_PARAMETERS


class InvalidUrlError(ValidationError):
    """Raised when ``url`` is not an absolute URI."""

    public_message = MSG_INVALID_URL


class InvalidWidthError(ValidationError):
    """Raised when ``w`` is not an integer within the viewport width bounds."""

    public_message = MSG_INVALID_WIDTH


class InvalidHeightError(ValidationError):
    """Raised when ``h`` is neither ``"full"`` nor an integer within the height bounds."""

    public_message = MSG_INVALID_HEIGHT
