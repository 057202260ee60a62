"""
Security Exceptions

Request authentication failures.

Author: System Architect
Date: 2025-12-08
"""

from src.core.config.constants import MSG_INVALID_SIGNATURE
from src.core.exceptions.base import ScreenshotGatewayError


class InvalidSignatureError(ScreenshotGatewayError):
    """
    Raised when the supplied signature does not match the canonical message.

    A malformed signature and a wrong signature are indistinguishable to
    the caller: both produce 403 with the same body.
    """

    status_code = 403
    public_message = MSG_INVALID_SIGNATURE
