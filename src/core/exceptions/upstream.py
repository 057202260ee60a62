"""
Upstream Exceptions

Failures of the external rendering service.

Author: System Architect
Date: 2025-12-08
"""

from src.core.config.constants import MSG_UPSTREAM_FAILURE
from src.core.exceptions.base import ScreenshotGatewayError


class UpstreamError(ScreenshotGatewayError):
    """Base exception for rendering service errors."""

    status_code = 502
    public_message = MSG_UPSTREAM_FAILURE


class UpstreamFailureError(UpstreamError):
    """
    Raised when the rendering service returned a non-2xx status or could
    not be reached.

    The upstream status and body are kept in ``details`` for the server
    log only.

    Common causes:
    - Target page never reached network idle within the navigation timeout
    - Rendering quota exhausted (429)
    - Invalid account id or API token (401/403)
    - Network failure between the gateway and the rendering API
    """
    pass
