"""
Core Module

Foundational components: configuration, logging, exceptions, request
signing and resilience primitives.
"""

from .exceptions import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    ConfigurationError,
    InternalServiceError,
    InvalidSignatureError,
    ScreenshotGatewayError,
    UpstreamFailureError,
    ValidationError,
)
from .logging import (
    clear_thread_id,
    get_logger,
    get_thread_id,
    log_stage,
    set_thread_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_thread_id",
    "get_thread_id",
    "clear_thread_id",
    "log_stage",
    "ScreenshotGatewayError",
    "ConfigurationError",
    "InternalServiceError",
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "InvalidSignatureError",
    "UpstreamFailureError",
    "ValidationError",
]
