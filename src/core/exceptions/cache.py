"""
Cache-Related Exceptions

All exceptions related to the artifact store (Redis, in-memory).
These never reach the caller: lookups degrade to a miss and background
writes are logged.

Author: System Architect
Date: 2025-12-08
"""

from src.core.exceptions.base import ScreenshotGatewayError


class CacheError(ScreenshotGatewayError):
    """Base exception for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when unable to connect to the cache (Redis).

    Common causes:
    - Redis server is down
    - Network connectivity issues
    - Incorrect host/port configuration
    - Authentication failure
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when a cache key operation fails.

    Common causes:
    - Operation timeout
    - Memory limit exceeded
    - Corrupt stored artifact (unreadable metadata)
    """
    pass
