"""
Exception Module

Structured exception hierarchy for the screenshot gateway.
All exceptions are organized by theme.

Module Structure:
-----------------
- **base.py**: ScreenshotGatewayError base class + ConfigurationError, InternalServiceError
- **validation.py**: Request parameter errors (400)
- **security.py**: Signature errors (403)
- **upstream.py**: Rendering service errors (502)
- **cache.py**: Artifact store errors (logged, never surfaced)

Every error carries ``status_code`` and ``public_message``; the API layer
renders ``public_message`` as the plain-text response body.

Usage:
------
```python
from src.core.exceptions import InvalidSignatureError, UpstreamFailureError
```
"""

from src.core.exceptions.base import (
    ConfigurationError,
    InternalServiceError,
    ScreenshotGatewayError,
)
from src.core.exceptions.cache import CacheConnectionError, CacheError, CacheKeyError
from src.core.exceptions.security import InvalidSignatureError
from src.core.exceptions.upstream import UpstreamError, UpstreamFailureError
from src.core.exceptions.validation import (
    InvalidHeightError,
    InvalidUrlError,
    InvalidWidthError,
    MissingParameterError,
    ValidationError,
)

__all__ = [
    # Base
    "ScreenshotGatewayError",
    "ConfigurationError",
    "InternalServiceError",
    # Cache
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    # Security
    "InvalidSignatureError",
    # Upstream
    "UpstreamError",
    "UpstreamFailureError",
    # Validation
    "ValidationError",
    "MissingParameterError",
    "InvalidUrlError",
    "InvalidWidthError",
    "InvalidHeightError",
]
