"""
Application Validators Module

Validation layer for inbound requests.

USAGE:
------
    from src.application.validators import ScreenshotRequestValidator

    validator = ScreenshotRequestValidator()
    descriptor, signature = validator.validate(request.query_params)
"""

from src.application.validators.base import BaseValidator
from src.application.validators.screenshot_validator import (
    ScreenshotRequestValidator,
    ValidatedRequest,
)

__all__ = [
    "BaseValidator",
    "ScreenshotRequestValidator",
    "ValidatedRequest",
]
