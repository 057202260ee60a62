"""
Screenshot Request Validator

Turns the raw query parameters of a screenshot request into a
RequestDescriptor plus the caller-supplied signature, or raises the
specific ValidationError for the first failing check.

VALIDATION SEQUENCE:
--------------------
1. url, version, sig present and non-empty   → MissingParameterError
2. url is an absolute URI                     → InvalidUrlError
3. w (default "1200") in [100, 3840]          → InvalidWidthError
4. h (default "800") "full" or in [100, 2160] → InvalidHeightError

js and css are not restricted: only holders of the shared secret can
produce a signature that authorizes them.
"""

from collections.abc import Mapping
from typing import NamedTuple

from src.application.validators.base import BaseValidator
from src.core.config.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    FULL_PAGE_HEIGHT,
    MAX_HEIGHT,
    MAX_WIDTH,
    MIN_HEIGHT,
    MIN_WIDTH,
    PARAM_CSS,
    PARAM_HEIGHT,
    PARAM_JS,
    PARAM_SIGNATURE,
    PARAM_URL,
    PARAM_VERSION,
    PARAM_WIDTH,
)
from src.core.exceptions import (
    InvalidHeightError,
    InvalidUrlError,
    InvalidWidthError,
    MissingParameterError,
)
from src.core.logging.logger import get_logger
from src.screenshot.models import RequestDescriptor

logger = get_logger(__name__)

REQUIRED_PARAMS = (PARAM_URL, PARAM_VERSION, PARAM_SIGNATURE)
ALL_PARAMS = (*REQUIRED_PARAMS, PARAM_WIDTH, PARAM_HEIGHT, PARAM_JS, PARAM_CSS)


class ValidatedRequest(NamedTuple):
    """A validated descriptor and the signature that must authorize it."""

    descriptor: RequestDescriptor
    signature: str


class ScreenshotRequestValidator(BaseValidator):
    """
    Validates screenshot query parameters.

    Pure: no I/O, no settings, no clock. Absent and empty optional values
    both fall back to their defaults.
    """

    def validate(self, params: Mapping[str, str | None]) -> ValidatedRequest:
        """
        Validate raw query parameters.

        Args:
            params: Query parameters (absent keys and None are equivalent)

        Returns:
            ValidatedRequest: descriptor with defaults applied, plus the signature

        Raises:
            MissingParameterError, InvalidUrlError, InvalidWidthError, InvalidHeightError
        """
        values = {name: params.get(name) for name in ALL_PARAMS}

        self.validate_present(values, REQUIRED_PARAMS, MissingParameterError)

        target_url = values[PARAM_URL]
        self.validate_absolute_url(target_url, PARAM_URL, InvalidUrlError)

        width = values[PARAM_WIDTH] or DEFAULT_WIDTH
        self.parse_int_in_range(width, PARAM_WIDTH, MIN_WIDTH, MAX_WIDTH, InvalidWidthError)

        height = values[PARAM_HEIGHT] or DEFAULT_HEIGHT
        if height != FULL_PAGE_HEIGHT:
            self.parse_int_in_range(height, PARAM_HEIGHT, MIN_HEIGHT, MAX_HEIGHT, InvalidHeightError)

        descriptor = RequestDescriptor(
            target_url=target_url,
            version=values[PARAM_VERSION],
            width=width,
            height=height,
            js=values[PARAM_JS] or "",
            css=values[PARAM_CSS] or "",
        )

        logger.debug(
            "Screenshot request validated",
            width=width,
            height=height,
            has_js=bool(descriptor.js),
            has_css=bool(descriptor.css),
        )
        return ValidatedRequest(descriptor=descriptor, signature=values[PARAM_SIGNATURE])
