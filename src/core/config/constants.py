"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the screenshot gateway.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers and wire strings
- Type-safe enums for stage identifiers and outcomes
- Parameter bounds shared by the validator, the upstream adapter and tests

Author: System Architect
Date: 2025-12-05
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Request processing stages for structured logging.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    - SEQUENCE: Numeric order (0.0, 1.0, 2.0) or alphabetic prefix (BG, M)
    - DESCRIPTIVE_NAME: Clear, uppercase description with underscores

    Examples:
        log_stage(logger, Stage.CACHE_LOOKUP, "Cache miss", cache_key=key[:40])
    """

    # Main Request Lifecycle (Sequential 0.0 - 6.0)
    INITIALIZATION = "0.0_INITIALIZATION"
    REQUEST_VALIDATION = "1.0_REQUEST_VALIDATION"
    SIGNATURE_VERIFICATION = "2.0_SIGNATURE_VERIFICATION"
    CACHE_KEY_DERIVATION = "3.0_CACHE_KEY_DERIVATION"
    CACHE_LOOKUP = "4.0_CACHE_LOOKUP"
    UPSTREAM_RENDER = "5.0_UPSTREAM_RENDER"
    RESPONSE_ASSEMBLY = "6.0_RESPONSE_ASSEMBLY"

    # Cross-Cutting Concerns (Alphabetic Prefixes)
    CACHE_POPULATION = "BG_CACHE_POPULATION"
    SINGLE_FLIGHT = "SF_SINGLE_FLIGHT"
    METRICS = "M_METRICS_COLLECTION"
    LOGGING = "L_LOGGING_OPERATIONS"


# ============================================================================
# Cache Tiers
# ============================================================================


class CacheTier(str, Enum):
    """
    Artifact store tiers.

    L1: In-process LRU (per worker, < 1ms)
    L2: Redis (shared across instances, 1-5ms)
    MISS: Neither tier had the key
    """

    L1 = "l1"
    L2 = "l2"
    MISS = "miss"


class RequestOutcome(str, Enum):
    """
    Terminal outcome of a screenshot request (metrics label).
    """

    CACHE_HIT = "cache_hit"
    RENDERED = "rendered"
    INVALID_REQUEST = "invalid_request"
    FORBIDDEN = "forbidden"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL_ERROR = "internal_error"


# ============================================================================
# Request Parameters
# ============================================================================

PARAM_URL = "url"
PARAM_VERSION = "version"
PARAM_SIGNATURE = "sig"
PARAM_WIDTH = "w"
PARAM_HEIGHT = "h"
PARAM_JS = "js"
PARAM_CSS = "css"

DEFAULT_WIDTH = "1200"
DEFAULT_HEIGHT = "800"
FULL_PAGE_HEIGHT = "full"

MIN_WIDTH = 100
MAX_WIDTH = 3840
MIN_HEIGHT = 100
MAX_HEIGHT = 2160

# Delimiter for the signed canonical message
CANONICAL_DELIMITER = "|"

# ============================================================================
# Upstream Rendering
# ============================================================================

# Initial viewport height used when a full-page capture is requested
FULL_PAGE_VIEWPORT_HEIGHT = 800
UPSTREAM_WAIT_UNTIL = "networkidle0"
UPSTREAM_NAVIGATION_TIMEOUT_MS = 30_000
UPSTREAM_IMAGE_TYPE = "png"

# ============================================================================
# Response Headers
# ============================================================================

CONTENT_TYPE_PNG = "image/png"
CONTENT_TYPE_HTML = "text/html; charset=utf-8"
CACHE_CONTROL_IMMUTABLE = "public, max-age=31536000, immutable"

HEADER_THREAD_ID = "X-Thread-ID"
HEADER_SCREENSHOT_URL = "x-screenshot-url"
HEADER_SCREENSHOT_VERSION = "x-screenshot-version"
HEADER_SCREENSHOT_WIDTH = "x-screenshot-width"
HEADER_SCREENSHOT_HEIGHT = "x-screenshot-height"
HEADER_SCREENSHOT_TIMESTAMP = "x-screenshot-timestamp"

# ============================================================================
# Public Error Messages (response bodies)
# ============================================================================

MSG_MISSING_PARAMETERS = "Missing required parameters"
MSG_INVALID_URL = "Invalid url"
MSG_INVALID_WIDTH = f"Invalid w ({MIN_WIDTH}-{MAX_WIDTH})"
MSG_INVALID_HEIGHT = f'Invalid h ({MIN_HEIGHT}-{MAX_HEIGHT} or "{FULL_PAGE_HEIGHT}")'
MSG_INVALID_SIGNATURE = "Invalid signature"
MSG_UPSTREAM_FAILURE = "Screenshot generation failed"
MSG_INTERNAL_ERROR = "Internal server error"

# ============================================================================
# Cache Keys
# ============================================================================

CACHE_KEY_HOST_PREFIX = "screenshot-cache"
REDIS_KEY_SCREENSHOT = "cache:screenshot"
REDIS_FIELD_BODY = "body"
REDIS_FIELD_META = "meta"

# Cache sizes
L1_CACHE_MAX_SIZE = 256  # Maximum artifacts held in the in-process tier
