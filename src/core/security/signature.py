"""
Signed Request Verification

A screenshot request is authorized by an HMAC-SHA256 over its canonical
message, keyed with a secret shared between the gateway and trusted
signers (the authoring console, backend services).

CANONICAL MESSAGE:
------------------
    url|version|w|h|js|css

Width and height are the post-default strings ("1200"/"800" when the
caller omitted them), exactly as the validator places them in the
RequestDescriptor. A signature therefore authorizes the effective
parameters, never a raw query that a default could later change.

The pipe is not escaped: a js/css value containing "|" yields the same
message as a different split of the same characters. The authoring
console signs the same unescaped form.

TIMING:
-------
``constant_time_compare`` checks length first and then XOR-accumulates
over every character, so its running time does not depend on where the
first mismatch is.
"""

import hashlib
import hmac

from src.core.config.constants import (
    CANONICAL_DELIMITER,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    PARAM_CSS,
    PARAM_HEIGHT,
    PARAM_JS,
    PARAM_SIGNATURE,
    PARAM_URL,
    PARAM_VERSION,
    PARAM_WIDTH,
    Stage,
)
from src.core.exceptions import ConfigurationError
from src.core.logging.logger import get_logger, log_stage
from src.screenshot.models import RequestDescriptor

logger = get_logger(__name__)


def canonical_message(
    target_url: str, version: str, width: str, height: str, js: str = "", css: str = ""
) -> str:
    """Join the six signed fields in their fixed order."""
    return CANONICAL_DELIMITER.join((target_url, version, width, height, js, css))


def compute_signature(secret: str, message: str) -> str:
    """HMAC-SHA256 of ``message`` keyed by ``secret``, lowercase hex."""
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def constant_time_compare(a: str, b: str) -> bool:
    """
    Compare two strings in time independent of the first mismatch position.

    Returns False immediately only when the lengths differ; otherwise every
    character pair is visited.
    """
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= ord(x) ^ ord(y)
    return result == 0


def sign_request(
    secret: str,
    target_url: str,
    version: str,
    width: str = DEFAULT_WIDTH,
    height: str = DEFAULT_HEIGHT,
    js: str = "",
    css: str = "",
) -> str:
    """Produce the signature a trusted client sends as ``sig``."""
    return compute_signature(secret, canonical_message(target_url, version, width, height, js, css))


def build_signed_query(
    secret: str,
    target_url: str,
    version: str,
    width: str = DEFAULT_WIDTH,
    height: str = DEFAULT_HEIGHT,
    js: str = "",
    css: str = "",
) -> dict[str, str]:
    """
    Build the query parameters of a signed request.

    Empty js/css are omitted, as the authoring console does.
    """
    params = {
        PARAM_URL: target_url,
        PARAM_VERSION: version,
        PARAM_WIDTH: width,
        PARAM_HEIGHT: height,
        PARAM_SIGNATURE: sign_request(secret, target_url, version, width, height, js, css),
    }
    if js:
        params[PARAM_JS] = js
    if css:
        params[PARAM_CSS] = css
    return params


class SignatureVerifier:
    """
    Verifies request signatures against one shared secret.

    The secret is injected at construction, never read from ambient state,
    so a rotated secret means building a new verifier and tests can use
    several secrets side by side.
    """

    def __init__(self, secret: str):
        if not secret:
            raise ConfigurationError(
                "SCREENSHOT_SECRET is empty; refusing to verify signatures",
                details={"setting": "SCREENSHOT_SECRET"},
            )
        self._secret = secret

    def expected_signature(self, descriptor: RequestDescriptor) -> str:
        return compute_signature(self._secret, self.message_for(descriptor))

    @staticmethod
    def message_for(descriptor: RequestDescriptor) -> str:
        return canonical_message(
            descriptor.target_url,
            descriptor.version,
            descriptor.width,
            descriptor.height,
            descriptor.js,
            descriptor.css,
        )

    def verify(self, descriptor: RequestDescriptor, signature: str) -> bool:
        """
        Check ``signature`` against the descriptor's canonical message.

        STAGE-2.0: Signature verification

        Returns:
            bool: True only for an exact match
        """
        valid = constant_time_compare(signature, self.expected_signature(descriptor))
        if not valid:
            log_stage(
                logger,
                Stage.SIGNATURE_VERIFICATION,
                "Signature rejected",
                level="warning",
                version=descriptor.version,
                signature_length=len(signature),
            )
        return valid

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(secret='***')"
