"""
Cache Key Derivation

Builds the content address of a screenshot from its request descriptor.

    https://screenshot-cache.<namespace>/v<version>/w<w>/h<h>/js<js>/css<css>/<url>

version, js, css and url are percent-encoded with no safe characters, so
none of them can contain "/" once encoded and the path segments split back
into exactly the original fields. Width and height are validated digits
(or "full") and need no encoding.

The derivation is a pure function of the descriptor and the namespace: no
randomness, no clock, no process state. Every instance in a deployment
computes the same key for the same request.
"""

from urllib.parse import quote

from src.core.config.constants import CACHE_KEY_HOST_PREFIX
from src.screenshot.models import RequestDescriptor


def _encode(value: str) -> str:
    return quote(value, safe="")


def derive_cache_key(descriptor: RequestDescriptor, namespace: str) -> str:
    """
    Derive the deterministic cache key for ``descriptor``.

    Args:
        descriptor: Validated request
        namespace: Host suffix shared by all instances of one deployment

    Returns:
        str: Cache key URI
    """
    return (
        f"https://{CACHE_KEY_HOST_PREFIX}.{namespace}"
        f"/v{_encode(descriptor.version)}"
        f"/w{descriptor.width}"
        f"/h{descriptor.height}"
        f"/js{_encode(descriptor.js)}"
        f"/css{_encode(descriptor.css)}"
        f"/{_encode(descriptor.target_url)}"
    )
