"""
Security Module

HMAC request signing and verification.
"""

from src.core.security.signature import (
    SignatureVerifier,
    build_signed_query,
    canonical_message,
    compute_signature,
    constant_time_compare,
    sign_request,
)

__all__ = [
    "SignatureVerifier",
    "build_signed_query",
    "canonical_message",
    "compute_signature",
    "constant_time_compare",
    "sign_request",
]
