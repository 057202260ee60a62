"""
Screenshot Module

Domain models and the cache-aside controller for signed screenshot requests.
"""

from src.screenshot.models import (
    CachedArtifact,
    RequestDescriptor,
    UpstreamFailure,
    UpstreamOutcome,
    UpstreamSuccess,
)

__all__ = [
    "CachedArtifact",
    "RequestDescriptor",
    "UpstreamFailure",
    "UpstreamOutcome",
    "UpstreamSuccess",
]
