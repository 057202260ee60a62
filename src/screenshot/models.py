"""
Screenshot Domain Models

Immutable value objects passed between the validator, verifier, cache key
deriver, controller and upstream adapter.

- RequestDescriptor: one validated screenshot request
- CachedArtifact: stored image bytes plus the response metadata
- UpstreamSuccess / UpstreamFailure: result of one rendering call
"""

from datetime import datetime, timezone
from typing import Union

import orjson
from pydantic import BaseModel, Field

from src.core.config.constants import (
    CONTENT_TYPE_PNG,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    FULL_PAGE_HEIGHT,
)


class RequestDescriptor(BaseModel):
    """
    A validated screenshot request.

    Width and height keep the exact strings that were signed (after default
    substitution) so the canonical message and the cache key are built from
    the same values the caller signed. Numeric views are exposed as
    properties.

    Only the validator should construct one from untrusted input; tests and
    trusted callers may build it directly.
    """

    model_config = {"frozen": True}

    target_url: str = Field(..., min_length=1, description="Absolute URI to capture")
    version: str = Field(..., min_length=1, description="Caller-chosen cache-busting version")
    width: str = Field(default=DEFAULT_WIDTH, description="Viewport width as signed")
    height: str = Field(default=DEFAULT_HEIGHT, description='Viewport height as signed, or "full"')
    js: str = Field(default="", description="Script injected before capture")
    css: str = Field(default="", description="Style injected before capture")

    @property
    def width_px(self) -> int:
        return int(self.width)

    @property
    def full_page(self) -> bool:
        return self.height == FULL_PAGE_HEIGHT

    @property
    def height_px(self) -> int | None:
        """Numeric height, or None for a full-page capture."""
        return None if self.full_page else int(self.height)


class CachedArtifact(BaseModel):
    """
    A rendered screenshot as stored in, and served from, the artifact store.

    ``headers`` are the complete response headers assembled on the miss
    path; a cache hit replays them verbatim.
    """

    model_config = {"frozen": True}

    body: bytes
    content_type: str = CONTENT_TYPE_PNG
    headers: dict[str, str] = Field(default_factory=dict)
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )

    def metadata_json(self) -> bytes:
        """Serialize everything except the body (stored next to it)."""
        return orjson.dumps(
            {
                "content_type": self.content_type,
                "headers": self.headers,
                "created_at": self.created_at,
            }
        )

    @classmethod
    def from_stored(cls, body: bytes, metadata: bytes | str) -> "CachedArtifact":
        """Rebuild an artifact from its stored body and metadata JSON."""
        meta = orjson.loads(metadata)
        return cls(
            body=body,
            content_type=meta.get("content_type", CONTENT_TYPE_PNG),
            headers=meta.get("headers", {}),
            created_at=meta.get("created_at", ""),
        )


class UpstreamSuccess(BaseModel):
    """The rendering service returned 2xx with image bytes."""

    model_config = {"frozen": True}

    body: bytes
    content_type: str = CONTENT_TYPE_PNG

    @property
    def ok(self) -> bool:
        return True


class UpstreamFailure(BaseModel):
    """
    The rendering service failed.

    ``status_code`` is None when no HTTP response was received (timeout,
    connection error). ``message`` holds the upstream body or the transport
    error text, for server-side logging only.
    """

    model_config = {"frozen": True}

    status_code: int | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return False


UpstreamOutcome = Union[UpstreamSuccess, UpstreamFailure]
