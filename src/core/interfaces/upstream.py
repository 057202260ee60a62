"""
Renderer Protocol

The controller only needs "turn a descriptor into an outcome"; the HTTP
details of the rendering service live in the infrastructure layer.
"""

from typing import Protocol, runtime_checkable

from src.screenshot.models import RequestDescriptor, UpstreamOutcome


@runtime_checkable
class ScreenshotRenderer(Protocol):
    """
    Protocol for the upstream rendering collaborator.

    Implementations return UpstreamFailure for any upstream-side failure
    rather than raising; an exception means a bug in the gateway.
    """

    async def render(self, descriptor: RequestDescriptor) -> UpstreamOutcome:
        ...
