"""
Renderer Test Factory

Controllable stand-ins for the upstream rendering service.
"""

import asyncio

from src.screenshot.models import (
    RequestDescriptor,
    UpstreamFailure,
    UpstreamOutcome,
    UpstreamSuccess,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeRenderer:
    """
    Renderer that records calls and returns a fixed outcome.

    If ``gate`` is set, every render waits on it before returning, so tests
    can hold several requests in flight at once.
    """

    def __init__(self, outcome: UpstreamOutcome | None = None, gate: asyncio.Event | None = None):
        self.outcome = outcome or UpstreamSuccess(body=PNG_BYTES)
        self.gate = gate
        self.calls: list[RequestDescriptor] = []

    async def render(self, descriptor: RequestDescriptor) -> UpstreamOutcome:
        self.calls.append(descriptor)
        if self.gate is not None:
            await self.gate.wait()
        return self.outcome


class RendererTestFactory:
    """Factory for renderer stubs."""

    @staticmethod
    def succeeding(body: bytes = PNG_BYTES) -> FakeRenderer:
        return FakeRenderer(UpstreamSuccess(body=body))

    @staticmethod
    def failing(status_code: int | None = 500, message: str = "boom") -> FakeRenderer:
        return FakeRenderer(UpstreamFailure(status_code=status_code, message=message))

    @staticmethod
    def gated(gate: asyncio.Event) -> FakeRenderer:
        return FakeRenderer(gate=gate)
