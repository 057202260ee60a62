"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .renderer_factory import PNG_BYTES, FakeRenderer, RendererTestFactory
from .request_factory import TEST_SECRET, ErrorRequestFactory, RequestFactory

__all__ = [
    "PNG_BYTES",
    "TEST_SECRET",
    "FakeRenderer",
    "RendererTestFactory",
    "RequestFactory",
    "ErrorRequestFactory",
]
