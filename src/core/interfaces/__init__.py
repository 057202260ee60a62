"""
Core Interfaces Module

Protocols for the collaborators the cache-aside controller depends on,
enabling dependency injection and testability.

Components:
-----------
- **cache.py**: ArtifactStore protocol + InMemoryArtifactStore
- **upstream.py**: ScreenshotRenderer protocol

Interfaces follow the Protocol pattern (PEP 544) for structural subtyping:
- Runtime type checking with @runtime_checkable
- No inheritance required
- Easy mocking for tests
"""

from src.core.interfaces.cache import ArtifactStore, InMemoryArtifactStore
from src.core.interfaces.upstream import ScreenshotRenderer

__all__ = ["ArtifactStore", "InMemoryArtifactStore", "ScreenshotRenderer"]
