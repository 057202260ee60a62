"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures import TEST_SECRET, RendererTestFactory, RequestFactory  # noqa: E402

# ============================================================================
# Pytest Configuration
# ============================================================================

# pytest-asyncio runs in auto mode (pyproject.toml), so async tests and
# fixtures need no explicit marker


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_settings():
    """
    Real Settings isolated from the environment's .env file.

    In-memory cache backend, known secret, console logging.
    """
    from src.core.config.settings import Settings

    return Settings(
        _env_file=None,
        SCREENSHOT_SECRET=TEST_SECRET,
        CACHE_BACKEND="memory",
        CACHE_KEY_NAMESPACE="test.local",
        CF_ACCOUNT_ID="acct-123",
        CF_API_TOKEN="token-abc",
        LOG_FORMAT="console",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def descriptor():
    """Descriptor for https://example.com, version 1, 1200x800."""
    return RequestFactory.descriptor()


@pytest.fixture
def full_page_descriptor():
    return RequestFactory.descriptor(height="full")


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def mock_metrics():
    """MetricsCollector stand-in that records calls without touching Prometheus."""
    from src.infrastructure.monitoring.metrics_collector import MetricsCollector

    return MagicMock(spec=MetricsCollector)


@pytest.fixture
def memory_store():
    from src.core.interfaces.cache import InMemoryArtifactStore

    return InMemoryArtifactStore()


@pytest.fixture
def renderer():
    """Renderer returning a small PNG."""
    return RendererTestFactory.succeeding()


@pytest.fixture
def failing_renderer():
    """Renderer returning an upstream 500."""
    return RendererTestFactory.failing(500, "render failed")


@pytest.fixture
def task_tracker():
    from src.core.resilience.background_tasks import BackgroundTaskTracker

    return BackgroundTaskTracker()
