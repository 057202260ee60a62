#!/usr/bin/env python3
"""
Metrics Collector with Prometheus Integration

This module provides production-ready metrics collection with:
- Request counts by terminal outcome
- Request latency histogram
- Cache hits by tier and misses
- Upstream render latency and status
- Signature rejections and background cache write failures

Architectural Decision: prometheus-client for industry-standard metrics
- Compatible with Grafana dashboards
- Efficient storage and aggregation
- Histogram buckets for latency percentiles

Author: Senior Solution Architect
Date: 2025-12-05
"""


from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

from src.core.config.settings import get_settings
from src.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# Metric Definitions
# ============================================================================

# Request metrics
REQUEST_COUNT = Counter(
    'screenshot_requests_total',
    'Total number of screenshot requests',
    ['outcome']
)

REQUEST_DURATION = Histogram(
    'screenshot_request_duration_seconds',
    'Request duration in seconds',
    ['outcome'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
)

# Cache metrics
CACHE_HITS = Counter(
    'screenshot_cache_hits_total',
    'Total artifact cache hits',
    ['tier']  # l1 or l2
)

CACHE_MISSES = Counter(
    'screenshot_cache_misses_total',
    'Total artifact cache misses'
)

CACHE_READ_ERRORS = Counter(
    'screenshot_cache_read_errors_total',
    'Artifact store reads that failed and were served as misses'
)

CACHE_WRITES = Counter(
    'screenshot_cache_writes_total',
    'Background artifact writes',
    ['status']  # success, failure
)

PENDING_CACHE_WRITES = Gauge(
    'screenshot_pending_cache_writes',
    'Background cache writes not yet finished'
)

# Upstream metrics
UPSTREAM_REQUESTS = Counter(
    'screenshot_upstream_requests_total',
    'Total render calls to the upstream service',
    ['status']  # HTTP status code, or "transport_error"
)

UPSTREAM_LATENCY = Histogram(
    'screenshot_upstream_latency_seconds',
    'Upstream render latency',
    buckets=(0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0)
)

SINGLE_FLIGHT_SHARED = Counter(
    'screenshot_single_flight_shared_total',
    'Requests that waited on an in-flight render instead of calling upstream'
)

# Security metrics
SIGNATURE_REJECTIONS = Counter(
    'screenshot_signature_rejections_total',
    'Requests rejected for an invalid signature'
)

# App info
APP_INFO = Info(
    'screenshot_app',
    'Application information'
)


class MetricsCollector:
    """
    Centralized metrics collector.

    STAGE-M: Metrics collection

    Usage:
        metrics = get_metrics_collector()

        metrics.record_request("rendered", 0.84)
        metrics.record_cache_hit("l1")

        output = metrics.get_prometheus_metrics()
    """

    def __init__(self):
        """Initialize metrics collector."""
        self.settings = get_settings()

        APP_INFO.info({
            'version': self.settings.app.APP_VERSION,
            'environment': self.settings.app.ENVIRONMENT,
            'app_name': self.settings.app.APP_NAME
        })

        logger.info("Metrics collector initialized", stage="M.0")

    # =========================================================================
    # Request Metrics
    # =========================================================================

    def record_request(self, outcome: str, duration_seconds: float | None = None) -> None:
        """Record a finished request and, optionally, its duration."""
        REQUEST_COUNT.labels(outcome=outcome).inc()
        if duration_seconds is not None:
            REQUEST_DURATION.labels(outcome=outcome).observe(duration_seconds)

    # =========================================================================
    # Cache Metrics
    # =========================================================================

    def record_cache_hit(self, tier: str) -> None:
        """Record cache hit."""
        CACHE_HITS.labels(tier=tier).inc()

    def record_cache_miss(self) -> None:
        """Record cache miss."""
        CACHE_MISSES.inc()

    def record_cache_read_error(self) -> None:
        CACHE_READ_ERRORS.inc()

    def record_cache_write(self, success: bool) -> None:
        CACHE_WRITES.labels(status="success" if success else "failure").inc()

    def set_pending_writes(self, count: int) -> None:
        PENDING_CACHE_WRITES.set(count)

    # =========================================================================
    # Upstream Metrics
    # =========================================================================

    def record_upstream_request(self, status_code: int | None, duration_seconds: float) -> None:
        """Record one upstream render call."""
        status = str(status_code) if status_code is not None else "transport_error"
        UPSTREAM_REQUESTS.labels(status=status).inc()
        UPSTREAM_LATENCY.observe(duration_seconds)

    def record_single_flight_shared(self) -> None:
        SINGLE_FLIGHT_SHARED.inc()

    # =========================================================================
    # Security Metrics
    # =========================================================================

    def record_signature_rejection(self) -> None:
        SIGNATURE_REJECTIONS.inc()

    # =========================================================================
    # Export
    # =========================================================================

    def get_prometheus_metrics(self) -> bytes:
        """
        Get Prometheus metrics output.

        Returns:
            bytes: Prometheus text format metrics
        """
        return generate_latest(REGISTRY)

    def get_content_type(self) -> str:
        """Get Prometheus content type."""
        return CONTENT_TYPE_LATEST


# Global metrics collector
_metrics: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
