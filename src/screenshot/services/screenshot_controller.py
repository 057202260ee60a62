"""
Screenshot Controller - Cache-Aside Orchestration
=================================================

The ScreenshotController is the core of the gateway: given a validated,
signature-checked RequestDescriptor it returns the screenshot artifact,
either from the artifact store or from a fresh upstream render.

THE REQUEST LIFECYCLE (after validation and signature checks):
--------------------------------------------------------------

┌─────────────────────────────────────────────────────────────────┐
│ STAGE 3: CACHE KEY DERIVATION                                   │
│ - Deterministic URI from the descriptor and deployment namespace│
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ STAGE 4: CACHE LOOKUP                                           │
│ - L1 (in-process) then L2 (Redis)                               │
│ - Hit: return the stored artifact verbatim (skip stages 5-6)    │
│ - Store failure: logged, treated as a miss                      │
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ STAGE 5: UPSTREAM RENDER                                        │
│ - One call per key at a time (single-flight, when enabled)      │
│ - Failure: UpstreamFailureError (502), nothing cached           │
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ STAGE 6: RESPONSE ASSEMBLY                                      │
│ - Immutable cache-control plus x-screenshot-* diagnostics       │
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ STAGE BG: CACHE POPULATION                                      │
│ - Background write, not awaited by the request                  │
│ - Failures logged and counted, never surfaced                   │
└─────────────────────────────────────────────────────────────────┘

DEPENDENCY INJECTION:
---------------------
Store, renderer, background tracker and single-flight registry are all
passed in. The controller reads no settings and holds no secret.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import NamedTuple
from urllib.parse import quote

from src.core.config.constants import (
    CACHE_CONTROL_IMMUTABLE,
    CONTENT_TYPE_PNG,
    HEADER_SCREENSHOT_HEIGHT,
    HEADER_SCREENSHOT_TIMESTAMP,
    HEADER_SCREENSHOT_URL,
    HEADER_SCREENSHOT_VERSION,
    HEADER_SCREENSHOT_WIDTH,
    CacheTier,
    Stage,
)
from src.core.exceptions import (
    InternalServiceError,
    ScreenshotGatewayError,
    UpstreamFailureError,
)
from src.core.interfaces.cache import ArtifactStore
from src.core.interfaces.upstream import ScreenshotRenderer
from src.core.logging.logger import get_logger, get_thread_id, log_stage
from src.core.resilience.background_tasks import BackgroundTaskTracker
from src.core.resilience.single_flight import SingleFlight
from src.infrastructure.cache.cache_key import derive_cache_key
from src.infrastructure.monitoring.metrics_collector import MetricsCollector, get_metrics_collector
from src.screenshot.models import (
    CachedArtifact,
    RequestDescriptor,
    UpstreamFailure,
    UpstreamOutcome,
)

logger = get_logger(__name__)

# RFC 3986 reserved and unreserved characters stay readable in headers;
# everything else (spaces, non-ASCII) is percent-encoded
_HEADER_SAFE = ":/?#[]@!$&'()*+,;=-._~%"


class ScreenshotResult(NamedTuple):
    """Artifact to serve and where it came from."""

    artifact: CachedArtifact
    tier: CacheTier
    leader: bool = True


def header_safe(value: str) -> str:
    """Make a caller-supplied value safe for an HTTP header."""
    return quote(value, safe=_HEADER_SAFE)


def utc_timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble_artifact(descriptor: RequestDescriptor, body: bytes, timestamp: str | None = None) -> CachedArtifact:
    """
    Build the artifact (body + full response headers) for a fresh render.

    STAGE-6.0: Response assembly
    """
    timestamp = timestamp or utc_timestamp()
    headers = {
        "content-type": CONTENT_TYPE_PNG,
        "cache-control": CACHE_CONTROL_IMMUTABLE,
        HEADER_SCREENSHOT_URL: header_safe(descriptor.target_url),
        HEADER_SCREENSHOT_VERSION: header_safe(descriptor.version),
        HEADER_SCREENSHOT_WIDTH: descriptor.width,
        HEADER_SCREENSHOT_HEIGHT: descriptor.height,
        HEADER_SCREENSHOT_TIMESTAMP: timestamp,
    }
    return CachedArtifact(body=body, content_type=CONTENT_TYPE_PNG, headers=headers, created_at=timestamp)


class ScreenshotController:
    """
    Cache-aside coordinator for screenshot requests.

    Guarantees:
    - A cache hit never calls the renderer
    - A failed render never writes the store
    - Only one background write per successful render (the leader's)
    - No exception other than a ScreenshotGatewayError escapes ``handle``
    """

    def __init__(
        self,
        store: ArtifactStore,
        renderer: ScreenshotRenderer,
        tasks: BackgroundTaskTracker,
        namespace: str,
        artifact_ttl: int | None = None,
        single_flight: SingleFlight | None = None,
        request_timeout: float | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Args:
            store: Artifact store (L1/L2 cache or in-memory)
            renderer: Upstream rendering collaborator
            tasks: Tracker that owns background cache writes
            namespace: Cache-key host suffix shared by the deployment
            artifact_ttl: TTL passed to the store on write (None/0 = none)
            single_flight: Registry collapsing concurrent misses (None disables)
            request_timeout: Upper bound on the upstream wait (None/0 disables)
            metrics: Metrics collector (defaults to the global one)
        """
        self._store = store
        self._renderer = renderer
        self._tasks = tasks
        self._namespace = namespace
        self._artifact_ttl = artifact_ttl or None
        self._single_flight = single_flight
        self._request_timeout = request_timeout or None
        self._metrics = metrics or get_metrics_collector()

    async def handle(self, descriptor: RequestDescriptor) -> ScreenshotResult:
        """
        Serve one screenshot request.

        Raises:
            UpstreamFailureError: The render failed (502)
            InternalServiceError: Anything unexpected (500)
        """
        try:
            return await self._handle(descriptor)
        except ScreenshotGatewayError:
            raise
        except Exception as exc:
            logger.exception(
                "Unexpected error while serving screenshot",
                stage=Stage.RESPONSE_ASSEMBLY.value,
                error_type=type(exc).__name__,
            )
            raise InternalServiceError(
                f"Unexpected {type(exc).__name__}: {exc}",
                thread_id=get_thread_id(),
            ) from exc

    async def _handle(self, descriptor: RequestDescriptor) -> ScreenshotResult:
        # STAGE-3.0: Cache key derivation
        cache_key = derive_cache_key(descriptor, self._namespace)

        # STAGE-4.0: Cache lookup
        cached, tier = await self._lookup(cache_key)
        if cached is not None:
            self._metrics.record_cache_hit(tier.value)
            log_stage(logger, Stage.CACHE_LOOKUP, "Cache hit", tier=tier.value, cache_key=cache_key[:80])
            return ScreenshotResult(artifact=cached, tier=tier)

        self._metrics.record_cache_miss()
        log_stage(logger, Stage.CACHE_LOOKUP, "Cache miss", cache_key=cache_key[:80])

        # STAGE-5.0: Upstream render
        outcome, leader = await self._render(cache_key, descriptor)
        if not leader:
            self._metrics.record_single_flight_shared()

        if isinstance(outcome, UpstreamFailure):
            raise UpstreamFailureError(
                f"Rendering failed with status {outcome.status_code}",
                thread_id=get_thread_id(),
                details={"upstream_status": outcome.status_code, "upstream_message": outcome.message[:500]},
            )

        # STAGE-6.0: Response assembly
        artifact = assemble_artifact(descriptor, outcome.body)

        # STAGE-BG: Cache population (leader only)
        if leader:
            self._tasks.spawn(self._populate(cache_key, artifact), name="cache-populate")

        return ScreenshotResult(artifact=artifact, tier=CacheTier.MISS, leader=leader)

    async def _lookup(self, cache_key: str) -> tuple[CachedArtifact | None, CacheTier]:
        try:
            return await self._store.lookup(cache_key)
        except Exception as exc:
            self._metrics.record_cache_read_error()
            log_stage(
                logger,
                Stage.CACHE_LOOKUP,
                "Artifact store read failed, treating as miss",
                level="warning",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None, CacheTier.MISS

    async def _render(self, cache_key: str, descriptor: RequestDescriptor) -> tuple[UpstreamOutcome, bool]:
        if self._single_flight is None:
            return await self._call_upstream(descriptor), True
        return await self._single_flight.run(cache_key, lambda: self._call_upstream(descriptor))

    async def _call_upstream(self, descriptor: RequestDescriptor) -> UpstreamOutcome:
        if self._request_timeout is None:
            return await self._renderer.render(descriptor)
        try:
            return await asyncio.wait_for(self._renderer.render(descriptor), timeout=self._request_timeout)
        except asyncio.TimeoutError:
            log_stage(
                logger,
                Stage.UPSTREAM_RENDER,
                "Upstream render exceeded request timeout",
                level="error",
                timeout=self._request_timeout,
            )
            return UpstreamFailure(status_code=None, message=f"timed out after {self._request_timeout}s")

    async def _populate(self, cache_key: str, artifact: CachedArtifact) -> None:
        """STAGE-BG: write a rendered artifact to the store."""
        start = time.perf_counter()
        try:
            await self._store.put(cache_key, artifact, ttl=self._artifact_ttl)
        except Exception:
            self._metrics.record_cache_write(success=False)
            raise
        self._metrics.record_cache_write(success=True)
        log_stage(
            logger,
            Stage.CACHE_POPULATION,
            "Artifact cached",
            cache_key=cache_key[:80],
            size_bytes=len(artifact.body),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
