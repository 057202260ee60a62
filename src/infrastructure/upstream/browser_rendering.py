"""
Browser Rendering API Client

Async HTTP client for the screenshot endpoint of the external headless
browser service.

REQUEST:
--------
    POST {UPSTREAM_BASE_URL}/accounts/{CF_ACCOUNT_ID}/browser-rendering/screenshot
    Authorization: Bearer {CF_API_TOKEN}

    {
      "url": "https://example.com",
      "screenshotOptions": {"type": "png", "fullPage": true},   # fullPage only for h=full
      "viewport": {"width": 1200, "height": 800},               # 800 for h=full
      "gotoOptions": {"waitUntil": "networkidle0", "timeout": 30000},
      "addScriptTag": [{"content": "..."}],                     # only when js is set
      "addStyleTag": [{"content": "..."}]                       # only when css is set
    }

OUTCOMES:
---------
- 2xx → UpstreamSuccess(body)
- any other status → UpstreamFailure(status, body); the body is logged
- timeout / connection error → UpstreamFailure(None, reason)

No retries: a failed render is reported to the caller, who may retry.

Author: System Architect
Date: 2025-12-10
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from src.core.config.constants import (
    CONTENT_TYPE_PNG,
    FULL_PAGE_VIEWPORT_HEIGHT,
    UPSTREAM_IMAGE_TYPE,
    UPSTREAM_NAVIGATION_TIMEOUT_MS,
    UPSTREAM_WAIT_UNTIL,
    Stage,
)
from src.core.config.settings import Settings, get_settings
from src.core.logging.logger import get_logger, log_stage
from src.infrastructure.monitoring.metrics_collector import MetricsCollector, get_metrics_collector
from src.screenshot.models import (
    RequestDescriptor,
    UpstreamFailure,
    UpstreamOutcome,
    UpstreamSuccess,
)

logger = get_logger(__name__)

# Upstream error bodies are logged, truncated to this many characters
_MAX_LOGGED_BODY = 2000


def build_payload(descriptor: RequestDescriptor) -> dict[str, Any]:
    """
    Build the JSON body of a screenshot call.

    Example:
        >>> build_payload(RequestDescriptor(target_url="https://a.test", version="1"))["viewport"]
        {'width': 1200, 'height': 800}
    """
    screenshot_options: dict[str, Any] = {"type": UPSTREAM_IMAGE_TYPE}
    if descriptor.full_page:
        screenshot_options["fullPage"] = True

    payload: dict[str, Any] = {
        "url": descriptor.target_url,
        "screenshotOptions": screenshot_options,
        "viewport": {
            "width": descriptor.width_px,
            "height": descriptor.height_px or FULL_PAGE_VIEWPORT_HEIGHT,
        },
        "gotoOptions": {
            "waitUntil": UPSTREAM_WAIT_UNTIL,
            "timeout": UPSTREAM_NAVIGATION_TIMEOUT_MS,
        },
    }
    if descriptor.js:
        payload["addScriptTag"] = [{"content": descriptor.js}]
    if descriptor.css:
        payload["addStyleTag"] = [{"content": descriptor.css}]
    return payload


class BrowserRenderingClient:
    """
    Renders screenshots through the Browser Rendering REST API.

    Implements the ScreenshotRenderer protocol.

    LIFECYCLE MANAGEMENT:
    ---------------------
    Use as an async context manager, or call ``aclose()`` on shutdown.
    An injected ``http_client`` is never closed here; its owner closes it.

    ```python
    async with BrowserRenderingClient(settings) as renderer:
        outcome = await renderer.render(descriptor)
    ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
        metrics: MetricsCollector | None = None,
    ):
        self._settings = settings or get_settings()
        upstream = self._settings.upstream

        self._endpoint = (
            f"{upstream.UPSTREAM_BASE_URL.rstrip('/')}"
            f"/accounts/{upstream.CF_ACCOUNT_ID}/browser-rendering/screenshot"
        )
        self._token = upstream.CF_API_TOKEN.get_secret_value()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(upstream.UPSTREAM_TIMEOUT),
        )
        self._metrics = metrics or get_metrics_collector()

        logger.info(
            "Browser rendering client initialized",
            stage="5.0",
            endpoint=self._endpoint,
            timeout=upstream.UPSTREAM_TIMEOUT,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def __aenter__(self) -> BrowserRenderingClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def render(self, descriptor: RequestDescriptor) -> UpstreamOutcome:
        """
        Capture one screenshot.

        STAGE-5.0: Upstream render

        Returns:
            UpstreamSuccess with the image bytes, or UpstreamFailure
        """
        payload = build_payload(descriptor)
        start = time.perf_counter()

        try:
            response = await self._client.post(
                self._endpoint,
                json=payload,
                headers={"Authorization": f"Bearer {self._token}"},
            )
        except httpx.HTTPError as e:
            self._metrics.record_upstream_request(None, time.perf_counter() - start)
            log_stage(
                logger,
                Stage.UPSTREAM_RENDER,
                "Rendering service unreachable",
                level="error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return UpstreamFailure(status_code=None, message=f"{type(e).__name__}: {e}")

        duration = time.perf_counter() - start
        self._metrics.record_upstream_request(response.status_code, duration)

        if not response.is_success:
            body = response.text[:_MAX_LOGGED_BODY]
            log_stage(
                logger,
                Stage.UPSTREAM_RENDER,
                "Rendering service returned an error",
                level="error",
                status_code=response.status_code,
                body=body,
                duration_ms=round(duration * 1000, 2),
            )
            return UpstreamFailure(status_code=response.status_code, message=body)

        log_stage(
            logger,
            Stage.UPSTREAM_RENDER,
            "Screenshot rendered",
            status_code=response.status_code,
            size_bytes=len(response.content),
            duration_ms=round(duration * 1000, 2),
        )
        return UpstreamSuccess(
            body=response.content,
            content_type=response.headers.get("content-type", CONTENT_TYPE_PNG),
        )
