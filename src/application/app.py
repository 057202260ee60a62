#!/usr/bin/env python3
"""
FastAPI Application Entry Point

This is the main entry point for the Screenshot Gateway.
It configures the FastAPI application, middleware, and routes.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from src.application.api.middleware import setup_middleware
from src.application.api.routes.health import router as health_router
from src.application.api.routes.metrics import router as metrics_router
from src.application.api.routes.screenshot import router as screenshot_router
from src.core.config.constants import HEADER_THREAD_ID, RequestOutcome, Stage
from src.core.config.settings import Settings, get_settings
from src.core.exceptions import (
    InvalidSignatureError,
    ScreenshotGatewayError,
    UpstreamError,
    ValidationError,
)
from src.core.interfaces.cache import ArtifactStore
from src.core.interfaces.upstream import ScreenshotRenderer
from src.core.logging.logger import clear_thread_id, get_logger, log_stage, set_thread_id, setup_logging
from src.core.resilience.background_tasks import BackgroundTaskTracker
from src.core.resilience.single_flight import SingleFlight
from src.core.security.signature import SignatureVerifier
from src.infrastructure.cache.artifact_store import build_artifact_store
from src.infrastructure.monitoring.metrics_collector import get_metrics_collector
from src.infrastructure.upstream.browser_rendering import BrowserRenderingClient
from src.screenshot.services.screenshot_controller import ScreenshotController

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).

    Startup builds whatever was not injected through ``create_app``:
    verifier (from SCREENSHOT_SECRET), artifact store (CACHE_BACKEND),
    rendering client, background tracker and controller.

    Shutdown drains pending cache writes (bounded by
    BACKGROUND_DRAIN_TIMEOUT) and closes only the resources built here.
    """
    settings: Settings = app.state.settings

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    log_stage(
        logger,
        Stage.INITIALIZATION,
        "Starting Screenshot Gateway",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
        cache_backend=settings.cache.CACHE_BACKEND,
    )

    owned_redis = None
    owned_renderer = None
    try:
        # Fail fast on a missing secret, before any connection is opened
        if app.state.verifier is None:
            app.state.verifier = SignatureVerifier(settings.security.SCREENSHOT_SECRET.get_secret_value())

        if app.state.store is None:
            app.state.store, owned_redis = await build_artifact_store(settings)

        if app.state.renderer is None:
            owned_renderer = BrowserRenderingClient(settings)
            app.state.renderer = owned_renderer

        metrics = get_metrics_collector()
        tasks = BackgroundTaskTracker(on_change=metrics.set_pending_writes)
        app.state.tasks = tasks

        cache_settings = settings.cache
        app.state.controller = ScreenshotController(
            store=app.state.store,
            renderer=app.state.renderer,
            tasks=tasks,
            namespace=cache_settings.CACHE_KEY_NAMESPACE,
            artifact_ttl=cache_settings.CACHE_ARTIFACT_TTL,
            single_flight=SingleFlight() if cache_settings.SINGLE_FLIGHT_ENABLED else None,
            request_timeout=cache_settings.REQUEST_TIMEOUT,
            metrics=metrics,
        )

        log_stage(logger, Stage.INITIALIZATION, "Application startup complete")

        yield

    finally:
        logger.info("Shutting down application")

        tasks = getattr(app.state, "tasks", None)
        if tasks is not None:
            await tasks.drain(timeout=settings.cache.BACKGROUND_DRAIN_TIMEOUT)

        if owned_renderer is not None:
            await owned_renderer.aclose()
            app.state.renderer = None

        if owned_redis is not None:
            await owned_redis.disconnect()
            app.state.store = None

        app.state.controller = None
        app.state.tasks = None

        logger.info("Application shutdown complete")


# ============================================================================
# Exception Handlers
# ============================================================================


def _outcome_for(exc: ScreenshotGatewayError) -> RequestOutcome:
    if isinstance(exc, ValidationError):
        return RequestOutcome.INVALID_REQUEST
    if isinstance(exc, InvalidSignatureError):
        return RequestOutcome.FORBIDDEN
    if isinstance(exc, UpstreamError):
        return RequestOutcome.UPSTREAM_FAILURE
    return RequestOutcome.INTERNAL_ERROR


async def gateway_exception_handler(request: Request, exc: ScreenshotGatewayError):
    """
    Render a gateway error as its fixed plain-text public message.

    Internal message and details go to the log only.
    """
    level = "warning" if exc.status_code < 500 else "error"
    getattr(logger, level)(
        f"Request rejected: {exc.public_message}",
        path=request.url.path,
        error_type=type(exc).__name__,
        error_message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
    )

    get_metrics_collector().record_request(_outcome_for(exc).value)

    return PlainTextResponse(exc.public_message, status_code=exc.status_code)


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    settings: Settings | None = None,
    *,
    store: ArtifactStore | None = None,
    renderer: ScreenshotRenderer | None = None,
    verifier: SignatureVerifier | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to the global settings)
        store: Artifact store to use instead of building one from settings
        renderer: Renderer to use instead of the Browser Rendering client
        verifier: Verifier to use instead of one built from SCREENSHOT_SECRET

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Signed screenshot gateway with cache-aside rendering",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.renderer = renderer
    app.state.verifier = verifier
    app.state.controller = None
    app.state.tasks = None

    # ========================================================================
    # MIDDLEWARE REGISTRATION
    # ========================================================================
    # Middleware is executed in REVERSE order of registration (last added =
    # first executed). The thread-ID middleware is registered after
    # setup_middleware so even last-resort 500s carry X-Thread-ID.

    setup_middleware(app)

    @app.middleware("http")
    async def thread_id_middleware(request: Request, call_next):
        """
        Inject thread ID into all requests for correlation.
        """
        thread_id = request.headers.get(HEADER_THREAD_ID) or str(uuid.uuid4())

        set_thread_id(thread_id)

        try:
            response = await call_next(request)
            response.headers[HEADER_THREAD_ID] = thread_id
            return response

        finally:
            clear_thread_id()

    app.add_exception_handler(ScreenshotGatewayError, gateway_exception_handler)

    # ========================================================================
    # ROUTER REGISTRATION
    # ========================================================================
    # The screenshot endpoint lives at the root so signed URLs stay short.

    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(screenshot_router)

    return app


# Create application instance
app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
