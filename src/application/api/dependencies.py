"""
FastAPI Dependency Injection Module
===================================

Route handlers receive their collaborators through FastAPI's DI system
instead of reaching for globals:

    @router.get("/")
    async def screenshot(controller: ControllerDep, verifier: VerifierDep):
        ...

The controller, verifier and artifact store are built once in the
application lifespan and stored on ``app.state``; the providers below
only read them back. A request that arrives before startup finished (or
against an app whose lifespan never ran) gets a 500 through
InternalServiceError rather than an AttributeError.
"""

from typing import Annotated

from fastapi import Depends, Request

from src.application.validators.screenshot_validator import ScreenshotRequestValidator
from src.core.config.settings import Settings, get_settings
from src.core.exceptions import InternalServiceError
from src.core.interfaces.cache import ArtifactStore
from src.core.security.signature import SignatureVerifier
from src.infrastructure.monitoring.metrics_collector import MetricsCollector, get_metrics_collector
from src.screenshot.services.screenshot_controller import ScreenshotController

# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================

_validator = ScreenshotRequestValidator()


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise InternalServiceError(f"Application component '{name}' is not initialized")
    return component


def get_controller(request: Request) -> ScreenshotController:
    """
    Retrieve the ScreenshotController built during startup.

    Raises:
        InternalServiceError: If the lifespan has not initialized it
    """
    return _from_state(request, "controller")


def get_verifier(request: Request) -> SignatureVerifier:
    """Retrieve the SignatureVerifier holding the current secret."""
    return _from_state(request, "verifier")


def get_store(request: Request) -> ArtifactStore:
    return _from_state(request, "store")


def get_validator() -> ScreenshotRequestValidator:
    """The validator is stateless; one instance serves every request."""
    return _validator


# ============================================================================
# TYPE ALIASES FOR DEPENDENCY INJECTION
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
ControllerDep = Annotated[ScreenshotController, Depends(get_controller)]
VerifierDep = Annotated[SignatureVerifier, Depends(get_verifier)]
StoreDep = Annotated[ArtifactStore, Depends(get_store)]
ValidatorDep = Annotated[ScreenshotRequestValidator, Depends(get_validator)]
MetricsDep = Annotated[MetricsCollector, Depends(get_metrics_collector)]
