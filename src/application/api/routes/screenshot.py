"""
Screenshot Routes
=================

``GET /`` is the whole public surface of the gateway:

- no ``url`` parameter at all → the HTML authoring console
- otherwise → validate, verify the signature, then serve the screenshot
  from cache or from a fresh render

Checks run in a fixed order and stop at the first failure:

    validation (400) → signature (403) → cache / upstream (200 or 502)

Error responses are produced by the exception handlers registered in
``create_app``; this module only raises.
"""

import time
from collections.abc import Iterable

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse

from src.application.api.dependencies import (
    ControllerDep,
    MetricsDep,
    ValidatorDep,
    VerifierDep,
)
from src.application.api.templates.console import CONSOLE_HTML
from src.core.config.constants import PARAM_URL, CacheTier, RequestOutcome, Stage
from src.core.exceptions import InvalidSignatureError
from src.core.logging.logger import get_logger, get_thread_id, log_stage

logger = get_logger(__name__)

router = APIRouter(tags=["Screenshot"])


def first_values(items: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse repeated query parameters, keeping the first occurrence."""
    values: dict[str, str] = {}
    for key, value in items:
        values.setdefault(key, value)
    return values


@router.get(
    "/",
    summary="Signed screenshot",
    responses={
        200: {"content": {"image/png": {}, "text/html": {}}},
        400: {"description": "Missing or invalid parameter"},
        403: {"description": "Invalid signature"},
        502: {"description": "Screenshot generation failed"},
    },
)
async def screenshot(
    request: Request,
    controller: ControllerDep,
    verifier: VerifierDep,
    validator: ValidatorDep,
    metrics: MetricsDep,
) -> Response:
    """
    Serve a signed screenshot, or the authoring console.

    Query Parameters:
        url, version, sig (required); w, h, js, css (optional)
    """
    start = time.perf_counter()
    params = first_values(request.query_params.multi_items())

    if PARAM_URL not in params:
        return HTMLResponse(CONSOLE_HTML)

    # STAGE-1.0: Validation
    validated = validator.validate(params)

    # STAGE-2.0: Signature verification
    if not verifier.verify(validated.descriptor, validated.signature):
        metrics.record_signature_rejection()
        raise InvalidSignatureError(thread_id=get_thread_id())

    # STAGE-3.0 .. 6.0: Cache-aside
    result = await controller.handle(validated.descriptor)

    outcome = RequestOutcome.RENDERED if result.tier is CacheTier.MISS else RequestOutcome.CACHE_HIT
    duration = time.perf_counter() - start
    metrics.record_request(outcome.value, duration)
    log_stage(
        logger,
        Stage.RESPONSE_ASSEMBLY,
        "Screenshot served",
        outcome=outcome.value,
        tier=result.tier.value,
        size_bytes=len(result.artifact.body),
        duration_ms=round(duration * 1000, 2),
    )

    return Response(content=result.artifact.body, status_code=200, headers=result.artifact.headers)
