"""
Unit Tests for API Routes

Tests the screenshot, health and metrics routes end to end with
TestClient. The rendering service is replaced with FakeRenderer and the
artifact store is in-memory.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.application.app import create_app
from src.core.exceptions import ConfigurationError
from src.core.security.signature import SignatureVerifier
from tests.test_fixtures import (
    PNG_BYTES,
    TEST_SECRET,
    ErrorRequestFactory,
    RendererTestFactory,
    RequestFactory,
)


@pytest.fixture
def client_for(test_settings):
    """Build a started TestClient around the given renderer (and optional store)."""
    clients = []

    def _make(renderer, **kwargs):
        app = create_app(test_settings, renderer=renderer, **kwargs)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


def _drain(client):
    client.portal.call(client.app.state.tasks.drain)


@pytest.mark.unit
class TestConsole:
    def test_no_url_serves_console(self, client_for, renderer):
        response = client_for(renderer).get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Screenshot Gateway" in response.text
        assert renderer.calls == []

    def test_other_parameters_without_url_still_serve_console(self, client_for, renderer):
        response = client_for(renderer).get("/", params={"version": "1", "sig": "x"})

        assert response.headers["content-type"].startswith("text/html")


@pytest.mark.unit
class TestValidationResponses:
    """400 responses carry the fixed plain-text body."""

    @pytest.mark.parametrize(
        "params, body",
        [
            ({"url": "https://example.com", "version": "1"}, "Missing required parameters"),
            ({"url": "", "version": "1", "sig": "x"}, "Missing required parameters"),
            ({"url": "example.com", "version": "1", "sig": "x"}, "Invalid url"),
            ({"url": "https://example.com", "version": "1", "sig": "x", "w": "50"}, "Invalid w (100-3840)"),
            (
                {"url": "https://example.com", "version": "1", "sig": "x", "h": "auto"},
                'Invalid h (100-2160 or "full")',
            ),
        ],
    )
    def test_bad_request(self, client_for, renderer, params, body):
        response = client_for(renderer).get("/", params=params)

        assert response.status_code == 400
        assert response.text == body
        assert response.headers["content-type"].startswith("text/plain")
        assert renderer.calls == []


@pytest.mark.unit
class TestSignatureResponses:
    def test_wrong_signature_is_forbidden(self, client_for, renderer):
        response = client_for(renderer).get("/", params=ErrorRequestFactory.unsigned_params())

        assert response.status_code == 403
        assert response.text == "Invalid signature"
        assert renderer.calls == []

    def test_tampered_request_is_forbidden(self, client_for, renderer):
        response = client_for(renderer).get("/", params=ErrorRequestFactory.tampered_params())

        assert response.status_code == 403

    def test_validation_runs_before_signature(self, client_for, renderer):
        params = ErrorRequestFactory.unsigned_params(w="5000")

        assert client_for(renderer).get("/", params=params).status_code == 400

    def test_signature_with_other_secret_is_forbidden(self, client_for, renderer):
        params = RequestFactory.signed_params(secret="someone-else")

        assert client_for(renderer).get("/", params=params).status_code == 403

    def test_missing_secret_fails_startup(self, test_settings, renderer):
        settings = test_settings.model_copy(update={"SCREENSHOT_SECRET": ""})
        app = create_app(settings, renderer=renderer)

        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass


@pytest.mark.unit
class TestRejectionShortCircuits:
    """Rejected requests never reach the verifier, the store or the renderer."""

    @pytest.fixture
    def store(self):
        return AsyncMock()

    @pytest.mark.parametrize(
        "params",
        [
            {"url": "", "version": "1", "sig": "x"},
            {"url": "https://example.com", "sig": "x"},
            {"url": "https://example.com", "version": "1"},
        ],
        ids=["url", "version", "sig"],
    )
    def test_missing_parameter_skips_verifier_and_store(self, client_for, renderer, store, params):
        verifier = MagicMock(spec=SignatureVerifier)

        response = client_for(renderer, store=store, verifier=verifier).get("/", params=params)

        assert response.status_code == 400
        assert response.text == "Missing required parameters"
        verifier.verify.assert_not_called()
        store.lookup.assert_not_awaited()
        store.get.assert_not_awaited()
        store.put.assert_not_awaited()
        assert renderer.calls == []

    def test_bad_signature_skips_store(self, client_for, renderer, store):
        verifier = MagicMock(spec=SignatureVerifier, wraps=SignatureVerifier(TEST_SECRET))
        client = client_for(renderer, store=store, verifier=verifier)

        response = client.get("/", params=ErrorRequestFactory.tampered_params())
        _drain(client)

        assert response.status_code == 403
        verifier.verify.assert_called_once()
        store.lookup.assert_not_awaited()
        store.get.assert_not_awaited()
        store.put.assert_not_awaited()
        assert renderer.calls == []


@pytest.mark.unit
class TestScreenshotResponses:
    def test_signed_request_returns_png(self, client_for, renderer):
        response = client_for(renderer).get("/", params=RequestFactory.signed_params())

        assert response.status_code == 200
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "public, max-age=31536000, immutable"
        assert response.headers["x-screenshot-url"] == "https://example.com"
        assert response.headers["x-screenshot-version"] == "1"
        assert response.headers["x-screenshot-width"] == "1200"
        assert response.headers["x-screenshot-height"] == "800"
        assert response.headers["x-screenshot-timestamp"].endswith("Z")
        assert "X-Thread-ID" in response.headers

    def test_full_page_request(self, client_for, renderer):
        params = RequestFactory.signed_params(width="1920", height="full")

        response = client_for(renderer).get("/", params=params)

        assert response.status_code == 200
        assert response.headers["x-screenshot-height"] == "full"
        assert renderer.calls[0].full_page is True

    def test_js_and_css_reach_renderer(self, client_for, renderer):
        params = RequestFactory.signed_params(js="document.title='x'", css="body{margin:0}")

        client_for(renderer).get("/", params=params)

        assert renderer.calls[0].js == "document.title='x'"
        assert renderer.calls[0].css == "body{margin:0}"

    def test_repeated_parameter_uses_first_value(self, client_for, renderer):
        params = RequestFactory.signed_params()
        query = list(params.items()) + [("version", "2")]

        response = client_for(renderer).get("/", params=query)

        assert response.status_code == 200
        assert response.headers["x-screenshot-version"] == "1"

    def test_second_request_is_served_from_cache(self, client_for, renderer):
        client = client_for(renderer)
        params = RequestFactory.signed_params()

        first = client.get("/", params=params)
        _drain(client)
        second = client.get("/", params=params)

        assert len(renderer.calls) == 1
        assert second.content == first.content
        assert second.headers["x-screenshot-timestamp"] == first.headers["x-screenshot-timestamp"]

    def test_different_version_renders_again(self, client_for, renderer):
        client = client_for(renderer)

        client.get("/", params=RequestFactory.signed_params(version="1"))
        _drain(client)
        client.get("/", params=RequestFactory.signed_params(version="2"))

        assert len(renderer.calls) == 2

    def test_thread_id_is_echoed(self, client_for, renderer):
        response = client_for(renderer).get(
            "/", params=RequestFactory.signed_params(), headers={"X-Thread-ID": "trace-123"}
        )

        assert response.headers["X-Thread-ID"] == "trace-123"


@pytest.mark.unit
class TestUpstreamFailureResponses:
    def test_upstream_error_is_bad_gateway(self, client_for, failing_renderer):
        client = client_for(failing_renderer)

        response = client.get("/", params=RequestFactory.signed_params())
        _drain(client)

        assert response.status_code == 502
        assert response.text == "Screenshot generation failed"
        assert "render failed" not in response.text

    def test_failure_is_not_cached(self, client_for, failing_renderer):
        client = client_for(failing_renderer)
        params = RequestFactory.signed_params()

        client.get("/", params=params)
        _drain(client)
        client.get("/", params=params)

        assert len(failing_renderer.calls) == 2

    def test_unexpected_error_is_generic_500(self, client_for):
        renderer = RendererTestFactory.succeeding()
        renderer.render = AsyncMock(side_effect=RuntimeError("secret internals"))

        response = client_for(renderer).get("/", params=RequestFactory.signed_params())

        assert response.status_code == 500
        assert response.text == "Internal server error"
        assert "X-Thread-ID" in response.headers


@pytest.mark.unit
class TestHealthRoutes:
    def test_liveness(self, client_for, renderer):
        response = client_for(renderer).get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"

    def test_readiness_with_memory_store(self, client_for, renderer):
        response = client_for(renderer).get("/health/ready")

        assert response.status_code == 200
        components = response.json()["components"]
        assert components["artifact_store"]["backend"] == "memory"
        assert components["background_writes"]["pending"] == 0

    def test_readiness_reports_unhealthy_store(self, client_for, renderer):
        store = AsyncMock()
        store.health_check.return_value = {"status": "unhealthy", "error": "down"}

        response = client_for(renderer, store=store).get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


@pytest.mark.unit
class TestMetricsRoute:
    def test_metrics_are_exposed(self, client_for, renderer):
        client = client_for(renderer)
        client.get("/", params=RequestFactory.signed_params())

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "screenshot_requests_total" in response.text
