"""
Unit Tests for the Command Line
"""

from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlsplit

import pytest

from src.cli import ExitCode, create_parser, main
from src.core.security.signature import SignatureVerifier
from src.screenshot.models import RequestDescriptor
from tests.test_fixtures import TEST_SECRET


def _descriptor_from(query: dict[str, list[str]]) -> RequestDescriptor:
    return RequestDescriptor(
        target_url=query["url"][0],
        version=query["version"][0],
        width=query["w"][0],
        height=query["h"][0],
        js=query.get("js", [""])[0],
        css=query.get("css", [""])[0],
    )


@pytest.mark.unit
class TestSignCommand:
    def test_prints_verifiable_url(self, capsys):
        code = main(["sign", "--url", "https://example.com/a b", "--version", "3", "--secret", TEST_SECRET])

        assert code == ExitCode.SUCCESS.value
        printed = capsys.readouterr().out.strip()
        parts = urlsplit(printed)
        query = parse_qs(parts.query)

        assert printed.startswith("http://localhost:8000/?")
        assert query["url"] == ["https://example.com/a b"]
        assert SignatureVerifier(TEST_SECRET).verify(_descriptor_from(query), query["sig"][0])

    def test_full_page_with_injections(self, capsys):
        main([
            "sign", "--url", "https://example.com", "--version", "1", "--h", "full",
            "--js", "a|b", "--css", "p{}", "--secret", TEST_SECRET,
            "--base-url", "https://shots.example.com/",
        ])

        printed = capsys.readouterr().out.strip()
        query = parse_qs(urlsplit(printed).query)

        assert printed.startswith("https://shots.example.com/?")
        assert query["h"] == ["full"]
        assert SignatureVerifier(TEST_SECRET).verify(_descriptor_from(query), query["sig"][0])

    def test_missing_secret_is_usage_error(self, capsys):
        settings = MagicMock()
        settings.security.SCREENSHOT_SECRET.get_secret_value.return_value = ""

        with patch("src.cli.get_settings", return_value=settings):
            code = main(["sign", "--url", "https://example.com", "--version", "1"])

        assert code == ExitCode.USAGE_ERROR.value
        assert "SCREENSHOT_SECRET" in capsys.readouterr().err


@pytest.mark.unit
class TestParser:
    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_sign_requires_url_and_version(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["sign", "--url", "https://example.com"])

    def test_serve_defaults(self):
        args = create_parser().parse_args(["serve"])

        assert args.host is None
        assert args.port is None
        assert args.reload is False

    def test_serve_runs_uvicorn(self):
        with patch("uvicorn.run") as run:
            code = main(["serve", "--port", "9001"])

        assert code == ExitCode.SUCCESS.value
        assert run.call_args.args[0] == "src.application.app:app"
        assert run.call_args.kwargs["port"] == 9001
