"""
Unit Tests for the Screenshot Request Validator

Covers presence checks, URL checks, width/height bounds and defaults.
"""

import pytest

from src.application.validators import ScreenshotRequestValidator
from src.core.exceptions import (
    InvalidHeightError,
    InvalidUrlError,
    InvalidWidthError,
    MissingParameterError,
    ValidationError,
)


def _params(**overrides):
    params = {"url": "https://example.com", "version": "1", "sig": "abc"}
    params.update(overrides)
    return {k: v for k, v in params.items() if v is not None}


@pytest.fixture
def validator():
    return ScreenshotRequestValidator()


@pytest.mark.unit
class TestRequiredParameters:
    """url, version and sig must be present and non-empty."""

    @pytest.mark.parametrize("missing", ["url", "version", "sig"])
    def test_absent_parameter_is_rejected(self, validator, missing):
        with pytest.raises(MissingParameterError) as exc_info:
            validator.validate(_params(**{missing: None}))

        assert exc_info.value.status_code == 400
        assert exc_info.value.public_message == "Missing required parameters"
        assert exc_info.value.details["field"] == missing

    @pytest.mark.parametrize("empty", ["url", "version", "sig"])
    def test_empty_parameter_is_rejected(self, validator, empty):
        with pytest.raises(MissingParameterError):
            validator.validate(_params(**{empty: ""}))

    def test_missing_check_runs_before_url_check(self, validator):
        """An invalid url with a missing sig reports the missing parameter."""
        with pytest.raises(MissingParameterError):
            validator.validate({"url": "not a url", "version": "1"})


@pytest.mark.unit
class TestUrlValidation:
    @pytest.mark.parametrize(
        "url",
        ["not a url", "example.com", "/relative/path", "https://", "http:///no-host", "http://host:99999/"],
    )
    def test_non_absolute_url_is_rejected(self, validator, url):
        with pytest.raises(InvalidUrlError) as exc_info:
            validator.validate(_params(url=url))

        assert exc_info.value.public_message == "Invalid url"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com",
            "http://localhost:8080/a?b=c#d",
            "https://例え.jp/パス",
            "data:text/html,<h1>hi</h1>",
            "mailto:someone@example.com",
        ],
    )
    def test_absolute_url_is_accepted(self, validator, url):
        result = validator.validate(_params(url=url))
        assert result.descriptor.target_url == url


@pytest.mark.unit
class TestWidthBounds:
    @pytest.mark.parametrize("width", ["100", "1200", "3840"])
    def test_width_within_bounds(self, validator, width):
        assert validator.validate(_params(w=width)).descriptor.width == width

    @pytest.mark.parametrize("width", ["99", "3841", "0", "-100", "abc", "12.5", " 1200", "1_200", "١٢٠٠"])
    def test_width_out_of_bounds_or_not_integer(self, validator, width):
        with pytest.raises(InvalidWidthError) as exc_info:
            validator.validate(_params(w=width))

        assert exc_info.value.public_message == "Invalid w (100-3840)"

    def test_width_defaults_to_1200(self, validator):
        assert validator.validate(_params()).descriptor.width == "1200"

    def test_empty_width_defaults_to_1200(self, validator):
        assert validator.validate(_params(w="")).descriptor.width == "1200"

    def test_leading_zero_width_is_kept_as_sent(self, validator):
        """The descriptor keeps the signed string, not a normalised number."""
        descriptor = validator.validate(_params(w="01200")).descriptor
        assert descriptor.width == "01200"
        assert descriptor.width_px == 1200


@pytest.mark.unit
class TestHeightBounds:
    @pytest.mark.parametrize("height", ["100", "800", "2160"])
    def test_height_within_bounds(self, validator, height):
        assert validator.validate(_params(h=height)).descriptor.height == height

    @pytest.mark.parametrize("height", ["99", "2161", "FULL", "Full", "auto", "0"])
    def test_height_invalid(self, validator, height):
        with pytest.raises(InvalidHeightError) as exc_info:
            validator.validate(_params(h=height))

        assert exc_info.value.public_message == 'Invalid h (100-2160 or "full")'

    def test_full_height_is_accepted(self, validator):
        descriptor = validator.validate(_params(h="full")).descriptor

        assert descriptor.full_page is True
        assert descriptor.height_px is None

    def test_height_defaults_to_800(self, validator):
        descriptor = validator.validate(_params()).descriptor

        assert descriptor.height == "800"
        assert descriptor.height_px == 800

    def test_empty_height_defaults_to_800(self, validator):
        assert validator.validate(_params(h="")).descriptor.height == "800"


@pytest.mark.unit
class TestValidatedRequest:
    def test_optional_fields_default_to_empty(self, validator):
        result = validator.validate(_params())

        assert result.descriptor.js == ""
        assert result.descriptor.css == ""
        assert result.signature == "abc"

    def test_js_and_css_pass_through_unmodified(self, validator):
        js = "document.body.style.background='pink'|x"
        css = "h1{font-size:72px}"
        result = validator.validate(_params(js=js, css=css))

        assert result.descriptor.js == js
        assert result.descriptor.css == css

    def test_all_errors_are_validation_errors(self):
        for error in (MissingParameterError, InvalidUrlError, InvalidWidthError, InvalidHeightError):
            assert issubclass(error, ValidationError)
            assert error.status_code == 400
