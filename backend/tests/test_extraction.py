"""Tests for OCR response text extraction."""

import json

import pytest
from labelcheck.services.extraction import (
    ResponseShape,
    classify_response,
    extract_parsed_text,
    serialize_body,
    payload_error_code,
    payload_error_message,
)


FALLBACK = "<serialized>"


class ExplodingDict(dict):
    """Dict whose lookups fail, to exercise the fallback path."""

    def get(self, *args, **kwargs):
        raise RuntimeError("lookup failed")


class TestClassifyResponse:
    """Test response shape detection."""

    def test_per_page(self):
        """Test a non-empty ParsedResults list is per-page."""
        shape, payload = classify_response({"ParsedResults": [{"ParsedText": "a"}]})
        assert shape is ResponseShape.PER_PAGE
        assert payload == [{"ParsedText": "a"}]

    def test_empty_pages_fall_through_to_single_text(self):
        """Test an empty ParsedResults list does not count as per-page."""
        shape, payload = classify_response({"ParsedResults": [], "ParsedText": "b"})
        assert shape is ResponseShape.SINGLE_TEXT
        assert payload == "b"

    def test_bare_string(self):
        """Test a plain string body."""
        shape, _ = classify_response("raw text")
        assert shape is ResponseShape.BARE_STRING

    @pytest.mark.parametrize("body", [
        {"OCRExitCode": 1},
        {"ParsedText": 42},
        {"ParsedResults": "not a list"},
        ["a", "b"],
        None,
        12,
    ])
    def test_unknown(self, body):
        """Test unrecognized bodies are classified as unknown."""
        shape, payload = classify_response(body)
        assert shape is ResponseShape.UNKNOWN
        assert payload is None


class TestExtractParsedText:
    """Test extract_parsed_text()."""

    def test_joins_pages(self):
        """Test per-page texts are joined with newlines."""
        body = {"ParsedResults": [{"ParsedText": "Old Tom's Gin"}, {"ParsedText": "40% abv"}]}
        assert extract_parsed_text(body, FALLBACK) == "Old Tom's Gin\n40% abv"

    def test_page_without_text(self):
        """Test pages missing ParsedText contribute an empty line."""
        body = {"ParsedResults": [{"ParsedText": "first"}, {"FileParseExitCode": -10}, None]}
        assert extract_parsed_text(body, FALLBACK) == "first\n\n"

    def test_single_text(self):
        """Test a top-level ParsedText field is used directly."""
        assert extract_parsed_text({"ParsedText": "LONDON DRY GIN"}, FALLBACK) == "LONDON DRY GIN"

    def test_bare_string(self):
        """Test a string body is used directly."""
        assert extract_parsed_text("VODKA 40%", FALLBACK) == "VODKA 40%"

    def test_unknown_uses_fallback(self):
        """Test unknown shapes fall back to the serialized body."""
        assert extract_parsed_text({"OCRExitCode": 1}, FALLBACK) == FALLBACK

    def test_inspection_error_uses_fallback(self):
        """Test exceptions during inspection fall back instead of raising."""
        assert extract_parsed_text(ExplodingDict(), FALLBACK) == FALLBACK


class TestSerializeBody:
    """Test serialize_body()."""

    def test_string_unchanged(self):
        """Test strings pass through."""
        assert serialize_body("plain") == "plain"

    def test_dict_serialized(self):
        """Test JSON bodies are serialized."""
        body = {"OCRExitCode": 1, "IsErroredOnProcessing": False}
        assert json.loads(serialize_body(body)) == body

    def test_unserializable(self):
        """Test non-JSON objects fall back to str()."""
        assert serialize_body({1, 2}) == str({1, 2})


class TestPayloadErrors:
    """Test embedded vendor error code detection."""

    @pytest.mark.parametrize("code", [1, 2])
    def test_success_codes(self, code):
        """Test success exit codes are not errors."""
        assert payload_error_code({"OCRExitCode": code}) is None

    @pytest.mark.parametrize("code", [3, 4, 99])
    def test_error_codes(self, code):
        """Test other exit codes are surfaced."""
        assert payload_error_code({"OCRExitCode": code}) == code

    @pytest.mark.parametrize("body", [
        {"OCRExitCode": 0},
        {"OCRExitCode": None},
        {"IsErroredOnProcessing": True},
        "error text",
        None,
    ])
    def test_lenient_shapes(self, body):
        """Test missing, falsy or unrecognized codes pass through."""
        assert payload_error_code(body) is None

    def test_error_message_list(self):
        """Test list error messages are joined."""
        body = {"OCRExitCode": 3, "ErrorMessage": ["Unable to recognize the file type", "E216"]}
        assert payload_error_message(body) == "Unable to recognize the file type; E216"

    def test_error_message_missing(self):
        """Test absent messages return None."""
        assert payload_error_message({"OCRExitCode": 3}) is None
        assert payload_error_message("nope") is None
