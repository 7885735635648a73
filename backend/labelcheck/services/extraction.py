"""Plain-text extraction from OCR API responses.

The OCR.space API answers in a few different shapes depending on the
endpoint and failure mode. They are recognized here as a small closed set:

- PER_PAGE:    {"ParsedResults": [{"ParsedText": "..."}, ...]}
- SINGLE_TEXT: {"ParsedText": "..."}
- BARE_STRING: "..."
- UNKNOWN:     anything else (the serialized body is used instead)
"""

import json
from enum import Enum
from typing import Any, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

PAGE_RESULTS_KEY = "ParsedResults"
PARSED_TEXT_KEY = "ParsedText"
EXIT_CODE_KEY = "OCRExitCode"
ERROR_MESSAGE_KEY = "ErrorMessage"

# OCRExitCode 1 = parsed successfully, 2 = parsed partially
SUCCESS_EXIT_CODES = {1, 2}


class ResponseShape(str, Enum):
    """Recognized OCR response shapes."""
    PER_PAGE = "per_page"
    SINGLE_TEXT = "single_text"
    BARE_STRING = "bare_string"
    UNKNOWN = "unknown"


def classify_response(body: Any) -> Tuple[ResponseShape, Any]:
    """Return the shape of a response body along with the part holding the text."""
    if isinstance(body, str):
        return ResponseShape.BARE_STRING, body

    if isinstance(body, dict):
        pages = body.get(PAGE_RESULTS_KEY)
        if isinstance(pages, list) and pages:
            return ResponseShape.PER_PAGE, pages

        text = body.get(PARSED_TEXT_KEY)
        if isinstance(text, str):
            return ResponseShape.SINGLE_TEXT, text

    return ResponseShape.UNKNOWN, None


def _page_text(page: Any) -> str:
    if isinstance(page, dict):
        text = page.get(PARSED_TEXT_KEY)
        if isinstance(text, str):
            return text
    return ""


def extract_parsed_text(body: Any, fallback_serialized_body: str) -> str:
    """
    Map an OCR response body to a single plain-text string.

    Args:
        body: Decoded response body (dict, list, str, ...)
        fallback_serialized_body: Serialized body, used when no text field is found

    Returns:
        The recognized text, or the fallback
    """
    try:
        shape, payload = classify_response(body)

        if shape is ResponseShape.PER_PAGE:
            return "\n".join(_page_text(page) for page in payload)
        if shape is ResponseShape.SINGLE_TEXT:
            return payload
        if shape is ResponseShape.BARE_STRING:
            return payload

        logger.warning("Unrecognized OCR response shape, matching against raw body")
        return fallback_serialized_body
    except Exception as e:
        logger.warning(f"Failed to inspect OCR response: {e}")
        return fallback_serialized_body


def serialize_body(body: Any) -> str:
    """Serialize a response body for fallback matching and diagnostics."""
    if isinstance(body, str):
        return body
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return str(body)


def payload_error_code(body: Any) -> Optional[Any]:
    """
    Vendor error code embedded in a 2xx payload, if any.

    Only the OCRExitCode field is inspected; other error shapes pass through
    as success.
    """
    if not isinstance(body, dict):
        return None
    exit_code = body.get(EXIT_CODE_KEY)
    if exit_code and exit_code not in SUCCESS_EXIT_CODES:
        return exit_code
    return None


def payload_error_message(body: Any) -> Optional[str]:
    """Vendor error message(s) from the payload, joined into one string."""
    if not isinstance(body, dict):
        return None
    message = body.get(ERROR_MESSAGE_KEY)
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message if m)
    return str(message) if message else None
