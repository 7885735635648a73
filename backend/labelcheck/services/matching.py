"""Text normalization and field matching against OCR output.

Submitted field values are compared with the recognized label text after
both sides go through the same normalization, so accents, apostrophes,
spacing and casing differences do not cause false negatives. Alcohol content
gets a dedicated numeric matcher that requires a percentage-style suffix.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)

BRAND_NAME = "brandName"
PRODUCT_CLASS = "productClass"
ALCOHOL_CONTENT = "alcoholContent"

# Straight, curly, backtick and modifier-letter apostrophes
_APOSTROPHES = re.compile(r"['‘’`ʼ]")
_WHITESPACE = re.compile(r"\s+")

# Leading decimal number, parsed the way a lenient float parser would
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

ABV_SUFFIX_PATTERN = r"(?:%|percent|abv)"


@dataclass
class LabelChecks:
    """Field names that were found in / missing from the label text."""
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    def record(self, field_name: str, matched: bool) -> None:
        (self.found if matched else self.missing).append(field_name)


def normalize(text: Optional[str]) -> str:
    """
    Normalize text for comparison.

    Lower-cases, applies NFKD compatibility decomposition, drops combining
    marks and apostrophes, collapses whitespace runs and trims.
    """
    if not text:
        return ""

    decomposed = unicodedata.normalize("NFKD", str(text).lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    stripped = _APOSTROPHES.sub("", stripped)
    return _WHITESPACE.sub(" ", stripped).strip().lower()


def text_contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    """True if the normalized needle is a non-empty substring of the normalized haystack."""
    normalized_needle = normalize(needle)
    if not normalized_needle:
        return False
    return normalized_needle in normalize(haystack)


def parse_leading_float(raw_value: Optional[str]) -> Optional[float]:
    """Parse the leading number of a string ("13.50", "13.5%"), or None."""
    if raw_value is None:
        return None
    match = _LEADING_NUMBER.match(str(raw_value).strip())
    if not match:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def canonical_number(value: float) -> str:
    """Minimal decimal rendering of a number: 13.50 -> "13.5", 40.0 -> "40"."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def alcohol_content_matches(raw_value: Optional[str], source_text: Optional[str]) -> bool:
    """
    Check whether an alcohol percentage appears on the label.

    The number must be followed by "%", "percent" or "abv" (case-insensitive),
    optionally with a trailing ".0" and whitespace in between. The search runs
    on the raw OCR text, not the normalized one.
    """
    value = parse_leading_float(raw_value)
    if value is None:
        return False

    token = re.escape(canonical_number(value))
    pattern = re.compile(
        r"\b" + token + r"(?:\.0)?\s*" + ABV_SUFFIX_PATTERN,
        re.IGNORECASE,
    )
    return pattern.search(source_text or "") is not None


def verify_labels(parsed_text: str, fields) -> LabelChecks:
    """
    Classify each submitted field as found or missing in the parsed text.

    Args:
        parsed_text: Plain text extracted from the OCR response
        fields: SubmittedFields; absent or blank values are skipped

    Returns:
        LabelChecks with found/missing field names
    """
    checks = LabelChecks()

    if fields.brand_name:
        checks.record(BRAND_NAME, text_contains(parsed_text, fields.brand_name))

    if fields.product_class:
        checks.record(PRODUCT_CLASS, text_contains(parsed_text, fields.product_class))

    if fields.alcohol_content:
        checks.record(ALCOHOL_CONTENT, alcohol_content_matches(fields.alcohol_content, parsed_text))

    logger.debug(f"Label checks: found={checks.found} missing={checks.missing}")
    return checks


def is_verification_complete(checks: LabelChecks) -> bool:
    """All submitted fields were found, and at least one field was submitted."""
    return not checks.missing and bool(checks.found)
