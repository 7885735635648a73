"""Validation of uploaded label images before they are sent to OCR."""

from typing import Optional
import logging

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class UploadRejected(Exception):
    """Raised when an upload fails type or size filtering."""

    NOT_IMAGE = "NOT_IMAGE"
    TOO_LARGE = "TOO_LARGE"
    UPLOAD_ERROR = "UPLOAD_ERROR"

    REASONS = {
        NOT_IMAGE: "Uploaded file is not an image",
        TOO_LARGE: "Image file is too large. Please select a smaller image.",
        UPLOAD_ERROR: "File upload error. Please try again.",
    }

    def __init__(self, code: str):
        self.code = code
        self.reason = self.REASONS.get(code, self.REASONS[self.UPLOAD_ERROR])
        super().__init__(self.reason)


def is_image_type(content_type: Optional[str], settings: Settings) -> bool:
    """Accept only image/* types the OCR API supports."""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime.startswith("image/") and mime in settings.allowed_mime_types


def validate_upload(
    content: bytes,
    content_type: Optional[str],
    settings: Optional[Settings] = None,
) -> None:
    """
    Check an uploaded file against the type and size limits.

    Raises:
        UploadRejected: NOT_IMAGE for non-image content types,
            TOO_LARGE when the file exceeds max_upload_size_bytes
    """
    settings = settings or get_settings()

    if not is_image_type(content_type, settings):
        logger.info(f"Rejected upload with content type {content_type!r}")
        raise UploadRejected(UploadRejected.NOT_IMAGE)

    if len(content) > settings.max_upload_size_bytes:
        logger.info(f"Rejected upload of {len(content)} bytes (limit {settings.max_upload_size_bytes})")
        raise UploadRejected(UploadRejected.TOO_LARGE)
