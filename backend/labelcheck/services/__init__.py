"""Services for OCR calls, text extraction, label matching, and upload processing."""

from .matching import (
    LabelChecks,
    normalize,
    text_contains,
    alcohol_content_matches,
    verify_labels,
    is_verification_complete,
)
from .extraction import ResponseShape, classify_response, extract_parsed_text, serialize_body
from .ocr_client import OCRClient, ApiCallResult, ApiResponse, ErrorInfo, ErrorKind
from .upload import UploadRejected, validate_upload
from .processor import UploadProcessor, ProcessingOutcome

__all__ = [
    "LabelChecks",
    "normalize",
    "text_contains",
    "alcohol_content_matches",
    "verify_labels",
    "is_verification_complete",
    "ResponseShape",
    "classify_response",
    "extract_parsed_text",
    "serialize_body",
    "OCRClient",
    "ApiCallResult",
    "ApiResponse",
    "ErrorInfo",
    "ErrorKind",
    "UploadRejected",
    "validate_upload",
    "UploadProcessor",
    "ProcessingOutcome",
]
