"""Upload processing: OCR call, text extraction and label verification."""

from dataclasses import dataclass
from typing import Union
import logging

from ..models import SubmittedFields, LabelChecksResult, UploadResponse, ErrorResponse
from .ocr_client import OCRClient, ApiCallResult, ErrorKind
from .extraction import (
    extract_parsed_text,
    serialize_body,
    payload_error_code,
    payload_error_message,
    EXIT_CODE_KEY,
)
from .matching import verify_labels, is_verification_complete

logger = logging.getLogger(__name__)

VERIFIED_REASON = "All labels verified successfully"
NOT_VERIFIED_REASON = "Could not find required labels in image"


@dataclass(frozen=True)
class ProcessingOutcome:
    """HTTP status and body for a processed upload."""
    status_code: int
    payload: Union[UploadResponse, ErrorResponse]

    def content(self) -> dict:
        if isinstance(self.payload, ErrorResponse):
            return self.payload.model_dump(by_alias=True, exclude_none=True)
        return self.payload.model_dump(by_alias=True)


class UploadProcessor:
    """Runs one uploaded label through OCR and verification."""

    def __init__(self, ocr_client: OCRClient):
        self.ocr_client = ocr_client

    async def process(
        self,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
        fields: SubmittedFields,
    ) -> ProcessingOutcome:
        """
        Process a validated upload.

        Returns:
            ProcessingOutcome: 502 for OCR API transport or status failures,
            400 for an error code in the OCR payload, 200 otherwise
            (whether or not every field was found).
        """
        result = await self.ocr_client.call(image_bytes, filename, mime_type)

        if not result.success:
            return self._transport_failure(result)

        response = result.response
        if not response.ok:
            logger.warning(f"OCR API returned HTTP {response.status_code}")
            body = response.body
            return ProcessingOutcome(502, ErrorResponse(
                reason="External API returned an error status",
                api_status=response.status_code,
                api_error_code=body.get(EXIT_CODE_KEY) if isinstance(body, dict) else None,
                attempts=result.attempts,
                api_body=body,
            ))

        body = response.body
        parsed_text = extract_parsed_text(body, serialize_body(body))

        error_code = payload_error_code(body)
        if error_code:
            logger.warning(f"OCR API payload carries error code {error_code}")
            return ProcessingOutcome(400, ErrorResponse(
                reason="External API returned an error code in payload",
                api_error_code=error_code,
                api_error_message=payload_error_message(body),
                attempts=result.attempts,
            ))

        checks = verify_labels(parsed_text, fields)
        verified = is_verification_complete(checks)
        logger.info(
            f"Verification {'passed' if verified else 'failed'}: "
            f"found={checks.found} missing={checks.missing} attempts={result.attempts}"
        )

        return ProcessingOutcome(200, UploadResponse(
            success=verified,
            reason=VERIFIED_REASON if verified else NOT_VERIFIED_REASON,
            attempts=result.attempts,
            submitted_fields=fields,
            label_checks=LabelChecksResult(found=checks.found, missing=checks.missing),
        ))

    @staticmethod
    def _transport_failure(result: ApiCallResult) -> ProcessingOutcome:
        error = result.error
        if error.is_timeout:
            reason = "External API timed out"
        elif error.kind is ErrorKind.SERVER_ERROR:
            reason = "External API returned a server error"
        else:
            reason = f"Failed to call external API: {error.message}"

        return ProcessingOutcome(502, ErrorResponse(
            reason=reason,
            attempts=result.attempts,
            api_status=error.status_code,
        ))
