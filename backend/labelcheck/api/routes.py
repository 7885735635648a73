"""API route definitions."""

import time
from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from ..models import SubmittedFields, UploadResponse, ErrorResponse, HealthResponse
from ..services import OCRClient, UploadProcessor, UploadRejected, validate_upload
from ..config import Settings, get_settings
from .. import __version__

logger = logging.getLogger(__name__)
router = APIRouter()

NO_FILE_REASON = "Please select an image file to upload."
INTERNAL_ERROR_REASON = "Internal server error"


def get_ocr_client(settings: Settings = Depends(get_settings)) -> OCRClient:
    """OCR client built from the application settings."""
    return OCRClient(settings)


def error_response(status_code: int, reason: str) -> JSONResponse:
    """JSON error body in the shape every endpoint uses."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(reason=reason).model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(ocr_client: OCRClient = Depends(get_ocr_client)):
    """Check API health and whether an OCR API key is configured."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        ocr_configured=ocr_client.is_configured,
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid upload or OCR payload error"},
        500: {"model": ErrorResponse, "description": "Unexpected server error"},
        502: {"model": ErrorResponse, "description": "OCR API failure"},
    },
    tags=["Verification"],
)
async def upload_label(
    image_file: Optional[UploadFile] = File(None, alias="imageFile", description="Label image file"),
    brand_name: Optional[str] = Form(None, alias="brandName", description="Brand name to look for"),
    product_class: Optional[str] = Form(None, alias="productClass", description="Product class to look for"),
    alcohol_content: Optional[str] = Form(None, alias="alcoholContent", description="Alcohol content, e.g. 40 or 13.5"),
    settings: Settings = Depends(get_settings),
    ocr_client: OCRClient = Depends(get_ocr_client),
):
    """
    Upload a label image and check that the submitted fields appear on it.

    Returns 200 whenever the label was processed, with `success` telling
    whether every submitted field was found.
    """
    start_time = time.time()

    try:
        if image_file is None or not image_file.filename:
            return error_response(400, NO_FILE_REASON)

        try:
            image_bytes = await image_file.read()
        except Exception as e:
            logger.error(f"Failed to read uploaded image: {e}")
            raise UploadRejected(UploadRejected.UPLOAD_ERROR)

        validate_upload(image_bytes, image_file.content_type, settings)

        fields = SubmittedFields(
            brand_name=brand_name,
            product_class=product_class,
            alcohol_content=alcohol_content,
        )

        processor = UploadProcessor(ocr_client)
        outcome = await processor.process(
            image_bytes,
            image_file.filename,
            image_file.content_type,
            fields,
        )

        total_time = int((time.time() - start_time) * 1000)
        logger.info(f"Processed {image_file.filename} -> HTTP {outcome.status_code} ({total_time}ms)")

        return JSONResponse(status_code=outcome.status_code, content=outcome.content())

    except UploadRejected as e:
        return error_response(400, e.reason)
    except Exception as e:
        logger.exception(f"Unexpected error in /upload: {e}")
        return error_response(500, INTERNAL_ERROR_REASON)
