"""Pydantic schemas for API requests and responses."""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class SubmittedFields(BaseModel):
    """Field values submitted alongside the label image."""
    brand_name: Optional[str] = Field(None, alias="brandName")
    product_class: Optional[str] = Field(None, alias="productClass")
    alcohol_content: Optional[str] = Field(None, alias="alcoholContent")

    @field_validator("brand_name", "product_class", "alcohol_content", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        """Empty or whitespace-only values count as not submitted."""
        if value is None:
            return None
        value = str(value)
        return value if value.strip() else None

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "brandName": "Old Tom's",
                "productClass": "Gin",
                "alcoholContent": "40",
            }
        }


class LabelChecksResult(BaseModel):
    """Which submitted fields were found in the label text."""
    found: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class UploadResponse(BaseModel):
    """Response for a label upload that was processed end to end."""
    success: bool
    reason: str
    attempts: int
    submitted_fields: SubmittedFields = Field(..., alias="submittedFields")
    label_checks: LabelChecksResult = Field(..., alias="labelChecks")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "success": True,
                "reason": "All labels verified successfully",
                "attempts": 1,
                "submittedFields": {
                    "brandName": "Old Tom's",
                    "productClass": "Gin",
                    "alcoholContent": "40",
                },
                "labelChecks": {
                    "found": ["brandName", "productClass", "alcoholContent"],
                    "missing": [],
                },
            }
        }


class ErrorResponse(BaseModel):
    """Error response with optional OCR API diagnostics."""
    success: bool = False
    reason: str
    attempts: Optional[int] = None
    api_status: Optional[int] = Field(None, alias="apiStatus")
    api_error_code: Optional[Any] = Field(None, alias="apiErrorCode")
    api_error_message: Optional[str] = Field(None, alias="apiErrorMessage")
    api_body: Optional[Any] = Field(None, alias="apiBody")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "success": False,
                "reason": "External API returned an error status",
                "apiStatus": 403,
                "attempts": 1,
                "apiBody": "The API key is invalid",
            }
        }


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    ocr_configured: bool = Field(..., alias="ocrConfigured")

    class Config:
        populate_by_name = True
