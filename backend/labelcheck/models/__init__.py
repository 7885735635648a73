"""Pydantic models for request/response schemas."""

from .schemas import (
    SubmittedFields,
    LabelChecksResult,
    UploadResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "SubmittedFields",
    "LabelChecksResult",
    "UploadResponse",
    "ErrorResponse",
    "HealthResponse",
]
