"""Application configuration."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Label OCR Check API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 80

    # CORS - Allow all origins for prototype (restrict in production)
    cors_origins: list[str] = ["*"]

    # Upload limits
    max_upload_size_bytes: int = 1 * 1024 * 1024  # 1 MiB
    allowed_mime_types: set[str] = {
        "image/gif",
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/pjpeg",
        "image/tiff",
        "image/bmp",
    }

    # External OCR API (OCR.space compatible)
    external_api_url: str = "https://api.ocr.space/parse/image"
    external_api_key: str | None = None
    external_ocr_engine: str = "2"

    # Retry policy
    request_timeout_seconds: float = 60.0  # Per attempt
    max_attempts: int = 3
    initial_backoff_ms: int = 1000  # Doubles on every retry

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
