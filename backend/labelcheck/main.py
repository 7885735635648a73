"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .api.routes import error_response
from .services import UploadRejected
from .config import get_settings
from . import __version__

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    # Startup
    logger.info("Starting Label OCR Check API...")
    settings = get_settings()

    logger.info(f"OCR API endpoint: {settings.external_api_url} (engine {settings.external_ocr_engine})")
    if not settings.external_api_key:
        logger.warning("EXTERNAL_API_KEY is not set - OCR requests will likely be rejected")

    logger.info(f"API ready - Version {__version__}")

    yield

    # Shutdown
    logger.info("Shutting down Label OCR Check API...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
## Alcohol Label OCR Check API

Upload a label image together with the brand name, product class and
alcohol content from the application. The image is sent to an external
OCR service and each submitted value is looked up in the recognized text.

### Quick Start
1. Use `/health` to check API status
2. POST a multipart form to `/upload` with `imageFile` and any of
   `brandName`, `productClass`, `alcoholContent`
        """,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Malformed multipart bodies surface as validation errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return error_response(400, UploadRejected.REASONS[UploadRejected.UPLOAD_ERROR])

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Label OCR Check API",
            "version": __version__,
            "docs": "/docs"
        }

    return app


# Create app instance
app = create_app()


def run():
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
