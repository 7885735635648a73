"""Client for the external OCR API (OCR.space compatible).

Each call posts the image as multipart form data and retries with
exponential backoff when the request times out or the server answers
with a 5xx status. Anything else ends the sequence immediately:

    attempt -> classify outcome -> success?  return
                                -> retryable and attempts left? sleep, attempt again
                                -> otherwise return failure

The httpx transport and the sleep function are injectable so the sequence
can run against a fake vendor without real delays.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple
import logging
import time

import httpx

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "apikey"
ENGINE_FIELD = "OCREngine"
FILE_FIELD = "file"


class ErrorKind(str, Enum):
    """Classification of a failed attempt."""
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    TRANSPORT = "transport"


RETRYABLE_ERRORS = {ErrorKind.TIMEOUT, ErrorKind.SERVER_ERROR}


@dataclass(frozen=True)
class ErrorInfo:
    """Why an attempt did not produce a usable response."""
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None

    @property
    def is_timeout(self) -> bool:
        return self.kind is ErrorKind.TIMEOUT


@dataclass(frozen=True)
class ApiResponse:
    """HTTP response from the OCR API with its decoded body."""
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class ApiCallResult:
    """Outcome of a full call, retries included."""
    success: bool
    attempts: int
    response: Optional[ApiResponse] = None
    error: Optional[ErrorInfo] = None


def decode_body(response: httpx.Response) -> Any:
    """JSON body when possible, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


class OCRClient:
    """Posts images to the OCR API with bounded retries."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return max(1, self.settings.max_attempts)

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available for real calls."""
        return bool(self.settings.external_api_key)

    def backoff_seconds(self, attempt: int) -> float:
        """Delay before retrying after the given (1-based) attempt."""
        return self.settings.initial_backoff_ms * (2 ** (attempt - 1)) / 1000.0

    @staticmethod
    def is_retryable(error: ErrorInfo) -> bool:
        return error.kind in RETRYABLE_ERRORS

    def _headers(self) -> dict:
        headers = {}
        if self.settings.external_api_key:
            headers[API_KEY_HEADER] = self.settings.external_api_key
        return headers

    def _form_data(self) -> dict:
        data = {}
        if self.settings.external_ocr_engine:
            data[ENGINE_FIELD] = self.settings.external_ocr_engine
        return data

    async def call(self, image_bytes: bytes, filename: str, mime_type: str) -> ApiCallResult:
        """
        Send an image to the OCR API.

        Args:
            image_bytes: Raw image content
            filename: Original upload filename
            mime_type: Upload content type (e.g. image/jpeg)

        Returns:
            ApiCallResult. success is True for any non-5xx HTTP response;
            status interpretation is left to the caller.
        """
        attempt = 0
        last_error: Optional[ErrorInfo] = None
        last_response: Optional[ApiResponse] = None

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
        ) as client:
            while attempt < self.max_attempts:
                attempt += 1
                response, error = await self._attempt(client, attempt, image_bytes, filename, mime_type)

                if error is None:
                    return ApiCallResult(success=True, attempts=attempt, response=response)

                last_error, last_response = error, response

                if not self.is_retryable(error):
                    logger.warning(f"OCR API attempt {attempt} failed, not retrying: {error.message}")
                    break

                if attempt < self.max_attempts:
                    delay = self.backoff_seconds(attempt)
                    logger.warning(
                        f"OCR API attempt {attempt}/{self.max_attempts} failed ({error.kind.value}), "
                        f"retrying in {delay:.1f}s"
                    )
                    await self._sleep(delay)

        logger.error(f"OCR API call failed after {attempt} attempt(s): {last_error.message}")
        return ApiCallResult(
            success=False,
            attempts=attempt,
            response=last_response,
            error=last_error,
        )

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        attempt: int,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
    ) -> Tuple[Optional[ApiResponse], Optional[ErrorInfo]]:
        """Run a single request and classify its outcome."""
        start = time.time()
        try:
            response = await client.post(
                self.settings.external_api_url,
                files={FILE_FIELD: (filename or "upload", image_bytes, mime_type)},
                data=self._form_data(),
                headers=self._headers(),
            )
        except httpx.TimeoutException as e:
            return None, ErrorInfo(ErrorKind.TIMEOUT, str(e) or "Request timed out")
        except httpx.RequestError as e:
            return None, ErrorInfo(ErrorKind.TRANSPORT, str(e) or e.__class__.__name__)

        elapsed_ms = int((time.time() - start) * 1000)
        logger.info(f"OCR API attempt {attempt}: HTTP {response.status_code} ({elapsed_ms}ms)")

        api_response = ApiResponse(status_code=response.status_code, body=decode_body(response))
        if response.status_code >= 500:
            return api_response, ErrorInfo(
                ErrorKind.SERVER_ERROR,
                f"OCR API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return api_response, None
