"""Error types for intake, sessions and the Gemini edit adapter, plus their API mapping."""

# handlers.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from google.genai import errors as genai_errors

from pixelmagic.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

GENERIC_EDIT_FAILURE = "Failed to edit image using Gemini."


@dataclass
class ImageProviderError(Exception):
    """
    Base error for everything the API reports back as a structured JSON body.
    """

    provider: str
    message: str
    status_code: int = 500
    error_type: str = "provider_error"
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        """Readable form used in logs."""
        return f"[{self.provider}] {self.error_type}: {self.message}"


class GeminiImageError(ImageProviderError):
    """
    Failure of a single edit request: an empty or imageless response, a model
    refusal, or a transport/protocol error raised by the Gemini client.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        error_type: str = "gemini_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            provider="gemini",
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
        )


class ImageIntakeError(ImageProviderError):
    """Raised when an uploaded file is not an image or cannot be decoded."""

    def __init__(
        self,
        message: str = "Please upload a valid image file",
        status_code: int = 415,
        error_type: str = "unsupported_media_type",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            provider="intake",
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
        )


class SessionNotFoundError(ImageProviderError):
    """Unknown or already discarded session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            provider="session",
            message=f"Session {session_id} not found",
            status_code=404,
            error_type="not_found",
        )


class ConfigurationError(ImageProviderError):
    """Missing or invalid process configuration, e.g. no API key."""

    def __init__(self, message: str) -> None:
        super().__init__(
            provider="config",
            message=message,
            status_code=500,
            error_type="configuration_error",
        )


class MapExceptions:
    """Translate Gemini client exceptions into GeminiImageError.

    The resulting message is always the underlying one, so what the user
    sees is what the service said; only the type and status code are derived.
    """

    @staticmethod
    def _underlying_message(exc: Exception) -> str:
        """Best available human message carried by the exception."""
        message = getattr(exc, "message", None)
        if isinstance(message, str) and message.strip():
            return message
        text = str(exc)
        return text if text.strip() else GENERIC_EDIT_FAILURE

    def map_gemini_exception(self, exc: Exception) -> GeminiImageError:
        """
        Map a Gemini SDK (or transport) exception to a GeminiImageError.
        Already-mapped errors are returned untouched.
        """
        if isinstance(exc, GeminiImageError):
            return exc

        logger.error("Gemini error during image edit", exc_info=exc)
        message = self._underlying_message(exc)

        if isinstance(exc, genai_errors.ClientError):
            code = getattr(exc, "code", None)
            if code == 429:
                return GeminiImageError(
                    message=message, status_code=429, error_type="rate_limit"
                )
            if code in (401, 403):
                return GeminiImageError(
                    message=message, status_code=403, error_type="permission_denied"
                )
            return GeminiImageError(
                message=message, status_code=400, error_type="bad_request"
            )
        if isinstance(exc, genai_errors.APIError):
            # ServerError and any other API-level failure
            return GeminiImageError(
                message=message, status_code=502, error_type="api_error"
            )

        return GeminiImageError(
            message=message,
            status_code=500,
            error_type="unknown_error",
            details={"exception_type": exc.__class__.__name__},
        )

    @staticmethod
    def register_exception_handlers(app: FastAPI) -> None:
        """
        Install the JSON handler for ImageProviderError on a FastAPI app:

            app = FastAPI()
            MapExceptions.register_exception_handlers(app)
        """

        @app.exception_handler(ImageProviderError)
        async def image_provider_error_handler(
            request: Request, exc: ImageProviderError
        ) -> JSONResponse:
            logger.warning(
                "ImageProviderError caught by FastAPI handler: %s",
                exc,
                extra={"provider": exc.provider, "type": exc.error_type},
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "status": "error",
                    "provider": exc.provider,
                    "error_type": exc.error_type,
                    "message": exc.message,
                    "details": exc.details,
                },
            )
