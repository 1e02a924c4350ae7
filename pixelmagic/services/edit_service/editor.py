"""Edit adapter: one Gemini request per edit, image or failure out."""

import asyncio
from typing import Any, List, Optional

from google import genai
from google.genai import types

from pixelmagic.config.settings import GeminiSettings
from pixelmagic.models.session import ImageItem
from pixelmagic.utility.utils import Helper, DEFAULT_MIME_TYPE
from pixelmagic.handlers.error_handler import (
    ConfigurationError,
    GeminiImageError,
    MapExceptions,
)
from pixelmagic.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

NO_CONTENT_MESSAGE = "No content generated from the model."
NO_IMAGE_DATA_MESSAGE = "No image data found in the response."


class GeminiEditor:
    """Sends an (image, instruction) pair to Gemini and extracts the edited image.

    The client is built once from the injected settings, or passed in directly
    (any object exposing `aio.models.generate_content` will do). Each call makes
    exactly one request: no retries, no caching.
    """

    def __init__(self, settings: GeminiSettings, client: Optional[Any] = None):
        self.settings = settings
        self.client = client if client is not None else self._create_client(settings)
        self.helper = Helper()
        self.exception = MapExceptions()

    @staticmethod
    def _create_client(settings: GeminiSettings) -> genai.Client:
        if settings.api_key is None:
            raise ConfigurationError("GEMINI_API_KEY is not set.")
        return genai.Client(api_key=settings.api_key.get_secret_value())

    def build_contents(
        self, encoded_image: str, mime_type: str, prompt: str
    ) -> List[types.Content]:
        """Inline image part first, then the text instruction."""
        return [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(
                        data=self.helper.decode_b64(encoded_image),
                        mime_type=mime_type,
                    ),
                    types.Part.from_text(text=prompt),
                ],
            )
        ]

    async def edit(self, encoded_image: str, mime_type: str, prompt: str) -> ImageItem:
        """Return the edited image, or raise GeminiImageError describing why not."""
        if not encoded_image:
            raise ValueError("encoded_image must not be empty")
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be blank")

        try:
            contents = self.build_contents(encoded_image, mime_type, prompt)
            logger.info("Sending edit request to %s...", self.settings.model_name)
            resp = await self.client.aio.models.generate_content(
                model=self.settings.model_name,
                contents=contents,
            )
            result = self.extract_image(resp)
            logger.info("Edit response received (%s).", result.mime_type)
            return result
        except GeminiImageError as e:
            logger.warning("Gemini returned no usable image: %s", e)
            raise
        except Exception as e:
            raise self.exception.map_gemini_exception(e) from e

    @staticmethod
    def _response_parts(resp: Any) -> List[Any]:
        candidates = getattr(resp, "candidates", None)
        if not candidates:
            return []
        content = getattr(candidates[0], "content", None)
        return list(getattr(content, "parts", None) or [])

    def read_gemini_image_part(self, part: Any) -> Optional[ImageItem]:
        """
        Return the part's inline image as base64, or None if it carries none.
        The SDK surfaces inline data as bytes; text payloads are passed through.
        """
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline is not None else None
        if not data:
            return None
        if isinstance(data, (bytes, bytearray)):
            data = self.helper.encode_bytes(bytes(data))
        mime_type = getattr(inline, "mime_type", None) or DEFAULT_MIME_TYPE
        return ImageItem(mime_type=mime_type, data_b64=data)

    def extract_image(self, resp: Any) -> ImageItem:
        """
        First inline image wins. With no image, the first text part is the
        model's explanation and becomes the error message verbatim.
        """
        parts = self._response_parts(resp)
        if not parts:
            raise GeminiImageError(
                message=NO_CONTENT_MESSAGE, error_type="no_content"
            )

        for part in parts:
            image = self.read_gemini_image_part(part)
            if image is not None:
                return image

        for part in parts:
            text = getattr(part, "text", None)
            if text:
                raise GeminiImageError(
                    message=text, status_code=422, error_type="model_refusal"
                )

        raise GeminiImageError(
            message=NO_IMAGE_DATA_MESSAGE, error_type="no_image_data"
        )


class MockEditor:
    """
    Stand-in for GeminiEditor when RUN_MODE=mock.

    Does NOT call any external API: the original image is handed back as the
    "edit", and prompts mentioning "refuse" come back as a model refusal so
    the error path can be exercised from the UI.
    """

    REFUSAL_MESSAGE = "Mock model declined to edit this image."

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self.settings = settings

    async def edit(self, encoded_image: str, mime_type: str, prompt: str) -> ImageItem:
        logger.info("Running mock edit (no external API call).")
        await asyncio.sleep(0)
        if "refuse" in prompt.lower():
            raise GeminiImageError(
                message=self.REFUSAL_MESSAGE, status_code=422, error_type="model_refusal"
            )
        return ImageItem(mime_type=mime_type, data_b64=encoded_image)
