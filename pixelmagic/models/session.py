"""Session state for one editing interaction."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AppState(str, Enum):
    """Lifecycle of an editing session."""

    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    READY_TO_EDIT = "READY_TO_EDIT"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"


class ImageItem(BaseModel):
    """Image blob encoded as base64 with MIME metadata."""

    mime_type: str = "image/png"
    data_b64: str = ""


class Session(BaseModel):
    """The live editing session: source image, prompt, last result and last error.

    `generated_image` is only meaningful in COMPLETE and `error` only in ERROR.
    """

    state: AppState = AppState.IDLE
    original_image: Optional[ImageItem] = None
    prompt: str = ""
    generated_image: Optional[ImageItem] = None
    error: Optional[str] = None


class EditHistoryItem(BaseModel):
    """Record shape for a past edit. Nothing populates it yet."""

    id: str
    original_image: str
    generated_image: str
    prompt: str
    timestamp: int = Field(description="Milliseconds since the epoch.")
