"""Models used for the session endpoints' payloads and responses."""

from pydantic import BaseModel
from typing import Optional

from pixelmagic.models.session import AppState, ImageItem, Session


class PromptRequest(BaseModel):
    """Binds the free-text edit instruction to a session."""

    prompt: str = ""

    model_config = {
        "extra": "ignore",
    }


class EditRequest(BaseModel):
    """Submit payload; an omitted prompt means "use the bound one"."""

    prompt: Optional[str] = None

    model_config = {
        "extra": "ignore",
    }


class SessionResponse(BaseModel):
    """Snapshot of a session as returned by every session endpoint."""

    session_id: str
    state: AppState
    prompt: str = ""
    original_image: Optional[ImageItem] = None
    generated_image: Optional[ImageItem] = None
    error: Optional[str] = None

    @classmethod
    def from_session(cls, session_id: str, session: Session) -> "SessionResponse":
        """Build the response envelope from a session snapshot."""
        return cls(
            session_id=session_id,
            state=session.state,
            prompt=session.prompt,
            original_image=session.original_image,
            generated_image=session.generated_image,
            error=session.error,
        )
