"""View logic for the Streamlit surfaces, kept free of Streamlit calls."""

from dataclasses import dataclass
from typing import Optional

from pixelmagic.models.session import AppState, Session
from pixelmagic.utility.utils import Helper
from pixelmagic.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

DOWNLOAD_FILENAME = "edited-image.png"
EXAMPLE_PROMPTS = (
    "Remove the red mark",
    "Make the background a futuristic city",
    "Turn this into a sketch",
)
REFRESH_SECONDS = 1.0

_helper = Helper()


def is_busy(session: Session) -> bool:
    return session.state in (AppState.UPLOADING, AppState.PROCESSING)


def can_submit(session: Session, prompt: Optional[str] = None) -> bool:
    """
    The submit button is enabled only with an image, a prompt and nothing
    in flight. `prompt` is the text typed into the form, when it has not
    been bound to the session yet.
    """
    text = session.prompt if prompt is None else prompt
    return (
        session.original_image is not None
        and bool(text.strip())
        and not is_busy(session)
    )


def submit_label(session: Session) -> str:
    return "Generating..." if session.state == AppState.PROCESSING else "Generate Edit"


def refresh_interval(session: Session) -> Optional[float]:
    """Seconds between redraws of the result area; None once nothing is in flight."""
    return REFRESH_SECONDS if is_busy(session) else None


def error_banner_text(session: Session, dismissed: bool) -> Optional[str]:
    """Message for the error banner; dismissal hides it without touching the session."""
    if session.state != AppState.ERROR or not session.error or dismissed:
        return None
    return session.error


def download_payload(session: Session) -> Optional[bytes]:
    """PNG bytes of the edited image, or None when there is nothing to save."""
    generated = session.generated_image
    if session.state != AppState.COMPLETE or generated is None:
        return None
    try:
        return _helper.to_png_bytes(generated.data_b64)
    except (OSError, ValueError) as exc:
        logger.error(f"Could not convert edited image to PNG: {exc}")
        return None


@dataclass
class ResultView:
    """Side-by-side original/result pair as data URIs."""

    original_src: str
    generated_src: Optional[str]
    is_processing: bool

    @property
    def can_download(self) -> bool:
        return self.generated_src is not None and not self.is_processing

    @classmethod
    def from_session(cls, session: Session) -> Optional["ResultView"]:
        """None while there is no original image to show."""
        original = session.original_image
        if original is None:
            return None
        generated = (
            session.generated_image if session.state == AppState.COMPLETE else None
        )
        return cls(
            original_src=_helper.to_data_uri(original.data_b64, original.mime_type),
            generated_src=(
                _helper.to_data_uri(generated.data_b64, generated.mime_type)
                if generated is not None
                else None
            ),
            is_processing=session.state == AppState.PROCESSING,
        )
