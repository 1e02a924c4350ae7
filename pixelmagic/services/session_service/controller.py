"""State machine owning one editing session."""

import asyncio
from typing import Any, Optional

from pixelmagic.models.session import AppState, Session
from pixelmagic.services.intake_service.intake import ImageIntake
from pixelmagic.handlers.error_handler import GeminiImageError
from pixelmagic.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while processing the image."

SUBMITTABLE_STATES = (AppState.READY_TO_EDIT, AppState.COMPLETE, AppState.ERROR)
BUSY_STATES = (AppState.UPLOADING, AppState.PROCESSING)


class EditSessionController:
    """Coordinates intake -> ready -> processing -> complete/error -> reset.

    Only this class mutates the Session. Every asynchronous operation is
    tagged with the revision current when it started; a resolution whose
    revision has since been superseded (by reset, a new upload or another
    submit) is dropped instead of overwriting the newer state.
    """

    def __init__(self, editor: Any, intake: Optional[ImageIntake] = None):
        self._editor = editor
        self._intake = intake or ImageIntake()
        self._session = Session()
        self._revision = 0

    @property
    def session(self) -> Session:
        """A copy of the current session; callers cannot mutate controller state."""
        return self._session.model_copy(deep=True)

    @property
    def state(self) -> AppState:
        return self._session.state

    def _advance(self) -> int:
        self._revision += 1
        return self._revision

    def _is_current(self, token: int) -> bool:
        return token == self._revision

    async def load_image(
        self, raw: bytes, content_type: Optional[str], filename: str = ""
    ) -> Session:
        """
        Accept an uploaded image and move to READY_TO_EDIT.

        Rejected input raises ImageIntakeError and leaves the session as it
        was. Accepted input passes through UPLOADING while it is encoded and
        supersedes any request still in flight.
        """
        self._intake.validate(raw, content_type, filename)

        previous, previous_revision = self._session, self._revision
        token = self._advance()
        self._session = previous.model_copy(update={"state": AppState.UPLOADING})
        try:
            image = await asyncio.to_thread(self._intake.encode, raw, content_type)
        except Exception:
            if self._is_current(token):
                self._session, self._revision = previous, previous_revision
            raise

        if not self._is_current(token):
            logger.info("Discarding superseded upload %r", filename)
            return self.session

        self._session = Session(
            state=AppState.READY_TO_EDIT,
            original_image=image,
            prompt=previous.prompt,
        )
        logger.info("Session ready to edit (%s)", image.mime_type)
        return self.session

    def set_prompt(self, prompt: str) -> bool:
        """Bind the instruction text. Ignored while an upload or edit is in flight."""
        if self._session.state in BUSY_STATES:
            return False
        self._session = self._session.model_copy(update={"prompt": prompt})
        return True

    async def submit(self, prompt: Optional[str] = None) -> bool:
        """
        Run one edit with the bound prompt (or `prompt`, if given).

        Returns False without touching the session when the guard blocks it:
        no image, a blank prompt, or a request already in flight.
        """
        session = self._session
        candidate = prompt if prompt is not None else session.prompt
        if (
            session.state not in SUBMITTABLE_STATES
            or session.original_image is None
            or not session.original_image.data_b64
            or not candidate.strip()
        ):
            logger.debug("Submit ignored in state %s", session.state.value)
            return False

        token = self._advance()
        session = session.model_copy(
            update={"prompt": candidate, "state": AppState.PROCESSING, "error": None}
        )
        self._session = session
        image = session.original_image
        logger.info("Submitting edit request #%d", token)

        try:
            result = await self._editor.edit(
                image.data_b64, image.mime_type, session.prompt
            )
        except GeminiImageError as e:
            self._resolve(token, AppState.ERROR, error=e.message)
        except Exception as e:
            logger.exception("Edit request #%d failed unexpectedly", token)
            self._resolve(
                token, AppState.ERROR, error=str(e) or UNEXPECTED_ERROR_MESSAGE
            )
        else:
            self._resolve(token, AppState.COMPLETE, generated_image=result)
        return True

    def _resolve(self, token: int, state: AppState, **changes: Any) -> None:
        if not self._is_current(token):
            logger.info("Discarding stale result of edit request #%d", token)
            return
        self._session = self._session.model_copy(update={"state": state, **changes})
        if state is AppState.ERROR:
            logger.warning("Edit request #%d failed: %s", token, changes.get("error"))
        else:
            logger.info("Edit request #%d complete", token)

    def reset(self) -> Session:
        """Start over: back to IDLE with every field cleared."""
        self._advance()
        self._session = Session()
        logger.info("Session reset")
        return self.session
