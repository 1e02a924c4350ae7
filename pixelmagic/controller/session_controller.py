"""API routes for editing sessions: upload, prompt, edit, reset and download."""

import io
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse

from pixelmagic.models.edit_image import EditRequest, PromptRequest, SessionResponse
from pixelmagic.models.session import AppState
from pixelmagic.services.session_service.main import SessionServices as ss
from pixelmagic.services.session_service.store import SessionStore
from pixelmagic.utility.utils import Helper
from pixelmagic.utility.logger import AppLogger

router = APIRouter(prefix="/api/sessions", tags=["Session"])
logger = AppLogger.get_logger(__name__)
helper = Helper()

DOWNLOAD_FILENAME = "edited-image.png"


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    store: SessionStore = Depends(ss.get_session_store),
) -> SessionResponse:
    """Start a new, empty editing session."""
    session_id, controller = store.create()
    logger.info(f"Created session {session_id}")
    return SessionResponse.from_session(session_id, controller.session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str, store: SessionStore = Depends(ss.get_session_store)
) -> SessionResponse:
    """Return the current snapshot; clients poll this while an edit is running."""
    return SessionResponse.from_session(session_id, store.get(session_id).session)


@router.post("/{session_id}/image", response_model=SessionResponse)
async def upload_image(
    session_id: str,
    file: UploadFile = File(...),
    store: SessionStore = Depends(ss.get_session_store),
) -> SessionResponse:
    """
    Hand an uploaded file to intake. Non-images are rejected with 415 and
    the session is left untouched.
    """
    controller = store.get(session_id)
    raw = await file.read()
    session = await controller.load_image(raw, file.content_type, file.filename or "")
    return SessionResponse.from_session(session_id, session)


@router.put("/{session_id}/prompt", response_model=SessionResponse)
async def set_prompt(
    session_id: str,
    payload: PromptRequest,
    store: SessionStore = Depends(ss.get_session_store),
) -> SessionResponse:
    """Bind the edit instruction; ignored while a request is in flight."""
    controller = store.get(session_id)
    controller.set_prompt(payload.prompt)
    return SessionResponse.from_session(session_id, controller.session)


@router.post("/{session_id}/edit", response_model=SessionResponse)
async def submit_edit(
    session_id: str,
    payload: Optional[EditRequest] = None,
    store: SessionStore = Depends(ss.get_session_store),
) -> SessionResponse:
    """
    Run one edit and return the resolved session (COMPLETE or ERROR).
    A blocked submit (no image, blank prompt, edit already running) returns
    the unchanged snapshot rather than an error.
    """
    controller = store.get(session_id)
    started = await controller.submit(payload.prompt if payload else None)
    if not started:
        logger.info(f"Submit ignored for session {session_id}")
    return SessionResponse.from_session(session_id, controller.session)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(
    session_id: str, store: SessionStore = Depends(ss.get_session_store)
) -> SessionResponse:
    """Start over with an empty session."""
    return SessionResponse.from_session(session_id, store.get(session_id).reset())


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str, store: SessionStore = Depends(ss.get_session_store)
) -> None:
    """Destroy the session."""
    store.discard(session_id)
    logger.info(f"Discarded session {session_id}")


@router.get("/{session_id}/download")
async def download_image(
    session_id: str, store: SessionStore = Depends(ss.get_session_store)
):
    """Send the edited image as a PNG attachment under a fixed filename."""
    session = store.get(session_id).session
    if session.state != AppState.COMPLETE or session.generated_image is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No edited image is available for download.",
        )
    try:
        png_bytes = helper.to_png_bytes(session.generated_image.data_b64)
    except (OSError, ValueError) as exc:
        logger.error(f"Could not convert edited image to PNG: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The edited image could not be converted to PNG.",
        ) from exc

    return StreamingResponse(
        io.BytesIO(png_bytes),
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
