"""Simple in-memory registry of editing sessions."""

from __future__ import annotations

from typing import Any, Dict, Tuple
from uuid import uuid4

from pixelmagic.handlers.error_handler import SessionNotFoundError
from pixelmagic.services.session_service.controller import EditSessionController


class SessionStore:
    """Hands out one controller per client; all controllers share the same editor."""

    def __init__(self, editor: Any) -> None:
        self._editor = editor
        self._sessions: Dict[str, EditSessionController] = {}

    def create(self) -> Tuple[str, EditSessionController]:
        """Create an empty session and return its id and controller."""
        session_id = uuid4().hex
        controller = EditSessionController(self._editor)
        self._sessions[session_id] = controller
        return session_id, controller

    def get(self, session_id: str) -> EditSessionController:
        """Return the controller or raise SessionNotFoundError."""
        controller = self._sessions.get(session_id)
        if controller is None:
            raise SessionNotFoundError(session_id)
        return controller

    def discard(self, session_id: str) -> None:
        """Drop a session; its in-flight request, if any, resolves into nothing."""
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
