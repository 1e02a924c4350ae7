"""Dependency providers for the session routes."""

from fastapi import Request

from pixelmagic.services.session_service.store import SessionStore


class SessionServices:
    """Expose the process-wide session store to request handlers.

    The store lives on `app.state` so tests can mount the router on their
    own app with a substitute editor.
    """

    @staticmethod
    def get_session_store(request: Request) -> SessionStore:
        """Provide the SessionStore attached to the running app."""
        return request.app.state.session_store
