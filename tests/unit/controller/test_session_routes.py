"""Tests for the session HTTP routes, driven through FastAPI's TestClient."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from pixelmagic.controller.session_controller import DOWNLOAD_FILENAME, router
from pixelmagic.handlers.error_handler import MapExceptions
from pixelmagic.services.edit_service.editor import MockEditor
from pixelmagic.services.session_service.store import SessionStore

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def create_test_app():
    app = FastAPI()
    MapExceptions.register_exception_handlers(app)
    app.state.session_store = SessionStore(MockEditor())
    app.include_router(router)
    return app


class TestSessionRoutes:
    def setup_method(self):
        self.client = TestClient(create_test_app())
        resp = self.client.post("/api/sessions")
        assert resp.status_code == 201
        self.session_id = resp.json()["session_id"]
        self.base = f"/api/sessions/{self.session_id}"

    def _upload(self, name, data, content_type):
        return self.client.post(
            f"{self.base}/image", files={"file": (name, data, content_type)}
        )

    def test_new_session_is_idle(self):
        data = self.client.get(self.base).json()
        assert data["state"] == "IDLE"
        assert data["original_image"] is None
        assert data["generated_image"] is None

    def test_upload_then_edit_then_download(self, png_bytes):
        resp = self._upload("cat.png", png_bytes, "image/png")
        assert resp.status_code == 200
        assert resp.json()["state"] == "READY_TO_EDIT"
        assert resp.json()["original_image"]["mime_type"] == "image/png"

        resp = self.client.put(f"{self.base}/prompt", json={"prompt": "add a hat"})
        assert resp.json()["prompt"] == "add a hat"

        resp = self.client.post(f"{self.base}/edit")
        data = resp.json()
        assert data["state"] == "COMPLETE"
        assert data["generated_image"]["data_b64"] == data["original_image"]["data_b64"]

        resp = self.client.get(f"{self.base}/download")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert DOWNLOAD_FILENAME in resp.headers["content-disposition"]
        assert resp.content == png_bytes

    def test_download_converts_to_png(self, jpeg_bytes):
        self._upload("dog.jpg", jpeg_bytes, "image/jpeg")
        self.client.post(f"{self.base}/edit", json={"prompt": "make it blue"})

        resp = self.client.get(f"{self.base}/download")
        assert resp.status_code == 200
        assert resp.content.startswith(PNG_SIGNATURE)

    def test_text_upload_is_rejected(self):
        resp = self._upload("notes.txt", b"hello", "text/plain")

        assert resp.status_code == 415
        body = resp.json()
        assert body["status"] == "error"
        assert body["provider"] == "intake"
        assert body["error_type"] == "unsupported_media_type"
        assert self.client.get(self.base).json()["state"] == "IDLE"

    def test_refusal_surfaces_as_session_error(self, png_bytes):
        self._upload("cat.png", png_bytes, "image/png")

        resp = self.client.post(f"{self.base}/edit", json={"prompt": "please refuse"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["state"] == "ERROR"
        assert data["error"] == MockEditor.REFUSAL_MESSAGE
        assert self.client.get(f"{self.base}/download").status_code == 404

    def test_blank_prompt_submit_is_a_no_op(self, png_bytes):
        self._upload("cat.png", png_bytes, "image/png")

        resp = self.client.post(f"{self.base}/edit", json={"prompt": "   "})

        assert resp.status_code == 200
        assert resp.json()["state"] == "READY_TO_EDIT"
        assert resp.json()["error"] is None

    def test_edit_without_image_does_not_bind_prompt(self):
        resp = self.client.post(f"{self.base}/edit", json={"prompt": "add a hat"})

        assert resp.status_code == 200
        assert resp.json()["state"] == "IDLE"
        assert resp.json()["prompt"] == ""

    def test_reset_clears_everything(self, png_bytes):
        self._upload("cat.png", png_bytes, "image/png")
        self.client.post(f"{self.base}/edit", json={"prompt": "add a hat"})

        data = self.client.post(f"{self.base}/reset").json()

        assert data["state"] == "IDLE"
        assert data["prompt"] == ""
        assert data["original_image"] is None
        assert data["generated_image"] is None

    def test_delete_and_unknown_session(self):
        assert self.client.delete(self.base).status_code == 204

        resp = self.client.get(self.base)
        assert resp.status_code == 404
        assert resp.json()["provider"] == "session"
        assert resp.json()["error_type"] == "not_found"
