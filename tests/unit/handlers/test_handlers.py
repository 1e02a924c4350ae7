"""Tests for mapping Gemini client exceptions to domain errors and handlers."""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from google.genai import errors as genai_errors

from pixelmagic.handlers.error_handler import (
    GENERIC_EDIT_FAILURE,
    GeminiImageError,
    ImageIntakeError,
    ImageProviderError,
    MapExceptions,
)


def _client_error(code, message):
    return genai_errors.ClientError(code, {"error": {"message": message}})


class TestImageProviderErrorBasics:
    def test_str_representation(self):
        err = ImageProviderError(
            provider="test_provider",
            message="Something went wrong",
            status_code=500,
            error_type="test_error",
            details={"foo": "bar"},
        )

        s = str(err)
        assert "[test_provider]" in s
        assert "test_error" in s
        assert "Something went wrong" in s


class TestMapGeminiExceptions:
    def setup_method(self):
        self.mapper = MapExceptions()

    def test_rate_limit(self):
        mapped = self.mapper.map_gemini_exception(_client_error(429, "quota exceeded"))

        assert isinstance(mapped, GeminiImageError)
        assert mapped.status_code == 429
        assert mapped.error_type == "rate_limit"
        assert mapped.message == "quota exceeded"

    def test_permission_denied(self):
        mapped = self.mapper.map_gemini_exception(_client_error(403, "API key invalid"))

        assert mapped.status_code == 403
        assert mapped.error_type == "permission_denied"
        assert mapped.message == "API key invalid"

    def test_bad_request(self):
        mapped = self.mapper.map_gemini_exception(_client_error(400, "bad mime type"))

        assert mapped.status_code == 400
        assert mapped.error_type == "bad_request"

    def test_server_error(self):
        exc = genai_errors.ServerError(503, {"error": {"message": "overloaded"}})
        mapped = self.mapper.map_gemini_exception(exc)

        assert mapped.status_code == 502
        assert mapped.error_type == "api_error"
        assert mapped.message == "overloaded"

    def test_unknown_exception(self):
        class CustomException(Exception):
            pass

        mapped = self.mapper.map_gemini_exception(CustomException("socket closed"))

        assert mapped.status_code == 500
        assert mapped.error_type == "unknown_error"
        assert mapped.message == "socket closed"
        assert mapped.details["exception_type"] == "CustomException"

    def test_empty_message_falls_back(self):
        mapped = self.mapper.map_gemini_exception(ConnectionError())
        assert mapped.message == GENERIC_EDIT_FAILURE

    def test_already_mapped_error_passes_through(self):
        original = GeminiImageError(message="No content", error_type="no_content")
        assert self.mapper.map_gemini_exception(original) is original


def create_test_app():
    app = FastAPI()
    MapExceptions.register_exception_handlers(app)

    @app.get("/raise-gemini")
    async def raise_gemini():
        raise GeminiImageError(
            message="Simulated Gemini failure",
            status_code=400,
            error_type="bad_request",
            details={"foo": "bar"},
        )

    @app.get("/raise-intake")
    async def raise_intake():
        raise ImageIntakeError()

    return app


class TestFastAPIExceptionHandler:
    def setup_method(self):
        self.client = TestClient(create_test_app())

    def test_gemini_error_response_shape(self):
        resp = self.client.get("/raise-gemini")
        assert resp.status_code == 400

        data = resp.json()
        assert data["status"] == "error"
        assert data["provider"] == "gemini"
        assert data["error_type"] == "bad_request"
        assert data["message"] == "Simulated Gemini failure"
        assert data["details"] == {"foo": "bar"}

    def test_intake_error_response_shape(self):
        resp = self.client.get("/raise-intake")
        assert resp.status_code == 415

        data = resp.json()
        assert data["provider"] == "intake"
        assert data["message"] == "Please upload a valid image file"
        assert "details" in data
