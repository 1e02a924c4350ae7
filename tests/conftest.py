"""Shared fixtures: small real images and a substitute Gemini client."""

import io
from types import SimpleNamespace

import pytest
from PIL import Image


def _encode(fmt: str, color) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _encode("PNG", (200, 30, 30))


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _encode("JPEG", (30, 30, 200))


class FakeModels:
    """Records generate_content calls and returns (or raises) a canned outcome."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def fake_client():
    """Factory building a client whose `aio.models` is a FakeModels."""

    def _build(response=None, exc=None):
        models = FakeModels(response=response, exc=exc)
        return SimpleNamespace(aio=SimpleNamespace(models=models))

    return _build
