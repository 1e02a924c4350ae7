"""Shared helpers for base64 payloads, data URIs and PNG re-encoding."""

import io
import re
import base64
import binascii
from PIL import Image
from typing import Tuple

DEFAULT_MIME_TYPE = "image/png"
_MIME_IN_ENVELOPE = re.compile(r":(.*?);")


class Helper:
    """Provide reusable conversions between raw bytes, base64 text and data URIs.

    Keeps encoding rules in one place so intake, the edit adapter and the
    download route agree on the transport form of an image.
    """

    def encode_bytes(self, raw: bytes) -> str:
        """Base64-encode raw bytes into ASCII text."""
        return base64.b64encode(raw).decode("ascii")

    def decode_b64(self, data: str) -> bytes:
        """Decode base64 text, raising ValueError on malformed input."""
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image payload: {e}") from e

    def to_data_uri(self, data: str, mime_type: str = DEFAULT_MIME_TYPE) -> str:
        """Wrap base64 text in a `data:` URI envelope."""
        return f"data:{mime_type};base64,{data}"

    def split_data_uri(self, uri: str) -> Tuple[str, str]:
        """
        Split a `data:` URI into (base64 payload, media type).

        The media type falls back to image/png when the envelope does not carry one.
        """
        prefix, _, data = uri.partition(",")
        match = _MIME_IN_ENVELOPE.search(prefix)
        mime_type = match.group(1) if match and match.group(1) else DEFAULT_MIME_TYPE
        return data, mime_type

    def to_png_bytes(self, data: str) -> bytes:
        """Return the image as PNG bytes, re-encoding with Pillow when needed."""
        raw = self.decode_b64(data)
        with Image.open(io.BytesIO(raw)) as img:
            if img.format == "PNG":
                return raw
            if img.mode not in ("RGB", "RGBA", "L", "LA"):
                img = img.convert("RGBA")
            buf = io.BytesIO()
            img.save(buf, format="PNG")
            return buf.getvalue()
