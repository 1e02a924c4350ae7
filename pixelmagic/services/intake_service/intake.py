"""Image intake: validate an uploaded file and turn it into a transport-ready payload."""

from typing import Optional

from pixelmagic.models.session import ImageItem
from pixelmagic.utility.utils import Helper
from pixelmagic.handlers.error_handler import ImageIntakeError
from pixelmagic.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class ImageIntake:
    """Accepts user-supplied image files.

    Validation looks only at the declared media type; nothing is decoded
    or resized locally. Accepted bytes are wrapped in a data URI and split
    back apart, so the media type stored on the session is whatever the
    envelope carries.
    """

    def __init__(self):
        self.helper = Helper()

    def validate(self, raw: bytes, content_type: Optional[str], filename: str = "") -> None:
        """Reject anything that is not declared as an image, or is empty."""
        if not content_type or not content_type.lower().startswith("image/"):
            logger.warning(
                "Rejected upload %r with content type %r", filename, content_type
            )
            raise ImageIntakeError(
                details={"filename": filename, "content_type": content_type}
            )
        if not raw:
            logger.warning("Rejected empty upload %r", filename)
            raise ImageIntakeError(
                message="The uploaded image is empty.",
                status_code=422,
                error_type="empty_image",
                details={"filename": filename},
            )

    def encode(self, raw: bytes, content_type: str) -> ImageItem:
        """Encode accepted bytes; the media type defaults to image/png if undetermined."""
        data_uri = self.helper.to_data_uri(self.helper.encode_bytes(raw), content_type)
        data, mime_type = self.helper.split_data_uri(data_uri)
        logger.info("Encoded %s upload (%d bytes)", mime_type, len(raw))
        return ImageItem(mime_type=mime_type, data_b64=data)
