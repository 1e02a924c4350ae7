"""Factory for the edit adapter matching the configured run mode."""

from typing import Union

from pixelmagic.config.settings import GeminiSettings
from pixelmagic.services.edit_service.editor import GeminiEditor, MockEditor


class ImageEditing:
    """Picks the editor implementation; callers never branch on run mode themselves."""

    @staticmethod
    def get_editor(settings: GeminiSettings) -> Union[GeminiEditor, MockEditor]:
        """Provide a configured editor for the session store."""
        if settings.run_mode == "mock":
            return MockEditor(settings)
        return GeminiEditor(settings)
