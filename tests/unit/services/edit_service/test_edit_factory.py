"""Unit tests for choosing the editor implementation from the run mode."""

from pixelmagic.config.settings import GeminiSettings
from pixelmagic.services.edit_service.editor import GeminiEditor, MockEditor
from pixelmagic.services.edit_service.main import ImageEditing


def test_mock_mode_needs_no_key():
    editor = ImageEditing.get_editor(GeminiSettings(run_mode="mock"))
    assert isinstance(editor, MockEditor)


def test_actual_mode_builds_gemini_editor():
    settings = GeminiSettings(api_key="test-key", model_name="gemini-test-image")
    editor = ImageEditing.get_editor(settings)
    assert isinstance(editor, GeminiEditor)
    assert editor.settings.model_name == "gemini-test-image"
