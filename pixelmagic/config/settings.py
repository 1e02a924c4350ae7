"""Process configuration for the Gemini edit adapter."""

import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, SecretStr

from pixelmagic.handlers.error_handler import ConfigurationError
from pixelmagic.utility.path_finder import Finder

DEFAULT_MODEL = "gemini-2.5-flash-image"


class GeminiSettings(BaseModel):
    """Credential and model selection handed to the edit adapter.

    Built once at startup and injected; nothing downstream reads the
    environment on its own.
    """

    api_key: Optional[SecretStr] = None
    model_name: str = DEFAULT_MODEL
    run_mode: Literal["actual", "mock"] = "actual"

    model_config = {"frozen": True, "protected_namespaces": ()}

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "GeminiSettings":
        """
        Read GEMINI_API_KEY (or API_KEY), GEMINI_MODEL and RUN_MODE.

        The project-level .env is loaded first when present. In "actual"
        mode a missing key raises ConfigurationError.
        """
        if load_env_file:
            load_dotenv(Finder().get_directory("env"))

        run_mode = os.getenv("RUN_MODE", "actual").strip().lower()
        if run_mode not in ("actual", "mock"):
            raise ConfigurationError(
                f"RUN_MODE must be 'actual' or 'mock', got '{run_mode}'."
            )

        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
        if run_mode == "actual" and not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set.")

        return cls(
            api_key=SecretStr(api_key) if api_key else None,
            model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            run_mode=run_mode,
        )
