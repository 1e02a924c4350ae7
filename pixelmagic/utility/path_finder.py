"""Resolve project-relative paths for env files and log output."""

from pathlib import Path


class PathResolver:
    """
    Resolves named locations relative to the project root, regardless of
    the working directory the server or the Streamlit app was started from.
    """

    # utility -> pixelmagic -> project root
    PROJECT_ROOT = Path(__file__).resolve().parents[2]

    DIR_MAP = {
        "root": PROJECT_ROOT,
        "data": PROJECT_ROOT / "data",
        "logs": PROJECT_ROOT / "data" / "logs",
        "env": PROJECT_ROOT / ".env",
    }

    @classmethod
    def get(cls, name: str) -> Path:
        """
        Returns the absolute path registered under `name`.
        Directories (entries without a suffix) are created on first access.
        """
        if name not in cls.DIR_MAP:
            raise KeyError(
                f"Unknown directory key: '{name}'. Valid keys: {list(cls.DIR_MAP.keys())}"
            )

        path = cls.DIR_MAP[name]
        if path.suffix == "" and not path.name.startswith("."):
            path.mkdir(parents=True, exist_ok=True)

        return path


class Finder:
    """Thin wrapper exposing resolved locations to services and the app."""

    def get_directory(self, name: str) -> Path:
        """Return a resolved path by logical name."""
        return PathResolver.get(name)
