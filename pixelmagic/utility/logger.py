"""Process-wide logging setup: coloured console output plus an optional warning log file."""

import logging
from logging import Logger
from typing import Optional

from pixelmagic.utility.path_finder import Finder


LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET_COLOR = "\033[0m"

# the Gemini SDK logs every HTTP round trip at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "google_genai")


class ColorFormatter(logging.Formatter):
    """Formatter exposing a padded, colourised `colored_levelname` field."""

    def format(self, record: logging.LogRecord) -> str:
        """Attach the coloured level name before delegating to the base formatter."""
        padded_level = f"{record.levelname + ':':<9}"
        color = LEVEL_COLORS.get(record.levelname, "")
        record.colored_levelname = (
            f"{color}{padded_level}{RESET_COLOR}" if color else padded_level
        )
        return super().format(record)


class AppLogger:
    """
    Central logging helper shared by the API server and the Streamlit app.

    Usage:
        # once, in the entry point
        AppLogger.init(level=logging.INFO, log_to_file=True)

        # in any module
        logger = AppLogger.get_logger(__name__)
    """

    _configured: bool = False

    @classmethod
    def init(
        cls,
        level: int = logging.INFO,
        log_to_file: bool = False,
        filename: str = "pixelmagic_server.log",
    ) -> None:
        """
        Replace the root logger's handlers with a coloured console handler and,
        when requested, a plain-text file handler for warnings and above.
        Each entry point passes its own `filename`. Transport loggers in
        QUIET_LOGGERS are held at WARNING or above.
        Only the first call has any effect.
        """
        if cls._configured:
            return
        cls._configured = True

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(
            ColorFormatter("%(colored_levelname)s %(name)s | %(message)s")
        )
        root_logger.addHandler(console_handler)

        if log_to_file:
            logs_dir = Finder().get_directory("logs")
            file_handler = logging.FileHandler(logs_dir / filename, encoding="utf-8")
            file_handler.setLevel(logging.WARNING)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)-8s | %(name)s | "
                    "%(filename)s:%(lineno)d | %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(file_handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    @staticmethod
    def get_logger(name: Optional[str] = None) -> Logger:
        """Named logger accessor; use instead of logging.getLogger()."""
        return logging.getLogger(name if name is not None else __name__)
