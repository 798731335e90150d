"""Process-wide logging setup for the CLI and HTTP entrypoints."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from .config_loader import get_logging_config

_LOGGING_INITIALIZED = False
_CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(config: dict[str, Any] | None = None, *, force: bool = False) -> None:
    """Attach console (and optional rotating file) handlers to the root logger once."""
    global _LOGGING_INITIALIZED
    if _LOGGING_INITIALIZED and not force:
        return

    settings = get_logging_config(config)
    level = logging.getLevelName(settings["level"])
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    log_file = settings["file"]
    if log_file and not any(isinstance(h, TimedRotatingFileHandler) for h in root_logger.handlers):
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(log_path, when="midnight", backupCount=7, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(fmt=_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

    _LOGGING_INITIALIZED = True


def get_logger(name: str = "jsonsplice") -> logging.Logger:
    """Return a logger, initializing root handlers on first call."""
    setup_logging()
    return logging.getLogger(name)
