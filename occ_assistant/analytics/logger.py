"""Application logging."""

import logging
import sys
from pathlib import Path
from typing import Optional
from occ_assistant.utils.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Client libraries that log every outbound request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")


def setup_logger(
    name: str = "occ_assistant", log_file: Optional[str] = None, log_level: str = "INFO"
) -> logging.Logger:
    """Configure the package logger with a console handler and an optional log file."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    app_logger = logging.getLogger(name)
    app_logger.setLevel(level)
    app_logger.propagate = False

    # Idempotent when the module is reloaded
    app_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        app_logger.addHandler(file_handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    return app_logger


def get_logger(component: str) -> logging.Logger:
    """Child logger such as ``occ_assistant.cart``; shares the package handlers."""
    return logger.getChild(component)


# Global logger instance
logger = setup_logger(log_file=settings.log_file, log_level=settings.log_level)
