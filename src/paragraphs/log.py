"""Process logging setup shared by the CLI and the HTTP app."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "src"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
