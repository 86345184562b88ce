"""Logging configuration helpers."""

import logging

ACCESS_LOGGER_NAME = "photo_gallery.access"


def configure_logging(level: str = "INFO") -> None:
    """Configure the package logger with a single stream handler."""
    logger = logging.getLogger("photo_gallery")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def log_request(method: str, path: str, status_code: int, elapsed_ms: float) -> None:
    """Write one access line in the compact ``METHOD path status time`` form."""
    logging.getLogger(ACCESS_LOGGER_NAME).info(
        "%s %s %d %.1f ms", method, path, status_code, elapsed_ms
    )
