"""Tests for logging configuration."""

import logging

import pytest

from photo_gallery.app_logging import ACCESS_LOGGER_NAME, configure_logging, log_request


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("photo_gallery")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.DEBUG


def test_log_request_writes_access_line(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("photo_gallery")
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            log_request("GET", "/api/photos", 200, 1.234)
    finally:
        logger.propagate = False

    assert "GET /api/photos 200 1.2 ms" in caplog.messages
