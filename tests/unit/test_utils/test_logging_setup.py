"""Tests for package logging setup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from x16remote.config.settings import LoggingConfig
from x16remote.utils.logging import setup_logging


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """The package logger, restored to its original state afterwards."""
    logger = logging.getLogger("x16remote")
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestSetupLogging:
    def test_defaults(self, package_logger: logging.Logger) -> None:
        setup_logging()
        assert package_logger.level == logging.INFO
        assert len(package_logger.handlers) == 1

    def test_level_from_config(self, package_logger: logging.Logger) -> None:
        setup_logging(LoggingConfig(level="debug"))
        assert package_logger.level == logging.DEBUG

    def test_repeat_calls_replace_handlers(self, package_logger: logging.Logger) -> None:
        setup_logging()
        setup_logging()
        assert len(package_logger.handlers) == 1

    def test_file_handler(self, package_logger: logging.Logger, tmp_path: Path) -> None:
        log_file = tmp_path / "x16remote.log"
        setup_logging(LoggingConfig(file=str(log_file)))
        assert len(package_logger.handlers) == 2
        for handler in package_logger.handlers:
            handler.flush()
        assert "Logging initialized" in log_file.read_text()
