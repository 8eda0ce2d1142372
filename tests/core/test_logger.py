"""Tests for the logger module."""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from rich.logging import RichHandler

from multisearch.core import logger as logger_module
from multisearch.core.config import LoggingConfig
from multisearch.core.logger import get_logger, log_exception, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the package logger after each test."""
    package_logger = logging.getLogger("multisearch")
    original_handlers = package_logger.handlers[:]
    original_level = package_logger.level
    original_propagate = package_logger.propagate

    yield

    for handler in logger_module._installed:
        handler.close()
    logger_module._installed.clear()
    logger_module._loggers.clear()
    package_logger.handlers = original_handlers
    package_logger.setLevel(original_level)
    package_logger.propagate = original_propagate


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_get_logger_returns_correct_instance(self):
        """Loggers live under the package namespace."""
        logger = get_logger("test_name")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "multisearch.test_name"

    def test_get_logger_is_cached(self):
        """Test that multiple calls with the same name return the same logger instance."""
        assert get_logger("cached_name") is get_logger("cached_name")

    def test_child_follows_package_level(self):
        """Child loggers inherit the package logger level."""
        child = get_logger("inherit")
        setup_logging(LoggingConfig(level="DEBUG"))
        assert child.level == logging.NOTSET
        assert child.getEffectiveLevel() == logging.DEBUG


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_setup_logging_levels(self):
        """setup_logging sets the package logger level."""
        setup_logging(LoggingConfig(level="DEBUG"))
        assert logging.getLogger("multisearch").level == logging.DEBUG

        setup_logging(LoggingConfig(level="warning"))
        assert logging.getLogger("multisearch").level == logging.WARNING

    def test_invalid_level_rejected(self):
        """Unknown level names fail validation."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(level="LOUD")

    def test_handlers_installed_on_package_logger(self, tmp_path):
        """Console only by default, plus a rotating file handler when asked."""
        package_logger = logging.getLogger("multisearch")
        foreign = logging.NullHandler()
        package_logger.addHandler(foreign)

        setup_logging(LoggingConfig(log_file=None))
        ours = [h for h in package_logger.handlers if h is not foreign]
        assert len(ours) == 1
        assert isinstance(ours[0], RichHandler)
        assert package_logger.propagate is False

        setup_logging(LoggingConfig(log_file=str(tmp_path / "logs" / "search.log")))
        ours = [h for h in package_logger.handlers if h is not foreign]
        assert len(ours) == 2
        assert any(isinstance(h, RotatingFileHandler) for h in ours)
        assert foreign in package_logger.handlers
        assert (tmp_path / "logs").is_dir()

    def test_propagate_option(self):
        """propagate=True keeps records flowing to the root logger."""
        setup_logging(LoggingConfig(propagate=True))
        assert logging.getLogger("multisearch").propagate is True

    def test_file_logging_writes_to_file(self, tmp_path):
        """File logging writes formatted messages."""
        log_file = tmp_path / "search.log"
        setup_logging(LoggingConfig(level="INFO", log_file=str(log_file)))

        get_logger("file_test").info("Using search provider: Serper")
        for handler in logging.getLogger("multisearch").handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "multisearch.file_test" in content
        assert "Using search provider: Serper" in content

    def test_log_exception_helper(self, caplog):
        """Test the log_exception helper function."""
        logger = get_logger("exception_test")

        try:
            raise ValueError("A test exception")
        except ValueError as e:
            log_exception(logger, e, context="During testing")

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelname == "ERROR"
        assert "During testing: A test exception" in record.message
        assert record.exc_info is not None
