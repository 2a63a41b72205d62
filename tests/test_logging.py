"""
Tests for the centralized logging setup and its use across modules.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

from soilviz.logging_config import configure_from_env, get_logger, setup_logging


class TestLoggingConfiguration:
    """Test the logging configuration functionality."""

    def test_setup_logging_basic(self, tmp_path):
        """Test basic logging setup with defaults."""
        log_file = tmp_path / "test.log"

        logger = setup_logging(log_file=str(log_file))

        assert isinstance(logger, logging.Logger)
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 2  # Console + file

        logger.info("Test message")

        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_setup_logging_levels(self):
        """Test different logging levels."""
        test_cases = [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ]

        for level_str, expected_level in test_cases:
            logger = setup_logging(level=level_str, enable_file_logging=False)
            assert logger.level == expected_level

    def test_unknown_level_falls_back_to_info(self):
        """Test that an unrecognized level name configures INFO."""
        logger = setup_logging(level="chatty", enable_file_logging=False)
        assert logger.level == logging.INFO

    def test_setup_logging_no_file(self):
        """Test logging setup without file logging."""
        logger = setup_logging(enable_file_logging=False)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_setup_logging_file_directory_creation(self, tmp_path):
        """Test that log file directories are created automatically."""
        log_file = tmp_path / "subdir" / "nested" / "test.log"

        logger = setup_logging(log_file=str(log_file))
        logger.info("Test message")

        assert log_file.exists()

    def test_repeated_setup_does_not_duplicate_handlers(self):
        """Test that calling setup twice replaces the handlers."""
        setup_logging(enable_file_logging=False)
        logger = setup_logging(enable_file_logging=False)
        assert len(logger.handlers) == 1

    def test_get_logger(self):
        """Test logger retrieval with names."""
        logger1 = get_logger("test.module1")
        logger2 = get_logger("test.module2")
        logger3 = get_logger("test.module1")

        assert logger1.name == "test.module1"
        assert logger2.name == "test.module2"
        assert logger1 is logger3

    @patch.dict(os.environ, {}, clear=True)
    def test_configure_from_env_defaults(self):
        """Test environment configuration with defaults."""
        logger = configure_from_env()

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 2
        assert Path("soilviz.log").exists()

    @patch.dict(
        os.environ,
        {"LOG_LEVEL": "DEBUG", "LOG_FILE": "custom.log", "DISABLE_FILE_LOGGING": "1"},
    )
    def test_configure_from_env_custom(self):
        """Test environment configuration with custom values."""
        logger = configure_from_env()

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1


class TestLoggingIntegration:
    """Test logging integration with actual modules."""

    def test_modules_use_named_loggers(self):
        """Test that client modules log under their own module names."""
        from soilviz.cdl import query
        from soilviz.esd import client
        from soilviz.ssurgo import sda

        assert sda.logger.name == "soilviz.ssurgo.sda"
        assert client.logger.name == "soilviz.esd.client"
        assert query.logger.name == "soilviz.cdl.query"

    def test_module_messages_reach_log_file(self, tmp_path):
        """Test that module logging lands in the configured file."""
        from soilviz.esd.client import parse_ecoclass_id

        log_file = tmp_path / "integration.log"
        setup_logging(level="DEBUG", log_file=str(log_file))

        parse_ecoclass_id("not-an-id")

        content = log_file.read_text()
        assert "Failed to parse ecoclassid: not-an-id" in content
        assert "soilviz.esd.client" in content

    def test_http_cache_logging(self, tmp_path, monkeypatch):
        """Test that creating the cached session logs the backend."""
        import soilviz.http_cache as hc

        monkeypatch.setenv("CACHE_NAME", str(tmp_path / "cache"))
        monkeypatch.setattr(hc, "_SESSION", None)

        log_file = tmp_path / "cache.log"
        setup_logging(level="DEBUG", log_file=str(log_file))

        hc.get_session()

        assert "Using SQLite cache backend" in log_file.read_text()
        hc.reset_session()
