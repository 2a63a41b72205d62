"""
Centralized logging configuration for soilviz.

Console output for interactive use, rotating file output for batch runs.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

DEFAULT_LOG_FILE = "soilviz.log"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Set up root logging with a console handler and an optional rotating file.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (defaults to soilviz.log)
        enable_file_logging: Whether to attach the file handler

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = Path(log_file or DEFAULT_LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 10MB per file, 5 backups; the file always receives DEBUG
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)


def configure_from_env() -> logging.Logger:
    """
    Configure logging from environment variables.

    Environment variables:
        LOG_LEVEL: Logging level (default: INFO)
        LOG_FILE: Log file path (default: soilviz.log)
        DISABLE_FILE_LOGGING: Any non-empty value disables the file handler
    """
    return setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", DEFAULT_LOG_FILE),
        enable_file_logging=not os.getenv("DISABLE_FILE_LOGGING"),
    )
