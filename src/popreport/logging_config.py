"""
Centralized logging configuration for the population report pipeline.

This module provides a consistent, structured logging approach
across the entire project.
"""

import logging
import os
import sys
from typing import Optional, Union

import colorlog


def create_logger(
    name: Optional[str] = None,
    log_level: Union[int, str, None] = None,
    log_dir: Optional[str] = None,
    log_file: Optional[str] = None,
):
    """
    Create a structured, color-coded logger with optional file logging.

    When no level or log directory is given, the ``LOG_LEVEL`` and
    ``LOG_DIR`` environment variables are consulted.

    :param name: Name of the logger (typically __name__)
    :param log_level: Logging level (default: LOG_LEVEL or logging.INFO)
    :param log_dir: Directory to store log files (optional)
    :param log_file: Specific log file name (optional)
    :return: Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if isinstance(log_level, str) and not isinstance(logging.getLevelName(log_level), int):
        # unknown names are reported by config.validate_config
        log_level = logging.INFO
    if log_dir is None:
        log_dir = os.getenv("LOG_DIR") or None

    # Create logger
    logger = colorlog.getLogger(name or __name__)
    logger.setLevel(log_level)
    logger.propagate = False

    # Remove any existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # Create console handler with color
    console_handler = colorlog.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    # Custom log format with clear structure
    formatter = colorlog.ColoredFormatter(
        "%(log_color)s[%(levelname)s]%(reset)s "
        "%(blue)s[%(name)s]%(reset)s "
        "%(message)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={},
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Optional file logging
    if log_dir or log_file:
        # Ensure log directory exists
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # Determine log file path
        if not log_file:
            log_file = f"{name or 'popreport'}.log"

        if log_dir:
            log_file = os.path.join(log_dir, log_file)

        # Create file handler
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)

        # Plain text formatter for file logs
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def log_exception(logger, e, context=None):
    """
    Standardized exception logging with optional context.

    :param logger: Logger instance
    :param e: Exception object
    :param context: Optional additional context for the error
    """
    logger.critical("🚨 REPORT PIPELINE ERROR 🚨")
    logger.critical(f"Error Type: {type(e).__name__}")
    logger.critical(f"Error Details: {str(e)}")

    if context:
        logger.critical(f"Context: {context}")

    # Hints for the failures a report run usually hits
    logger.critical("Troubleshooting:")
    logger.critical("  1. Check the input CSV path and header row")
    logger.critical("  2. Look for duplicate (country, year) rows")
    logger.critical("  3. Review the environment configuration")
