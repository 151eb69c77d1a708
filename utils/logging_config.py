"""
Logging configuration for the subtitle conversion tool.

This module provides centralized logging setup with colored output,
different log levels, and proper formatting for both console and file output.
Console output goes to stderr: stdout may carry converted subtitles.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from .constants import APP_NAME, DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATE_FORMAT


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with colors.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with colors
        """
        # Copy so other handlers of the same record stay uncolored
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    use_colors: bool = True,
    logger_name: str = APP_NAME
) -> logging.Logger:
    """
    Set up logging with appropriate level and formatting.

    Module loggers are named after their module (``core.subtitle_formats``,
    ``processors.converter``...), so handlers are attached to the root logger
    as well as to the application logger returned here.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO)
        log_file: Optional path to log file for file output
        use_colors: Whether to use colored output for console
        logger_name: Name for the logger instance

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging(logging.DEBUG, Path("subshift.log"))
        >>> logger.info("Conversion started")
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    # Choose formatter based on terminal capability and user preference
    if use_colors and sys.stderr.isatty():
        console_formatter = ColoredFormatter(
            DEFAULT_LOG_FORMAT,
            datefmt=DEFAULT_LOG_DATE_FORMAT
        )
    else:
        console_formatter = logging.Formatter(
            DEFAULT_LOG_FORMAT,
            datefmt=DEFAULT_LOG_DATE_FORMAT
        )

    console_handler.setFormatter(console_formatter)
    root.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            DEFAULT_LOG_FORMAT,
            datefmt=DEFAULT_LOG_DATE_FORMAT
        ))
        root.addHandler(file_handler)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger


def get_logger(name: str = APP_NAME) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name

    Returns:
        Logger instance

    Note:
        This assumes setup_logging() has already been called.
    """
    return logging.getLogger(name)
