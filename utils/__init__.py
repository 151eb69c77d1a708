"""
Utility modules.

This package contains shared utility functions and configurations:
- Stream opening for files and standard streams
- Logging configuration
- Shared constants and configurations
"""

from .file_operations import FileHandler
from .logging_config import setup_logging, get_logger
from .constants import (
    SubtitleFormat,
    UTF8_BOM,
    DEFAULT_ENCODING,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_DATE_FORMAT,
    APP_NAME,
    APP_VERSION,
    APP_DESCRIPTION,
)

__all__ = [
    'FileHandler',
    'setup_logging',
    'get_logger',
    'SubtitleFormat',
    'UTF8_BOM',
    'DEFAULT_ENCODING',
    'DEFAULT_LOG_FORMAT',
    'DEFAULT_LOG_DATE_FORMAT',
    'APP_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
]
