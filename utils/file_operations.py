"""
File operations for subtitle conversion.

This module provides stream handling for the converter:
- Opening input and output files in binary mode
- Falling back to the standard streams when no path is given
"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional
from .logging_config import get_logger

logger = get_logger(__name__)

# Path placeholder meaning "standard stream"
STDIO_PATH = '-'


class FileHandler:
    """Handles file operations with proper error handling and logging."""

    @staticmethod
    def is_stdio(path: Optional[Path]) -> bool:
        """True if ``path`` designates a standard stream."""
        return path is None or str(path) == STDIO_PATH

    @staticmethod
    @contextmanager
    def open_input(path: Optional[Path]) -> Iterator[BinaryIO]:
        """
        Open a subtitle source for binary reading.

        Args:
            path: File to read, or None / '-' for standard input

        Yields:
            Binary stream; standard input is not closed on exit

        Raises:
            OSError: If the file cannot be opened
        """
        if FileHandler.is_stdio(path):
            logger.debug("Reading from standard input")
            yield sys.stdin.buffer
            return

        with open(path, 'rb') as f:
            logger.debug(f"Reading from {path}")
            yield f

    @staticmethod
    @contextmanager
    def open_output(path: Optional[Path]) -> Iterator[BinaryIO]:
        """
        Open a subtitle sink for binary writing.

        Parent directories are created as needed. Standard output is flushed
        but not closed on exit.

        Args:
            path: File to write, or None / '-' for standard output

        Raises:
            OSError: If the file cannot be created
        """
        if FileHandler.is_stdio(path):
            logger.debug("Writing to standard output")
            try:
                yield sys.stdout.buffer
            finally:
                sys.stdout.buffer.flush()
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'wb') as f:
            logger.debug(f"Writing to {path}")
            yield f
