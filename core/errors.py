"""
Error types raised while reading, shifting and writing subtitles.

Every error is terminal for the component that raises it. Each class also
derives from the matching builtin (``OSError``, ``EOFError``, ``ValueError``,
``ArithmeticError``) so callers can catch either family.
"""

from enum import Enum
from typing import Optional, Union


class ErrorKind(Enum):
    """Closed set of failure categories."""
    IO = "io"
    UNEXPECTED_EOF = "unexpected_eof"
    INVALID_DATA = "invalid_data"
    UNDERFLOW = "underflow"


class SubtitleError(Exception):
    """Base class for all conversion failures."""

    kind: ErrorKind

    def __init__(self, reason: str, raw: Union[str, bytes, None] = None,
                 line_number: Optional[int] = None):
        self.reason = reason
        self.raw = raw
        self.line_number = line_number
        # Filled in by the conversion pipeline
        self.cues_written: Optional[int] = None
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        message = self.reason
        if self.raw is not None:
            message += f" in {self.raw!r}"
        if self.line_number is not None:
            message += f" (line {self.line_number})"
        return message

    def __str__(self) -> str:
        return self._format_message()


class SubtitleIOError(SubtitleError, OSError):
    """Underlying read or write failure; the original error is the __cause__."""
    kind = ErrorKind.IO


class UnexpectedEofError(SubtitleError, EOFError):
    """The input ended in the middle of a structure."""
    kind = ErrorKind.UNEXPECTED_EOF


class InvalidDataError(SubtitleError, ValueError):
    """Malformed header, timecode, sequence number or cue layout."""
    kind = ErrorKind.INVALID_DATA


class UnderflowError(SubtitleError, ArithmeticError):
    """A subtraction would move a timestamp before zero."""
    kind = ErrorKind.UNDERFLOW
