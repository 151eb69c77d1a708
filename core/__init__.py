"""
Core subtitle processing modules.

This package contains the fundamental components for subtitle conversion:
- The cue data structure and its normalisation policy
- Streaming SRT and WebVTT parsers and writers
- The line-counted reader and encoding diagnostics
- Timestamp parsing and formatting
"""

from .errors import (
    ErrorKind,
    SubtitleError,
    SubtitleIOError,
    UnexpectedEofError,
    InvalidDataError,
    UnderflowError,
)
from .subtitle_formats import (
    Cue,
    CuePolicy,
    ReversedTiming,
    SubtitleParser,
    SRTParser,
    VTTParser,
    SubtitleFormatFactory,
)
from .line_reader import LineReader
from .encoding_detection import EncodingDetector
from .timing_utils import TimeConverter

__all__ = [
    'ErrorKind',
    'SubtitleError',
    'SubtitleIOError',
    'UnexpectedEofError',
    'InvalidDataError',
    'UnderflowError',
    'Cue',
    'CuePolicy',
    'ReversedTiming',
    'SubtitleParser',
    'SRTParser',
    'VTTParser',
    'SubtitleFormatFactory',
    'LineReader',
    'EncodingDetector',
    'TimeConverter',
]
