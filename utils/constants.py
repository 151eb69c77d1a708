"""
Shared constants and configurations for the subtitle conversion tool.

This module contains the constants used across the different modules:
- Supported subtitle formats and extensions
- Wire tokens of the SRT and WebVTT grammars
- Logging formats and application metadata
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Tuple, Union

# ============================================================================
# FILE FORMAT CONSTANTS
# ============================================================================

class SubtitleFormat(Enum):
    """Supported subtitle formats."""
    SRT = "srt"
    VTT = "vtt"

    @classmethod
    def from_extension(cls, ext: str) -> 'SubtitleFormat':
        """
        Get format from file extension.

        Args:
            ext: File extension (with or without dot)

        Returns:
            SubtitleFormat enum value

        Raises:
            ValueError: If extension is not supported
        """
        ext = ext.lower().lstrip('.')
        if ext in FORMAT_ALIASES:
            return cls(FORMAT_ALIASES[ext])
        raise ValueError(f"Unsupported subtitle format: {ext}")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'SubtitleFormat':
        """Get format from the extension of a file path."""
        return cls.from_extension(Path(path).suffix)


# Extension (without dot) to format value
FORMAT_ALIASES: Dict[str, str] = {
    'srt': 'srt',
    'vtt': 'vtt',
    'webvtt': 'vtt',
}

# ============================================================================
# ENCODING CONSTANTS
# ============================================================================

# UTF-8 BOM marker
UTF8_BOM: bytes = b"\xef\xbb\xbf"

# Encoding used for every read and write
DEFAULT_ENCODING: str = 'utf-8'

# Number of bytes handed to charset-normalizer when a line fails to decode
ENCODING_SAMPLE_SIZE: int = 4096

# ============================================================================
# WIRE FORMAT CONSTANTS
# ============================================================================

# SRT separates begin and end with exactly this token
SRT_TIMECODE_SEPARATOR: str = " --> "

# WebVTT only requires the arrow; surrounding whitespace is free
VTT_TIMECODE_SEPARATOR: str = "-->"

# First line of every WebVTT document
VTT_HEADER: str = "WEBVTT"

# Blocks opened by these keywords are skipped up to the next blank line
VTT_METADATA_KEYWORDS: Tuple[str, ...] = ("REGION", "NOTE", "STYLE")

# ============================================================================
# DEFAULT CONFIGURATION VALUES
# ============================================================================

# Default log format
DEFAULT_LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

# Application metadata
APP_NAME: str = "subshift"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = """
Convert subtitles between SRT and WebVTT with:
- Strict, line-numbered parsing of both formats
- Byte-exact output in either format
- Optional time shift applied to every cue
"""
