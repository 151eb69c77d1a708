"""
Time conversion utilities for subtitle processing.

This module provides functions for:
- Parsing SRT (``H:MM:SS,mmm``) and WebVTT (``[H:]MM:SS.mmm``) timestamps
- Rendering durations back into either syntax
- Millisecond arithmetic on ``timedelta`` values
"""

import re
from datetime import timedelta
from typing import Optional, Tuple
from core.errors import InvalidDataError

ONE_MILLISECOND = timedelta(milliseconds=1)

# Hour, minute and second are unbounded; milliseconds are exactly three digits
_SRT_TIME_PATTERN = re.compile(r'([0-9]+):([0-9]+):([0-9]+),([0-9]{3})')
_VTT_TIME_PATTERN = re.compile(r'(?:([0-9]+):)?([0-9]+):([0-9]+)\.([0-9]{3})')


class TimeConverter:
    """Handles time format conversions for subtitles."""

    @staticmethod
    def parse_srt_time(time_str: str, line_number: Optional[int] = None) -> timedelta:
        """
        Parse an SRT timestamp.

        Args:
            time_str: Timestamp such as ``01:23:17,486``
            line_number: Line the timestamp came from, for diagnostics

        Returns:
            The timestamp as a duration from the start of the media

        Raises:
            InvalidDataError: If the timestamp is malformed

        Example:
            >>> TimeConverter.parse_srt_time("00:00:05,542")
            datetime.timedelta(seconds=5, microseconds=542000)
        """
        match = _SRT_TIME_PATTERN.fullmatch(time_str)
        if not match:
            raise InvalidDataError("Invalid SRT timestamp", time_str, line_number)
        return TimeConverter._checked_parts(match.groups(), time_str, line_number)

    @staticmethod
    def parse_vtt_time(time_str: str, line_number: Optional[int] = None) -> timedelta:
        """
        Parse a WebVTT timestamp, with or without its hour segment.

        Example:
            >>> TimeConverter.parse_vtt_time("13:16.500").total_seconds()
            796.5
        """
        match = _VTT_TIME_PATTERN.fullmatch(time_str)
        if not match:
            raise InvalidDataError("Invalid WebVTT timestamp", time_str, line_number)
        return TimeConverter._checked_parts(match.groups(), time_str, line_number)

    @staticmethod
    def from_parts(hours: int, minutes: int, seconds: int, millis: int) -> timedelta:
        """Build a duration from clock fields."""
        return timedelta(hours=hours, minutes=minutes, seconds=seconds, milliseconds=millis)

    @staticmethod
    def _checked_parts(fields: Tuple[Optional[str], ...], time_str: str,
                       line_number: Optional[int]) -> timedelta:
        # A missing WebVTT hour field is None
        try:
            hours, minutes, seconds, millis = (int(f or 0) for f in fields)
            return TimeConverter.from_parts(hours, minutes, seconds, millis)
        except (OverflowError, ValueError) as e:
            raise InvalidDataError("Timestamp out of range", time_str, line_number) from e

    @staticmethod
    def to_milliseconds(duration: timedelta) -> int:
        """Whole milliseconds in a duration (sub-millisecond remainder dropped)."""
        return duration // ONE_MILLISECOND

    @staticmethod
    def split_clock(duration: timedelta):
        """
        Split a duration into (hours, minutes, seconds, milliseconds).

        Hours are not wrapped at 24.
        """
        total_ms = TimeConverter.to_milliseconds(duration)
        total_s, ms = divmod(total_ms, 1000)
        total_m, s = divmod(total_s, 60)
        h, m = divmod(total_m, 60)
        return h, m, s, ms

    @staticmethod
    def format_srt_time(duration: timedelta) -> str:
        """
        Render a duration as an SRT timestamp.

        Example:
            >>> TimeConverter.format_srt_time(timedelta(seconds=3825.678))
            '01:03:45,678'
        """
        h, m, s, ms = TimeConverter.split_clock(duration)
        return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"

    @staticmethod
    def format_vtt_time(duration: timedelta) -> str:
        """
        Render a duration as a WebVTT timestamp.

        The hour segment is omitted when it is zero.

        Example:
            >>> TimeConverter.format_vtt_time(timedelta(minutes=3, seconds=5.084))
            '03:05.084'
        """
        h, m, s, ms = TimeConverter.split_clock(duration)
        if h == 0:
            return f"{m:02d}:{s:02d}.{ms:03d}"
        return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"

    @staticmethod
    def format_duration(duration: timedelta) -> str:
        """
        Format a duration as a human-readable string.

        Example:
            >>> TimeConverter.format_duration(timedelta(seconds=3825.5))
            '1h 3m 45.5s'
        """
        seconds = duration.total_seconds()
        sign = "-" if seconds < 0 else ""
        seconds = abs(seconds)
        if seconds < 60:
            return f"{sign}{seconds:.3f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            return f"{sign}{minutes}m {seconds % 60:.1f}s"
        else:
            hours = int(seconds // 3600)
            remaining_seconds = seconds % 3600
            minutes = int(remaining_seconds // 60)
            return f"{sign}{hours}h {minutes}m {remaining_seconds % 60:.1f}s"
