"""
Format conversion processor for subtitle streams.

This module wires a parser, the timing adjuster and a writer into a lazy
pipeline: one cue is read, shifted and written before the next is requested.
"""

from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union
from core.errors import SubtitleError
from core.subtitle_formats import Cue, CuePolicy, SubtitleFormatFactory
from processors.timing_adjuster import Delta, TimingAdjuster
from utils.constants import SubtitleFormat
from utils.logging_config import get_logger
from utils.file_operations import FileHandler

logger = get_logger(__name__)


class SubtitleConverter:
    """Converts subtitles between SRT and WebVTT, applying a time shift."""

    def __init__(self, policy: Optional[CuePolicy] = None):
        """
        Initialize the converter.

        Args:
            policy: Cue normalisation policy handed to the parsers
        """
        self.policy = policy
        self.cues_written = 0

    def convert(self, source: IO, input_format: SubtitleFormat, sink: IO,
                output_format: SubtitleFormat, delta: Delta = Delta.none()) -> int:
        """
        Convert a subtitle stream.

        Cues are written as soon as they are parsed, so when an error occurs
        everything before it is already in ``sink``. The error is re-raised
        with ``cues_written`` set to the number of cues fully written.

        Args:
            source: Input stream (bytes, optionally starting with a BOM)
            input_format: Format of ``source``
            sink: Output stream
            output_format: Format to write
            delta: Shift applied to every cue

        Returns:
            Number of cues written

        Raises:
            SubtitleError: Parse, underflow or write failure

        Example:
            >>> converter = SubtitleConverter()
            >>> with open("in.srt", "rb") as src, open("out.vtt", "wb") as dst:
            ...     converter.convert(src, SubtitleFormat.SRT, dst, SubtitleFormat.VTT)
        """
        self.cues_written = 0
        adjuster = TimingAdjuster(delta)
        try:
            parser = SubtitleFormatFactory.parse(source, input_format, self.policy)
            count = SubtitleFormatFactory.write(
                self._track_written(adjuster.adjust(parser)), sink, output_format)
        except SubtitleError as e:
            e.cues_written = self.cues_written
            raise

        logger.debug(f"Converted {count} cues from {input_format.name} to {output_format.name}"
                     f" (delta {delta})")
        return count

    def _track_written(self, cues: Iterable[Cue]) -> Iterator[Cue]:
        # The writer asks for the next cue only after the previous one is written
        for cue in cues:
            yield cue
            self.cues_written += 1

    def convert_file(self, input_path: Path, output_path: Path,
                     input_format: Optional[Union[SubtitleFormat, str]] = None,
                     output_format: Optional[Union[SubtitleFormat, str]] = None,
                     delta: Delta = Delta.none()) -> int:
        """
        Convert one subtitle file into another.

        Formats default to the ones implied by the file extensions.

        Returns:
            Number of cues written

        Raises:
            ValueError: If a format cannot be determined
            SubtitleError: Parse, underflow or write failure
        """
        input_format = self._resolve_format(input_format, input_path)
        output_format = self._resolve_format(output_format, output_path)

        try:
            with FileHandler.open_input(input_path) as source, \
                    FileHandler.open_output(output_path) as sink:
                count = self.convert(source, input_format, sink, output_format, delta)
        except SubtitleError as e:
            logger.error(f"Failed to convert {input_path.name}: {e} "
                         f"({e.cues_written} cues written to {output_path.name})")
            raise
        except OSError as e:
            logger.error(f"Failed to open files for conversion: {e}")
            raise

        logger.info(f"Converted {input_path.name} -> {output_path.name}: {count} cues")
        return count

    @staticmethod
    def _resolve_format(format_type: Optional[Union[SubtitleFormat, str]],
                        path: Optional[Path]) -> SubtitleFormat:
        if format_type is not None:
            return SubtitleFormatFactory.get_format_from_extension(format_type)
        if path is None:
            raise ValueError("A format is required when reading or writing a standard stream")
        return SubtitleFormat.from_path(path)
