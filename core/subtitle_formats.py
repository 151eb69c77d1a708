"""
Subtitle format handlers and data structures.

This module provides:
- The cue data structure and its normalisation policy
- Streaming parsers for SRT and WebVTT
- Writers producing byte-exact SRT and WebVTT
- A factory selecting the parser/writer pair for a format

Parsers are lazy iterators: lines are pulled from the input only as cues are
requested, so at most one cue is held in memory. The first error ends a
parser for good.
"""

import io
import re
from dataclasses import InitVar, dataclass, field, replace
from datetime import timedelta
from enum import Enum
from typing import IO, Callable, Iterable, Iterator, List, Optional, Tuple, Type, Union
from core.errors import InvalidDataError, SubtitleError, SubtitleIOError, UnexpectedEofError
from core.line_reader import LineReader
from core.timing_utils import TimeConverter
from utils.constants import (
    DEFAULT_ENCODING,
    SRT_TIMECODE_SEPARATOR,
    SubtitleFormat,
    VTT_HEADER,
    VTT_METADATA_KEYWORDS,
    VTT_TIMECODE_SEPARATOR,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)

_NUMERIC_ID = re.compile(r'[0-9]+')


class ReversedTiming(Enum):
    """What the cue constructor does when begin comes after end."""
    SWAP = "swap"
    REJECT = "reject"


@dataclass(frozen=True)
class CuePolicy:
    """
    Normalisation applied when a cue is built.

    The defaults swap a reversed begin/end pair and drop identifiers made only
    of digits, which both formats use as plain sequence numbers.
    """
    reversed_timing: ReversedTiming = ReversedTiming.SWAP
    keep_numeric_ids: bool = False


DEFAULT_CUE_POLICY = CuePolicy()

# Used when copying an already normalised cue
_PRESERVE_POLICY = CuePolicy(keep_numeric_ids=True)


def is_numeric_id(identifier: str) -> bool:
    """True if the identifier is only a sequence number."""
    return _NUMERIC_ID.fullmatch(identifier.strip()) is not None


@dataclass(frozen=True)
class Cue:
    """One timed subtitle entry."""
    begin: timedelta
    end: timedelta
    text: Tuple[str, ...] = ()
    identifier: Optional[str] = None
    policy: InitVar[Optional[CuePolicy]] = None

    def __post_init__(self, policy: Optional[CuePolicy]):
        policy = policy or DEFAULT_CUE_POLICY
        object.__setattr__(self, 'text', tuple(self.text))

        if (self.identifier is not None and not policy.keep_numeric_ids
                and is_numeric_id(self.identifier)):
            object.__setattr__(self, 'identifier', None)

        if self.begin > self.end:
            if policy.reversed_timing is ReversedTiming.REJECT:
                raise ValueError(
                    f"Cue ends before it begins ({TimeConverter.format_srt_time(self.begin)} > "
                    f"{TimeConverter.format_srt_time(self.end)})"
                )
            begin, end = self.end, self.begin
            object.__setattr__(self, 'begin', begin)
            object.__setattr__(self, 'end', end)

    def shifted(self, offset: timedelta) -> 'Cue':
        """Copy of this cue moved by ``offset``, which may be negative."""
        return replace(self, begin=self.begin + offset, end=self.end + offset,
                       policy=_PRESERVE_POLICY)


# ============================================================================
# PARSERS
# ============================================================================

def _is_blank(line: str) -> bool:
    return not line.strip()


def _text_writer(sink: IO) -> Callable[[str], object]:
    """Return a callable writing ``str`` to a text or binary sink."""
    if isinstance(sink, io.TextIOBase):
        return sink.write
    return lambda text: sink.write(text.encode(DEFAULT_ENCODING))


def _write_block(write: Callable[[str], object], block: str) -> None:
    try:
        write(block)
    except OSError as e:
        raise SubtitleIOError(f"Write failed: {e}") from e


class SubtitleParser:
    """
    Base class for subtitle format parsers.

    Subclasses implement ``_step`` (one input line, one state transition) and
    ``_finish`` (end of input). A parser is an iterator over ``Cue`` objects;
    iterate a new instance to start over.
    """

    format: SubtitleFormat

    def __init__(self, source: IO, policy: Optional[CuePolicy] = None):
        """
        Args:
            source: Binary (or text) stream holding the document
            policy: Cue normalisation policy, DEFAULT_CUE_POLICY if omitted
        """
        self.policy = policy or DEFAULT_CUE_POLICY
        self.reader = LineReader(source)
        self.error: Optional[SubtitleError] = None
        self.cue_count = 0
        self._cues = self._run()

    @property
    def line_number(self) -> int:
        """Number of the last line read."""
        return self.reader.line_number

    def __iter__(self) -> Iterator[Cue]:
        return self

    def __next__(self) -> Cue:
        return next(self._cues)

    def _run(self) -> Iterator[Cue]:
        try:
            state = self._initial_state()
            for line in self.reader:
                state, cue = self._step(state, line)
                if cue is not None:
                    self.cue_count += 1
                    yield cue
            cue = self._finish(state)
            if cue is not None:
                self.cue_count += 1
                yield cue
        except SubtitleError as e:
            self.error = e
            logger.debug(f"{self.format.name} parsing stopped after {self.cue_count} cues: {e}")
            raise
        logger.info(f"Parsed {self.cue_count} cues from {self.format.name} input")

    def _initial_state(self):
        raise NotImplementedError

    def _step(self, state, line: str):
        raise NotImplementedError

    def _finish(self, state) -> Optional[Cue]:
        raise NotImplementedError

    def _build_cue(self, begin: timedelta, end: timedelta, text: List[str],
                   identifier: Optional[str], timecode: str, line_number: int) -> Cue:
        try:
            return Cue(begin, end, text, identifier, policy=self.policy)
        except ValueError as e:
            raise InvalidDataError(str(e), timecode, line_number) from e


# SRT parser states

@dataclass
class _AwaitId:
    pass


@dataclass
class _AwaitTimecode:
    pass


@dataclass
class _AwaitText:
    begin: timedelta
    end: timedelta
    timecode: str
    line_number: int
    text: List[str] = field(default_factory=list)


class SRTParser(SubtitleParser):
    """
    Parser for SRT subtitle format.

    A document is a list of blocks: a sequence number, a timecode line
    ``H:MM:SS,mmm --> H:MM:SS,mmm`` and text lines ending at a blank line.
    Sequence numbers are checked and discarded; parsed cues carry no id.

    Example:
        >>> data = b"1\\n00:00:05,542 --> 00:00:07,792\\nHello\\nWorld\\n\\n"
        >>> cue, = SRTParser(io.BytesIO(data))
        >>> cue.text
        ('Hello', 'World')
    """

    format = SubtitleFormat.SRT

    def _initial_state(self):
        return _AwaitId()

    def _step(self, state, line: str):
        line_number = self.line_number

        if isinstance(state, _AwaitId):
            if _is_blank(line):
                return state, None
            if not _NUMERIC_ID.fullmatch(line.strip()):
                raise InvalidDataError("Unexpected line", line, line_number)
            return _AwaitTimecode(), None

        if isinstance(state, _AwaitTimecode):
            begin, end = self.parse_timecode(line, line_number)
            return _AwaitText(begin, end, line, line_number), None

        if _is_blank(line):
            return _AwaitId(), self._close(state)
        state.text.append(line)
        return state, None

    def _finish(self, state) -> Optional[Cue]:
        if isinstance(state, _AwaitTimecode):
            raise UnexpectedEofError("Input ended before the timecode line",
                                     line_number=self.line_number)
        if isinstance(state, _AwaitText):
            if not state.text:
                raise UnexpectedEofError("Input ended before the cue text",
                                         state.timecode, state.line_number)
            return self._close(state)
        return None

    def _close(self, state: _AwaitText) -> Cue:
        return self._build_cue(state.begin, state.end, state.text, None,
                               state.timecode, state.line_number)

    @staticmethod
    def parse_timecode(line: str, line_number: Optional[int] = None) -> Tuple[timedelta, timedelta]:
        """
        Parse an SRT timecode line into (begin, end).

        Raises:
            InvalidDataError: If the separator or either timestamp is malformed
        """
        parts = line.split(SRT_TIMECODE_SEPARATOR)
        if len(parts) != 2:
            raise InvalidDataError("Invalid timecode line", line, line_number)
        begin = TimeConverter.parse_srt_time(parts[0].strip(), line_number)
        end = TimeConverter.parse_srt_time(parts[1].strip(), line_number)
        return begin, end

    @staticmethod
    def write(cues: Iterable[Cue], sink: IO) -> int:
        """
        Write cues as SRT.

        Cues are numbered from 1 in output order; cue identifiers are not used.

        Args:
            cues: Cues to write, consumed lazily
            sink: Binary or text output stream

        Returns:
            Number of cues written

        Raises:
            SubtitleIOError: On the first failed write
        """
        write = _text_writer(sink)
        count = 0
        for cue in cues:
            lines = [
                str(count + 1),
                f"{TimeConverter.format_srt_time(cue.begin)}{SRT_TIMECODE_SEPARATOR}"
                f"{TimeConverter.format_srt_time(cue.end)}",
            ]
            lines.extend(cue.text)
            _write_block(write, '\n'.join(lines) + '\n\n')
            count += 1
        logger.debug(f"Wrote {count} SRT cues")
        return count


# WebVTT parser states

@dataclass
class _InHeader:
    pass


@dataclass
class _AwaitCue:
    pass


@dataclass
class _InMetadata:
    keyword: str


@dataclass
class _AwaitTimecodeAfter:
    identifier: str
    line_number: int


@dataclass
class _InCue:
    identifier: Optional[str]
    begin: timedelta
    end: timedelta
    timecode: str
    line_number: int
    text: List[str] = field(default_factory=list)


class VTTParser(SubtitleParser):
    """
    Parser for WebVTT subtitle format.

    The ``WEBVTT`` header is checked when the parser is created. REGION, NOTE
    and STYLE blocks are skipped without being interpreted, cue settings after
    the end timestamp are ignored, and a cue identifier is kept unless it is
    purely numeric.

    Raises:
        UnexpectedEofError: If the input is empty
        InvalidDataError: If the first line is not a WebVTT header
    """

    format = SubtitleFormat.VTT

    def __init__(self, source: IO, policy: Optional[CuePolicy] = None):
        super().__init__(source, policy)
        header = next(self.reader, None)
        if header is None:
            self.error = UnexpectedEofError("Missing WEBVTT header", line_number=1)
            raise self.error
        if not header.startswith(VTT_HEADER):
            self.error = InvalidDataError("Invalid WebVTT header", header, self.line_number)
            raise self.error

    def _initial_state(self):
        return _InHeader()

    def _step(self, state, line: str):
        line_number = self.line_number

        if isinstance(state, _InHeader):
            if _is_blank(line):
                return _AwaitCue(), None
            if VTT_TIMECODE_SEPARATOR in line:
                return self._open_cue(None, line, line_number), None
            logger.debug(f"Skipped header line {line_number}: {line!r}")
            return state, None

        if isinstance(state, _AwaitCue):
            if _is_blank(line):
                return state, None
            keyword = self._metadata_keyword(line)
            if keyword:
                logger.debug(f"Skipping {keyword} block at line {line_number}")
                return _InMetadata(keyword), None
            if VTT_TIMECODE_SEPARATOR in line:
                return self._open_cue(None, line, line_number), None
            return _AwaitTimecodeAfter(line, line_number), None

        if isinstance(state, _InMetadata):
            if _is_blank(line):
                return _AwaitCue(), None
            return state, None

        if isinstance(state, _AwaitTimecodeAfter):
            if VTT_TIMECODE_SEPARATOR not in line:
                raise InvalidDataError(
                    f"Expected a timecode on line {line_number} after a lone text line",
                    state.identifier, state.line_number)
            return self._open_cue(state.identifier, line, line_number), None

        if _is_blank(line):
            return _AwaitCue(), self._close(state)
        state.text.append(line)
        return state, None

    def _finish(self, state) -> Optional[Cue]:
        if isinstance(state, _AwaitTimecodeAfter):
            raise UnexpectedEofError("Input ended after a lone text line",
                                     state.identifier, state.line_number)
        if isinstance(state, _InCue):
            return self._close(state)
        return None

    def _open_cue(self, identifier: Optional[str], line: str, line_number: int) -> _InCue:
        begin, end = self.parse_timecode(line, line_number)
        return _InCue(identifier, begin, end, line, line_number)

    def _close(self, state: _InCue) -> Cue:
        cue = self._build_cue(state.begin, state.end, state.text, state.identifier,
                              state.timecode, state.line_number)
        if state.identifier is not None and cue.identifier is None:
            logger.debug(f"Dropped numeric cue id {state.identifier!r} (line {state.line_number - 1})")
        return cue

    @staticmethod
    def _metadata_keyword(line: str) -> Optional[str]:
        for keyword in VTT_METADATA_KEYWORDS:
            if line.startswith(keyword):
                return keyword
        return None

    @staticmethod
    def parse_timecode(line: str, line_number: Optional[int] = None) -> Tuple[timedelta, timedelta]:
        """
        Parse a WebVTT timing line into (begin, end).

        Anything after the end timestamp (cue settings such as
        ``line:63% position:72%``) is ignored.

        Raises:
            InvalidDataError: If either timestamp is missing or malformed
        """
        left, _, right = line.partition(VTT_TIMECODE_SEPARATOR)
        begin_text = left.strip()
        end_fields = right.split(None, 1)
        if not begin_text or not end_fields:
            raise InvalidDataError("Invalid timecode line", line, line_number)
        begin = TimeConverter.parse_vtt_time(begin_text, line_number)
        end = TimeConverter.parse_vtt_time(end_fields[0], line_number)
        return begin, end

    @staticmethod
    def write(cues: Iterable[Cue], sink: IO) -> int:
        """
        Write cues as WebVTT.

        The header is written even when there are no cues. Identifiers are
        written when present; timestamps drop their hour field when it is zero.

        Args:
            cues: Cues to write, consumed lazily
            sink: Binary or text output stream

        Returns:
            Number of cues written

        Raises:
            SubtitleIOError: On the first failed write
        """
        write = _text_writer(sink)
        _write_block(write, f"{VTT_HEADER}\n\n")
        count = 0
        for cue in cues:
            lines = [] if cue.identifier is None else [cue.identifier]
            lines.append(f"{TimeConverter.format_vtt_time(cue.begin)} {VTT_TIMECODE_SEPARATOR} "
                         f"{TimeConverter.format_vtt_time(cue.end)}")
            lines.extend(cue.text)
            _write_block(write, '\n'.join(lines) + '\n\n')
            count += 1
        logger.debug(f"Wrote {count} WebVTT cues")
        return count


class SubtitleFormatFactory:
    """Factory class for creating subtitle parsers and writers."""

    _parsers = {
        SubtitleFormat.SRT: SRTParser,
        SubtitleFormat.VTT: VTTParser,
    }

    @classmethod
    def get_parser(cls, format_type: SubtitleFormat) -> Type[SubtitleParser]:
        """
        Get the parser class for the specified format.

        Raises:
            ValueError: If format is not supported
        """
        if format_type not in cls._parsers:
            raise ValueError(f"Unsupported subtitle format: {format_type}")
        return cls._parsers[format_type]

    @classmethod
    def parse(cls, source: IO, format_type: SubtitleFormat,
              policy: Optional[CuePolicy] = None) -> SubtitleParser:
        """Create a lazy parser over ``source``."""
        return cls.get_parser(format_type)(source, policy)

    @classmethod
    def write(cls, cues: Iterable[Cue], sink: IO, format_type: SubtitleFormat) -> int:
        """Write ``cues`` to ``sink`` in the given format and return the count."""
        return cls.get_parser(format_type).write(cues, sink)

    @classmethod
    def get_format_from_extension(cls, extension: Union[str, SubtitleFormat]) -> SubtitleFormat:
        """
        Get SubtitleFormat from file extension.

        Raises:
            ValueError: If extension is not supported
        """
        if isinstance(extension, SubtitleFormat):
            return extension
        return SubtitleFormat.from_extension(extension)
