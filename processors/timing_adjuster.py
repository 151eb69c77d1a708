"""
Timing adjustment for subtitle cues.

This module provides the time shift ("delta") applied to every cue during a
conversion, and the parser for the delta strings accepted on the command line.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Iterable, Iterator
from core.errors import InvalidDataError, UnderflowError
from core.subtitle_formats import Cue
from core.timing_utils import TimeConverter
from utils.logging_config import get_logger

logger = get_logger(__name__)

ZERO = timedelta(0)

# [+-][MM:]SS[.fraction]
_DELTA_PATTERN = re.compile(r'([+-])?(?:([0-9]+):)?([0-9]+)(?:\.([0-9]{1,9}))?')


class DeltaKind(Enum):
    """Direction of a time shift."""
    ADD = "add"
    SUBTRACT = "subtract"
    NONE = "none"


@dataclass(frozen=True)
class Delta:
    """
    A time shift applied uniformly to the begin and end of a cue.

    Build one with ``Delta.add``, ``Delta.subtract`` or ``Delta.none``.
    """
    kind: DeltaKind = DeltaKind.NONE
    amount: timedelta = ZERO

    def __post_init__(self):
        if self.amount < ZERO:
            raise ValueError(f"Delta amount must not be negative: {self.amount}")

    @classmethod
    def add(cls, amount: timedelta) -> 'Delta':
        return cls(DeltaKind.ADD, amount)

    @classmethod
    def subtract(cls, amount: timedelta) -> 'Delta':
        return cls(DeltaKind.SUBTRACT, amount)

    @classmethod
    def none(cls) -> 'Delta':
        return cls(DeltaKind.NONE, ZERO)

    def apply(self, cue: Cue) -> Cue:
        """
        Return ``cue`` shifted by this delta.

        Raises:
            InvalidDataError: If an addition would move the cue past the largest time
            UnderflowError: If a subtraction would move the cue before zero
        """
        if self.kind is DeltaKind.NONE:
            return cue
        if self.kind is DeltaKind.ADD:
            try:
                return cue.shifted(self.amount)
            except OverflowError as e:
                raise InvalidDataError(
                    f"Cannot shift cue ending at {TimeConverter.format_srt_time(cue.end)} "
                    f"forward by {TimeConverter.format_duration(self.amount)}"
                ) from e
        if cue.begin < self.amount:
            raise UnderflowError(
                f"Cannot shift cue starting at {TimeConverter.format_srt_time(cue.begin)} "
                f"back by {TimeConverter.format_duration(self.amount)}"
            )
        return cue.shifted(-self.amount)

    def __str__(self) -> str:
        if self.kind is DeltaKind.NONE:
            return "0"
        sign = "+" if self.kind is DeltaKind.ADD else "-"
        return f"{sign}{TimeConverter.format_duration(self.amount)}"


def apply_delta(delta: Delta, cue: Cue) -> Cue:
    """Functional form of ``Delta.apply``."""
    return delta.apply(cue)


def parse_delta(delta_str: str) -> Delta:
    """
    Parse a delta string.

    The grammar is an optional sign, an optional ``MM:`` minute prefix, the
    seconds and an optional fraction. The empty string and ``0`` mean no shift;
    any other value must carry an explicit sign. The fraction is truncated to
    milliseconds.

    Args:
        delta_str: Delta string (e.g., "+1:36.125", "-2.5", "0")

    Returns:
        Parsed Delta

    Raises:
        ValueError: If the string does not follow the grammar

    Example:
        >>> parse_delta("+1:36.125")
        Delta(kind=<DeltaKind.ADD: 'add'>, amount=datetime.timedelta(seconds=96, microseconds=125000))
    """
    delta_str = delta_str.strip()
    if delta_str in ("", "0"):
        return Delta.none()

    match = _DELTA_PATTERN.fullmatch(delta_str)
    if not match:
        raise ValueError(f"Invalid delta format: {delta_str!r}. "
                         f"Expected [+-][MM:]SS[.fff], e.g. '+1:36.125' or '-2.5'")
    sign, minutes, seconds, fraction = match.groups()
    if sign is None:
        raise ValueError(f"Delta {delta_str!r} needs an explicit '+' or '-' sign")

    millis = int((fraction or "").ljust(3, "0")[:3])
    try:
        amount = timedelta(minutes=int(minutes or 0), seconds=int(seconds), milliseconds=millis)
    except OverflowError as e:
        raise ValueError(f"Delta {delta_str!r} is out of range") from e
    return Delta.add(amount) if sign == "+" else Delta.subtract(amount)


class TimingAdjuster:
    """Applies a delta to a stream of cues, one cue at a time."""

    def __init__(self, delta: Delta = Delta.none()):
        """
        Initialize the timing adjuster.

        Args:
            delta: Shift applied to every cue
        """
        self.delta = delta
        self.adjusted = 0

    def adjust(self, cues: Iterable[Cue]) -> Iterator[Cue]:
        """
        Lazily shift every cue of ``cues``.

        Raises:
            UnderflowError: On the first cue that would move before zero
        """
        for cue in cues:
            shifted = self.delta.apply(cue)
            self.adjusted += 1
            yield shifted
        logger.debug(f"Shifted {self.adjusted} cues by {self.delta}")
