"""
Line-counted reader over a subtitle byte stream.

The reader is lazy: it pulls one line at a time from the underlying stream and
keeps a 1-based counter that parsers use for diagnostics.
"""

from typing import IO, Iterator, Union
from core.encoding_detection import EncodingDetector
from core.errors import InvalidDataError, SubtitleIOError
from utils.constants import DEFAULT_ENCODING, ENCODING_SAMPLE_SIZE
from utils.logging_config import get_logger

logger = get_logger(__name__)


class LineReader:
    """
    Iterate over the text lines of a stream.

    ``\\n`` and ``\\r\\n`` terminators are both accepted and removed; a last
    line ending in a bare ``\\r`` loses it as well. One leading UTF-8
    byte-order mark is consumed and never exposed. After the
    n-th line has been produced, ``line_number`` is n.

    Example:
        >>> reader = LineReader(io.BytesIO(b"\\xef\\xbb\\xbfWEBVTT\\r\\n\\n"))
        >>> list(reader), reader.line_number
        (['WEBVTT', ''], 2)
    """

    def __init__(self, source: IO):
        self.source = source
        self.line_number = 0
        self.bom_stripped = False
        self._lines = self._read_lines()

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return next(self._lines)

    def _read_lines(self) -> Iterator[str]:
        raw_lines = iter(self.source)
        while True:
            try:
                raw = next(raw_lines)
            except StopIteration:
                return
            except OSError as e:
                raise SubtitleIOError(f"Read failed: {e}", line_number=self.line_number + 1) from e

            self.line_number += 1
            if self.line_number == 1:
                raw = self._strip_bom(raw)
            yield self._decode(raw)

    def _strip_bom(self, raw: Union[bytes, str]) -> Union[bytes, str]:
        if isinstance(raw, str):
            if raw.startswith('\ufeff'):
                self.bom_stripped = True
                return raw[1:]
            return raw
        raw, self.bom_stripped = EncodingDetector.strip_bom(raw)
        if self.bom_stripped:
            logger.debug("Skipped UTF-8 byte-order mark")
        return raw

    def _decode(self, raw: Union[bytes, str]) -> str:
        if isinstance(raw, bytes):
            try:
                text = raw.decode(DEFAULT_ENCODING)
            except UnicodeDecodeError as e:
                reason = EncodingDetector.describe_decode_failure(raw[:ENCODING_SAMPLE_SIZE])
                raise InvalidDataError(reason, raw, self.line_number) from e
        else:
            text = raw
        if text.endswith('\n'):
            text = text[:-1]
        if text.endswith('\r'):
            text = text[:-1]
        return text
