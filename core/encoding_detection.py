"""
Encoding helpers for subtitle input.

Input is always decoded as UTF-8. This module handles the byte-order mark and,
when a line does not decode, asks charset-normalizer what the data probably is
so the error message can point the user in the right direction.
"""

from typing import Optional, Tuple
from charset_normalizer import from_bytes
from utils.constants import UTF8_BOM
from utils.logging_config import get_logger

logger = get_logger(__name__)


class EncodingDetector:
    """Byte-order mark handling and encoding diagnostics."""

    @staticmethod
    def strip_bom(data: bytes) -> Tuple[bytes, bool]:
        """
        Remove exactly one leading UTF-8 BOM.

        Args:
            data: Raw bytes, usually the first line of a document

        Returns:
            Tuple of (data_without_bom, bom_was_present)

        Example:
            >>> EncodingDetector.strip_bom(b"\\xef\\xbb\\xbfWEBVTT\\n")
            (b'WEBVTT\\n', True)
        """
        if data.startswith(UTF8_BOM):
            return data[len(UTF8_BOM):], True
        return data, False

    @staticmethod
    def guess_encoding(sample: bytes) -> Optional[str]:
        """
        Best-effort guess of the encoding of ``sample``.

        Only used to enrich diagnostics; nothing is ever decoded with the
        guessed encoding.

        Returns:
            Encoding name such as ``cp1252``, or None if nothing fits
        """
        if not sample:
            return None
        best = from_bytes(sample).best()
        if best is None:
            logger.debug("charset-normalizer found no plausible encoding")
            return None
        logger.debug(f"charset-normalizer guessed {best.encoding} for undecodable input")
        return best.encoding

    @staticmethod
    def describe_decode_failure(sample: bytes) -> str:
        """Reason text for a line that is not valid UTF-8."""
        guessed = EncodingDetector.guess_encoding(sample)
        if guessed and guessed.replace('_', '-').lower() not in ('utf-8', 'utf8'):
            return f"Line is not valid UTF-8 (looks like {guessed})"
        return "Line is not valid UTF-8"
