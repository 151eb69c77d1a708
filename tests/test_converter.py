"""Tests for the conversion pipeline."""

import io
from datetime import timedelta

import pytest

from core.errors import InvalidDataError, SubtitleIOError, UnderflowError, UnexpectedEofError
from processors.converter import SubtitleConverter
from processors.timing_adjuster import Delta, parse_delta
from utils.constants import SubtitleFormat

SRT = SubtitleFormat.SRT
VTT = SubtitleFormat.VTT

SRT_INPUT = (b"1\n00:00:05,542 --> 00:00:07,792\nHello\nWorld\n\n"
             b"2\n00:01:00,000 --> 01:00:00,000\nSecond\n\n")


def convert(data, input_format, output_format, delta=Delta.none()):
    converter = SubtitleConverter()
    sink = io.BytesIO()
    count = converter.convert(io.BytesIO(data), input_format, sink, output_format, delta)
    return count, sink.getvalue()


class TestConvert:

    def test_srt_to_vtt(self):
        count, output = convert(SRT_INPUT, SRT, VTT)
        assert count == 2
        assert output == (b"WEBVTT\n\n"
                          b"00:05.542 --> 00:07.792\nHello\nWorld\n\n"
                          b"01:00.000 --> 01:00:00.000\nSecond\n\n")

    def test_vtt_to_srt_with_delta(self):
        data = (b"WEBVTT\n\nintro\n00:00.000 --> 00:05.000\nHello World\n\n"
                b"00:10.000 --> 00:12.500 align:start\nBye\n\n")
        count, output = convert(data, VTT, SRT, parse_delta("+1:36.125"))
        assert count == 2
        assert output == (b"1\n00:01:36,125 --> 00:01:41,125\nHello World\n\n"
                          b"2\n00:01:46,125 --> 00:01:48,625\nBye\n\n")

    def test_vtt_round_trip_keeps_identifiers(self):
        data = b"WEBVTT\n\nintro\n00:00.000 --> 00:05.000\nHello World\n\n"
        assert convert(data, VTT, VTT)[1] == data

    def test_srt_round_trip(self):
        assert convert(SRT_INPUT, SRT, SRT)[1] == SRT_INPUT

    def test_bom_is_not_copied_to_output(self):
        count, output = convert(b"\xef\xbb\xbf" + SRT_INPUT, SRT, SRT)
        assert output == SRT_INPUT

    def test_empty_srt_gives_empty_vtt(self):
        assert convert(b"", SRT, VTT) == (0, b"WEBVTT\n\n")

    def test_parse_error_keeps_partial_output(self):
        converter = SubtitleConverter()
        sink = io.BytesIO()
        data = SRT_INPUT + b"3\n00:02:00,000 -> 00:02:01,000\nBroken\n\n"
        with pytest.raises(InvalidDataError) as excinfo:
            converter.convert(io.BytesIO(data), SRT, sink, VTT)
        assert excinfo.value.cues_written == 2
        assert excinfo.value.line_number == 11
        assert converter.cues_written == 2
        assert sink.getvalue().count(b"-->") == 2

    def test_underflow_stops_mid_stream(self):
        converter = SubtitleConverter()
        sink = io.BytesIO()
        data = (b"1\n00:00:05,000 --> 00:00:06,000\nA\n\n"
                b"2\n00:00:01,000 --> 00:00:02,000\nB\n\n")
        with pytest.raises(UnderflowError) as excinfo:
            converter.convert(io.BytesIO(data), SRT, sink, SRT, Delta.subtract(timedelta(seconds=2)))
        assert excinfo.value.cues_written == 1
        assert sink.getvalue() == b"1\n00:00:03,000 --> 00:00:04,000\nA\n\n"

    def test_missing_vtt_header(self):
        converter = SubtitleConverter()
        with pytest.raises(UnexpectedEofError) as excinfo:
            converter.convert(io.BytesIO(b""), VTT, io.BytesIO(), SRT)
        assert excinfo.value.cues_written == 0

    def test_write_failure(self, failing_sink):
        converter = SubtitleConverter()
        with pytest.raises(SubtitleIOError) as excinfo:
            converter.convert(io.BytesIO(SRT_INPUT), SRT, failing_sink(allowed=2), VTT)
        assert excinfo.value.cues_written == 1

    def test_text_sink(self):
        converter = SubtitleConverter()
        sink = io.StringIO()
        converter.convert(io.BytesIO(SRT_INPUT), SRT, sink, VTT)
        assert sink.getvalue().startswith("WEBVTT\n\n00:05.542 --> 00:07.792\n")


class TestConvertFile:

    def test_formats_from_extensions(self, tmp_path):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT)
        target = tmp_path / "out" / "movie.vtt"
        count = SubtitleConverter().convert_file(source, target)
        assert count == 2
        assert target.read_bytes().startswith(b"WEBVTT\n\n00:05.542 --> 00:07.792\n")

    def test_explicit_formats_override_extensions(self, tmp_path):
        source = tmp_path / "movie.txt"
        source.write_bytes(SRT_INPUT)
        target = tmp_path / "movie.out"
        SubtitleConverter().convert_file(source, target, "srt", SubtitleFormat.SRT,
                                         delta=parse_delta("+1"))
        assert target.read_bytes().startswith(b"1\n00:00:06,542 --> 00:00:08,792\n")

    def test_unknown_extension(self, tmp_path):
        with pytest.raises(ValueError):
            SubtitleConverter().convert_file(tmp_path / "movie.ass", tmp_path / "movie.srt")

    def test_missing_input(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SubtitleConverter().convert_file(tmp_path / "missing.srt", tmp_path / "out.vtt")

    def test_error_leaves_partial_file(self, tmp_path):
        source = tmp_path / "broken.srt"
        source.write_bytes(SRT_INPUT + b"oops\n")
        target = tmp_path / "broken.vtt"
        with pytest.raises(InvalidDataError) as excinfo:
            SubtitleConverter().convert_file(source, target)
        assert excinfo.value.cues_written == 2
        assert target.read_bytes().count(b"-->") == 2
