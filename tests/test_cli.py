"""Tests for the command-line interface."""

import io
import sys

import pytest

from ui.cli import CLIHandler, main

SRT_INPUT = b"1\n00:00:05,542 --> 00:00:07,792\nHello\nWorld\n\n"
VTT_OUTPUT = b"WEBVTT\n\n00:05.542 --> 00:07.792\nHello\nWorld\n\n"


@pytest.fixture
def stdio(monkeypatch):
    """Replace stdin/stdout with in-memory binary-backed streams."""

    def install(data=b""):
        stdin = io.TextIOWrapper(io.BytesIO(data))
        stdout = io.TextIOWrapper(io.BytesIO())
        monkeypatch.setattr(sys, "stdin", stdin)
        monkeypatch.setattr(sys, "stdout", stdout)
        return stdout.buffer

    return install


class TestArguments:

    def test_delta_is_parsed(self):
        args = CLIHandler().create_parser().parse_args(["--delta=+1:36.125", "a.srt", "b.vtt"])
        assert str(args.delta) == "+1m 36.1s"

    def test_negative_delta_as_separate_value(self):
        args = CLIHandler().create_parser().parse_args(["--delta", "-2.5", "a.srt", "b.vtt"])
        assert str(args.delta) == "-2.500s"

    def test_default_delta_is_no_shift(self):
        args = CLIHandler().create_parser().parse_args([])
        assert str(args.delta) == "0"
        assert args.input is None and args.output is None

    def test_bad_delta_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--delta=1.5", "a.srt", "b.vtt"])
        assert excinfo.value.code == 2
        assert "sign" in capsys.readouterr().err

    def test_unknown_format_is_a_usage_error(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--input-format", "ass"])
        assert excinfo.value.code == 2


class TestMain:

    def test_file_to_file(self, tmp_path):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT)
        target = tmp_path / "movie.vtt"
        assert main([str(source), str(target), "--delta=+1"]) == 0
        assert target.read_bytes() == (b"WEBVTT\n\n00:06.542 --> 00:08.792\n"
                                       b"Hello\nWorld\n\n")

    def test_stdin_to_stdout(self, stdio):
        output = stdio(SRT_INPUT)
        assert main(["--input-format", "srt", "--output-format", "vtt"]) == 0
        assert output.getvalue() == VTT_OUTPUT

    def test_dash_means_standard_stream(self, stdio, tmp_path):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT)
        output = stdio()
        assert main([str(source), "-", "--output-format", "vtt"]) == 0
        assert output.getvalue() == VTT_OUTPUT

    def test_missing_format(self, stdio, capsys):
        stdio(SRT_INPUT)
        assert main([]) == 1
        assert "--input-format" in capsys.readouterr().err

    def test_unrecognised_extension(self, tmp_path):
        source = tmp_path / "movie.txt"
        source.write_bytes(SRT_INPUT)
        assert main([str(source), str(tmp_path / "movie.vtt")]) == 1

    def test_parse_error_keeps_partial_output(self, tmp_path, capsys):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT + b"2\nnot a timecode\nText\n\n")
        target = tmp_path / "movie.vtt"
        assert main([str(source), str(target)]) == 1
        assert target.read_bytes() == VTT_OUTPUT
        err = capsys.readouterr().err
        assert "line 7" in err
        assert "1 cues written" in err

    def test_underflow(self, tmp_path):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT)
        assert main([str(source), str(tmp_path / "out.srt"), "--delta=-6"]) == 1

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.srt"), str(tmp_path / "out.vtt")]) == 1
        assert "missing.srt" in capsys.readouterr().err

    def test_verbose_reports_count(self, tmp_path, capsys):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT)
        assert main(["-v", "--no-colors", str(source), str(tmp_path / "movie.vtt")]) == 0
        assert "1 cues written" in capsys.readouterr().err

    def test_timestamp_out_of_range(self, tmp_path, capsys):
        source = tmp_path / "huge.srt"
        source.write_bytes(b"1\n99999999999:00:00,000 --> 99999999999:00:01,000\nA\n\n")
        assert main([str(source), str(tmp_path / "huge.vtt")]) == 1
        assert "out of range" in capsys.readouterr().err

    def test_delta_out_of_range_is_a_usage_error(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--delta=+99999999999999999:00", "a.srt", "b.vtt"])
        assert excinfo.value.code == 2

    def test_log_file(self, tmp_path):
        source = tmp_path / "movie.srt"
        source.write_bytes(SRT_INPUT)
        log_file = tmp_path / "logs" / "subshift.log"
        assert main(["-v", "--log-file", str(log_file), str(source), str(tmp_path / "movie.vtt")]) == 0
        assert "1 cues written" in log_file.read_text(encoding="utf-8")
