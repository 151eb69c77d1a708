"""
Command-line interface for subshift.

This module parses the command line, resolves formats and streams, and hands
the work to the SubtitleConverter.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
from core.errors import SubtitleError
from processors.converter import SubtitleConverter
from processors.timing_adjuster import parse_delta
from utils.constants import APP_NAME, APP_VERSION, APP_DESCRIPTION, SubtitleFormat
from utils.file_operations import FileHandler
from utils.logging_config import setup_logging

logger = None  # Will be initialized in setup_cli_logging


def setup_cli_logging(verbose: bool = False, debug: bool = False, use_colors: bool = True,
                      log_file: Optional[Path] = None):
    """Set up logging for CLI operations."""
    global logger

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = setup_logging(level=level, log_file=log_file, use_colors=use_colors)
    return logger


def _delta_argument(value: str):
    try:
        return parse_delta(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


class CLIHandler:
    """Handles command-line interface operations."""

    def __init__(self):
        """Initialize the CLI handler."""
        self.converter = SubtitleConverter()

    def create_parser(self) -> argparse.ArgumentParser:
        """
        Create the argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog=APP_NAME,
            description=APP_DESCRIPTION,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Convert SRT to WebVTT (formats from the extensions)
  subshift movie.srt movie.vtt

  # Delay every cue by 1 minute 36.125 seconds
  subshift movie.srt movie.vtt --delta=+1:36.125

  # Advance every cue by 2.5 seconds, reading stdin and writing stdout
  subshift --input-format vtt --output-format srt --delta=-2.5 < in.vtt > out.srt
            """
        )

        parser.add_argument('--version', action='version', version=f'{APP_NAME} {APP_VERSION}')
        parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
        parser.add_argument('-d', '--debug', action='store_true', help='Enable debug output')
        parser.add_argument('--no-colors', action='store_true', help='Disable colored output')
        parser.add_argument('--log-file', type=Path, help='Also write log messages to this file')

        format_choices = [f.value for f in SubtitleFormat]
        parser.add_argument('--input-format', choices=format_choices,
                            help='Input format (default: from the input extension)')
        parser.add_argument('--output-format', choices=format_choices,
                            help='Output format (default: from the output extension)')
        parser.add_argument('--delta', type=_delta_argument, default=parse_delta('0'),
                            help="Time shift applied to every cue, [+-][MM:]SS[.fff] "
                                 "(use --delta=-2.5 for negative values; default: 0)")

        parser.add_argument('input', nargs='?', type=Path,
                            help="Input file ('-' or omitted for standard input)")
        parser.add_argument('output', nargs='?', type=Path,
                            help="Output file ('-' or omitted for standard output)")

        return parser

    def handle_command(self, args) -> int:
        """
        Handle the parsed command-line arguments.

        Args:
            args: Parsed arguments from argparse

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        setup_cli_logging(args.verbose, args.debug, use_colors=not args.no_colors,
                          log_file=args.log_file)

        input_format = self._resolve_format(args.input_format, args.input, 'input')
        output_format = self._resolve_format(args.output_format, args.output, 'output')
        if input_format is None or output_format is None:
            return 1

        try:
            with FileHandler.open_input(args.input) as source, \
                    FileHandler.open_output(args.output) as sink:
                count = self.converter.convert(source, input_format, sink, output_format,
                                               args.delta)
        except SubtitleError as e:
            logger.error(f"{e} ({e.cues_written} cues written before the error)")
            return 1
        except OSError as e:
            logger.error(str(e))
            return 1
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 1

        logger.info(f"{count} cues written")
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Parse ``argv`` (default: sys.argv) and run the conversion."""
        args = self.create_parser().parse_args(argv)
        return self.handle_command(args)

    @staticmethod
    def _resolve_format(name: Optional[str], path: Optional[Path],
                        role: str) -> Optional[SubtitleFormat]:
        if name:
            return SubtitleFormat(name)
        if not FileHandler.is_stdio(path):
            try:
                return SubtitleFormat.from_path(path)
            except ValueError:
                pass
        logger.error(f"Need a format for the {role}: use --{role}-format or a .srt/.vtt file name")
        return None


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point."""
    return CLIHandler().run(argv)


if __name__ == '__main__':
    sys.exit(main())
