#!/usr/bin/env python3
"""
subshift - Main Application Entry Point
=======================================

Convert subtitles between SRT and WebVTT, optionally shifting every cue.

All functionality is organized in core/, processors/, ui/ and utils/.

Usage:
    python subshift.py movie.srt movie.vtt
    python subshift.py movie.vtt movie.srt --delta=-2.5
    python subshift.py --input-format srt --output-format vtt < in.srt > out.vtt

    # Help
    python subshift.py --help
"""

import sys
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from ui.cli import main


if __name__ == '__main__':
    sys.exit(main())
