"""
Subtitle processing modules.

This package contains the processors built on top of the core parsers:
- Timing adjustment (time shift of every cue)
- Format conversion between SRT and WebVTT
"""

from .timing_adjuster import Delta, DeltaKind, TimingAdjuster, apply_delta, parse_delta
from .converter import SubtitleConverter

__all__ = [
    'Delta',
    'DeltaKind',
    'TimingAdjuster',
    'apply_delta',
    'parse_delta',
    'SubtitleConverter',
]
