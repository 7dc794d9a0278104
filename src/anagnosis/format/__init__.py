"""Decoding and link detection for formatter output."""

from .links import LinkDetector, Matcher, default_matchers
from .overstrike import decode, decode_line

__all__ = [
    "decode",
    "decode_line",
    "LinkDetector",
    "Matcher",
    "default_matchers",
]
