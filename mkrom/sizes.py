"""Parsing of human-friendly size arguments such as ``256k`` or ``4M``."""

from __future__ import annotations

import re

from mkrom.core.errors import InvalidSizeArgument
from mkrom.core.targets import GIB, KIB, MIB

SIZE_SUFFIXES = {"k": KIB, "m": MIB, "g": GIB}

_SIZE_RE = re.compile(r"\s*\+?([0-9]+)([A-Za-z]?)")


def parse_size(text: str) -> int:
    """Convert a size string to a byte count.

    Accepts a decimal integer with an optional single k/K, m/M or g/G
    suffix (binary multiples). Anything else, including trailing
    characters after the suffix, raises InvalidSizeArgument.
    """
    match = _SIZE_RE.fullmatch(text)
    if match is None:
        raise InvalidSizeArgument(text)
    value = int(match.group(1))
    suffix = match.group(2)
    if not suffix:
        return value
    multiplier = SIZE_SUFFIXES.get(suffix.lower())
    if multiplier is None:
        raise InvalidSizeArgument(text)
    return value * multiplier
