"""Configuration constants and .env loading.

WHY: The scratch buffer size and log verbosity are the only tunables of the
tool. Keeping them here, overridable from the environment, means tests and
build scripts can change them without touching the engine.

HOW: python-dotenv loads the .env file on import. Constants are read from
the environment with plain defaults. load_buffer_size() gives a clear error
for unusable buffer sizes.

RULES:
- All defaults can be overridden via environment variables
- The buffer size bounds memory use regardless of image size
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the directory the tool is run from
load_dotenv()

PROGRAM_NAME = "mkrom"

DEFAULT_BUFFER_SIZE = 16 * 1024
"""Size of the scratch buffer used by the streaming primitives."""

LOG_LEVEL = os.getenv("MKROM_LOG_LEVEL", "WARNING").upper()


def load_buffer_size() -> int:
    """Read the scratch buffer size from MKROM_BUFFER_SIZE.

    RULES:
    - Unset or empty means DEFAULT_BUFFER_SIZE
    - Raises ValueError for non-integer or non-positive values
    """
    raw = os.getenv("MKROM_BUFFER_SIZE", "").strip()
    if not raw:
        return DEFAULT_BUFFER_SIZE
    try:
        size = int(raw, 0)
    except ValueError:
        raise ValueError(
            "MKROM_BUFFER_SIZE must be an integer, got {!r}".format(raw)
        ) from None
    if size <= 0:
        raise ValueError("MKROM_BUFFER_SIZE must be positive, got {}".format(size))
    return size
