"""Core engine: streaming primitives, container table, errors and results."""

from mkrom.core.errors import (
    CloseFailure,
    ImageTooLarge,
    InvalidSizeArgument,
    MkromError,
    OpenFailure,
    SeekFailure,
    ShortRead,
    ShortWrite,
    UsageError,
)
from mkrom.core.result import TransformResult
from mkrom.core.streams import copy_exact, fill_exact, make_buffer, probe_size
from mkrom.core.targets import TARGETS, TargetKind, TargetSpec

__all__ = [
    "CloseFailure",
    "ImageTooLarge",
    "InvalidSizeArgument",
    "MkromError",
    "OpenFailure",
    "SeekFailure",
    "ShortRead",
    "ShortWrite",
    "UsageError",
    "TransformResult",
    "copy_exact",
    "fill_exact",
    "make_buffer",
    "probe_size",
    "TARGETS",
    "TargetKind",
    "TargetSpec",
]
