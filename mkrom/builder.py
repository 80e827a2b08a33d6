"""File-level driver: open, transform, close, and clean up.

WHY: Rules work on open streams and know nothing about files. Someone has
to own the file handles for exactly one invocation and make sure a failed
build never leaves a half-written image at the destination path.

HOW: build_image() opens the source, then the destination, runs the rule,
and closes the destination before the source. Any failure after the
destination was created (including a failing close, which may hide a lost
flush) removes the destination file before the error propagates.

RULES:
- Open errors raise OpenFailure; close errors raise CloseFailure
- The destination is deleted on ANY failure once it exists
- A failed deletion is logged as a warning, never raised
- A close error during an already failing build is logged; the first
  error is the one that propagates
- A close failure on the source after a successful build is still a failure
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Optional, Union

from mkrom.core.errors import CloseFailure, OpenFailure
from mkrom.core.result import TransformResult
from mkrom.core.streams import make_buffer
from mkrom.rules.base import BaseRule

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _open(path: PathLike, mode: str) -> BinaryIO:
    try:
        return open(path, mode)
    except OSError as exc:
        raise OpenFailure(os.fspath(path), exc.strerror or str(exc)) from exc


def _close(stream: BinaryIO, path: PathLike) -> None:
    try:
        stream.close()
    except OSError as exc:
        raise CloseFailure(os.fspath(path), exc.strerror or str(exc)) from exc


def _close_after_failure(stream: BinaryIO, path: PathLike) -> None:
    try:
        stream.close()
    except Exception as exc:
        logger.warning(
            "%s: close failed: %s", os.fspath(path), getattr(exc, "strerror", None) or exc
        )


def discard_output(path: PathLike) -> None:
    """Remove a partially written output file (best effort)."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning(
            "%s: could not remove partial output: %s",
            os.fspath(path), exc.strerror or exc,
        )
    else:
        logger.debug("Removed partial output %s", os.fspath(path))


def _build_into(
    rule: BaseRule,
    source: BinaryIO,
    dest_path: PathLike,
    buffer: bytearray,
) -> TransformResult:
    dest = _open(dest_path, "wb")
    try:
        result = rule.apply(source, dest, buffer)
    except BaseException:
        _close_after_failure(dest, dest_path)
        discard_output(dest_path)
        raise

    try:
        _close(dest, dest_path)
    except CloseFailure:
        discard_output(dest_path)
        raise
    return result


def build_image(
    rule: BaseRule,
    source_path: PathLike,
    dest_path: PathLike,
    buffer: Optional[bytearray] = None,
) -> TransformResult:
    """Run ``rule`` from the file at ``source_path`` into ``dest_path``.

    Args:
        rule: Configured transformation rule.
        source_path: Image to read.
        dest_path: Container to create (truncated if it exists).
        buffer: Scratch buffer; allocated from configuration when omitted.

    Returns:
        The rule's TransformResult.

    Raises:
        MkromError: Any build failure. The destination file does not exist
            afterwards unless the source close was the only failure.
    """
    if buffer is None:
        buffer = make_buffer()

    source = _open(source_path, "rb")
    try:
        result = _build_into(rule, source, dest_path, buffer)
    except BaseException:
        _close_after_failure(source, source_path)
        raise
    _close(source, source_path)

    logger.info(
        "Built %s container %s (%d bytes, %d bytes free)",
        rule.kind, os.fspath(dest_path), result.container_size, result.free_bytes,
    )
    return result
