"""Bounded-buffer streaming primitives and the size oracle.

WHY: Every container layout is built from three moves: copy N bytes of the
input, write N copies of one byte, and find out how big the input is. Doing
these through one fixed-size scratch buffer keeps memory use flat no matter
how large the image or the container is.

HOW: copy_exact() and fill_exact() loop over chunks no larger than the
buffer. The buffer is a bytearray handed in by the caller (or allocated per
call), viewed through a memoryview so chunks are sliced without copying.
probe_size() saves the position, seeks to the end, and restores it.

RULES:
- count == 0 is a successful no-op for both primitives
- A read returning no data before count is reached is a ShortRead,
  never an early "done"
- A write accepting fewer bytes than offered is a ShortWrite
- Positions are not rolled back on failure
- probe_size() leaves the stream position unchanged on success
"""

from __future__ import annotations

import io
import logging
import os
from typing import BinaryIO, Optional

from mkrom.config import load_buffer_size
from mkrom.core.errors import SeekFailure, ShortRead, ShortWrite

logger = logging.getLogger(__name__)


def make_buffer(size: Optional[int] = None) -> bytearray:
    """Allocate a scratch buffer for the primitives.

    Args:
        size: Buffer size in bytes. Defaults to the configured size
              (MKROM_BUFFER_SIZE, 16 KiB unless overridden).
    """
    if size is None:
        size = load_buffer_size()
    if size <= 0:
        raise ValueError("buffer size must be positive, got {}".format(size))
    return bytearray(size)


def stream_name(stream: object) -> str:
    """Name used for a stream in diagnostics (its file name when it has one)."""
    name = getattr(stream, "name", None)
    if isinstance(name, os.PathLike):
        name = os.fspath(name)
    return name if isinstance(name, str) else "<stream>"


def _describe(exc: Exception) -> str:
    return getattr(exc, "strerror", None) or str(exc)


def _read_into(source: BinaryIO, chunk: memoryview) -> int:
    readinto = getattr(source, "readinto", None)
    if readinto is not None:
        return readinto(chunk) or 0
    data = source.read(len(chunk))
    if not data:
        return 0
    chunk[:len(data)] = data
    return len(data)


def _write_chunk(dest: BinaryIO, chunk: memoryview) -> None:
    try:
        written = dest.write(chunk)
    except OSError as exc:
        raise ShortWrite(stream_name(dest), _describe(exc)) from exc
    if written is None or written < len(chunk):
        raise ShortWrite(
            stream_name(dest),
            "short write ({} of {} bytes)".format(written or 0, len(chunk)),
        )


def copy_exact(
    source: BinaryIO,
    dest: BinaryIO,
    count: int,
    buffer: Optional[bytearray] = None,
) -> None:
    """Copy exactly ``count`` bytes from ``source`` to ``dest``.

    Args:
        source: Readable binary stream.
        dest: Writable binary stream.
        count: Number of bytes to transfer.
        buffer: Scratch buffer; one is allocated when omitted.

    Raises:
        ShortRead: The source ran dry (or failed) before ``count`` bytes.
        ShortWrite: The destination refused part of a chunk.
    """
    if count < 0:
        raise ValueError("count must be >= 0, got {}".format(count))
    if count == 0:
        return
    if buffer is None:
        buffer = make_buffer()

    view = memoryview(buffer)
    remaining = count
    while remaining > 0:
        want = min(len(view), remaining)
        try:
            got = _read_into(source, view[:want])
        except OSError as exc:
            raise ShortRead(stream_name(source), _describe(exc)) from exc
        if got == 0:
            raise ShortRead(stream_name(source), "premature end of file.")
        _write_chunk(dest, view[:got])
        remaining -= got

    logger.debug("Copied %d bytes from %s to %s", count, stream_name(source), stream_name(dest))


def fill_exact(
    dest: BinaryIO,
    value: int,
    count: int,
    buffer: Optional[bytearray] = None,
) -> None:
    """Write ``count`` copies of the byte ``value`` to ``dest``.

    The buffer is filled once and the same chunk is written repeatedly.

    Raises:
        ShortWrite: The destination refused part of a chunk.
    """
    if not 0 <= value <= 0xFF:
        raise ValueError("fill value must be a byte (0..255), got {}".format(value))
    if count < 0:
        raise ValueError("count must be >= 0, got {}".format(count))
    if count == 0:
        return
    if buffer is None:
        buffer = make_buffer()

    span = min(len(buffer), count)
    buffer[:span] = bytes((value,)) * span
    view = memoryview(buffer)[:span]

    remaining = count
    while remaining > 0:
        chunk = view[:min(span, remaining)]
        _write_chunk(dest, chunk)
        remaining -= len(chunk)

    logger.debug("Filled %d bytes of 0x%02x into %s", count, value, stream_name(dest))


def probe_size(stream: BinaryIO) -> int:
    """Return the total length of ``stream`` without moving its position.

    Raises:
        SeekFailure: The position could not be saved, moved, or restored
            (non-seekable stream, closed stream, I/O error).
    """
    try:
        initial = stream.tell()
        stream.seek(0, io.SEEK_END)
        size = stream.tell()
        stream.seek(initial, io.SEEK_SET)
    except (OSError, ValueError) as exc:
        raise SeekFailure(stream_name(stream), _describe(exc)) from exc
    return size


def write_exact(dest: BinaryIO, data: bytes) -> None:
    """Write all of ``data`` to ``dest`` in a single call.

    Raises:
        ShortWrite: The destination refused part of ``data``.
    """
    _write_chunk(dest, memoryview(data))


def reposition(stream: BinaryIO, offset: int, whence: int = io.SEEK_SET) -> int:
    """Seek ``stream`` and return the new absolute position.

    Raises:
        SeekFailure: The stream cannot be repositioned.
    """
    try:
        stream.seek(offset, whence)
        return stream.tell()
    except (OSError, ValueError) as exc:
        raise SeekFailure(stream_name(stream), _describe(exc)) from exc


def is_seekable(stream: BinaryIO) -> bool:
    """True when ``stream`` supports random access."""
    seekable = getattr(stream, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except (OSError, ValueError):
        return False
