"""Unit tests for the streaming primitives and the size oracle.

WHY: Every container is composed from copy_exact, fill_exact and
probe_size. An off-by-one in chunking, a short read treated as success, or
a probe that moves the read position would silently corrupt every image.

HOW: Tests use io.BytesIO streams, deliberately tiny scratch buffers to
force many chunks, and misbehaving stream doubles from conftest.py.

RULES:
- Small buffers (3-8 bytes) exercise the chunk loop boundaries
- Failure tests check both the exception type and the stream name in it
"""

from __future__ import annotations

import io

import pytest

from mkrom.core.errors import SeekFailure, ShortRead, ShortWrite
from mkrom.core.streams import (
    copy_exact,
    fill_exact,
    is_seekable,
    make_buffer,
    probe_size,
    reposition,
    stream_name,
    write_exact,
)


# ---------------------------------------------------------------------------
# TestMakeBuffer
# ---------------------------------------------------------------------------


class TestMakeBuffer:
    """make_buffer() sizes the scratch buffer from configuration."""

    def test_default_size(self):
        assert len(make_buffer()) == 16 * 1024

    def test_explicit_size(self):
        assert len(make_buffer(5)) == 5

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MKROM_BUFFER_SIZE", "0x100")
        assert len(make_buffer()) == 256

    def test_env_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("MKROM_BUFFER_SIZE", "lots")
        with pytest.raises(ValueError, match="MKROM_BUFFER_SIZE"):
            make_buffer()

    def test_env_rejects_zero(self, monkeypatch):
        monkeypatch.setenv("MKROM_BUFFER_SIZE", "0")
        with pytest.raises(ValueError, match="positive"):
            make_buffer()

    def test_rejects_non_positive_explicit_size(self):
        with pytest.raises(ValueError):
            make_buffer(0)


# ---------------------------------------------------------------------------
# TestCopyExact
# ---------------------------------------------------------------------------


class TestCopyExact:
    """copy_exact() transfers exactly count bytes through the buffer."""

    @pytest.mark.parametrize("count", [0, 1, 7, 8, 9, 64, 100])
    def test_reproduces_source_bytes(self, count, pattern):
        data = pattern(100)
        src = io.BytesIO(data)
        dst = io.BytesIO()
        copy_exact(src, dst, count, bytearray(8))
        assert dst.getvalue() == data[:count]
        assert src.tell() == count
        assert dst.tell() == count

    def test_copies_from_current_position(self, pattern):
        data = pattern(50)
        src = io.BytesIO(data)
        src.seek(10)
        dst = io.BytesIO()
        copy_exact(src, dst, 20, bytearray(3))
        assert dst.getvalue() == data[10:30]
        assert src.tell() == 30

    def test_zero_count_is_noop_on_empty_source(self):
        src = io.BytesIO(b"")
        dst = io.BytesIO()
        copy_exact(src, dst, 0)
        assert dst.getvalue() == b""

    def test_allocates_buffer_when_omitted(self, pattern):
        data = pattern(40000)
        dst = io.BytesIO()
        copy_exact(io.BytesIO(data), dst, len(data))
        assert dst.getvalue() == data

    def test_short_source_raises_short_read(self):
        src = io.BytesIO(b"abcde")
        dst = io.BytesIO()
        with pytest.raises(ShortRead, match="premature end of file"):
            copy_exact(src, dst, 10, bytearray(4))
        # Not rolled back: the partial transfer stays in place
        assert dst.getvalue() == b"abcde"
        assert src.tell() == 5

    def test_short_read_names_the_file(self, write_image):
        path = write_image(b"xy")
        with open(path, "rb") as src:
            with pytest.raises(ShortRead) as excinfo:
                copy_exact(src, io.BytesIO(), 3)
        assert excinfo.value.context == str(path)

    def test_source_without_readinto(self, pattern):
        data = pattern(30)

        class ReadOnly:
            def __init__(self):
                self._inner = io.BytesIO(data)

            def read(self, n):
                return self._inner.read(n)

        dst = io.BytesIO()
        copy_exact(ReadOnly(), dst, 30, bytearray(4))
        assert dst.getvalue() == data

    def test_short_write_raises(self, short_writer, pattern):
        dst = short_writer(5)
        with pytest.raises(ShortWrite, match="short write"):
            copy_exact(io.BytesIO(pattern(20)), dst, 20, bytearray(8))

    def test_write_oserror_becomes_short_write(self):
        class Full(io.RawIOBase):
            def writable(self):
                return True

            def write(self, b):
                raise OSError(28, "No space left on device")

        with pytest.raises(ShortWrite, match="No space left on device"):
            copy_exact(io.BytesIO(b"abc"), Full(), 3)

    def test_read_oserror_becomes_short_read(self):
        class Broken(io.RawIOBase):
            def readable(self):
                return True

            def readinto(self, b):
                raise OSError(5, "Input/output error")

        with pytest.raises(ShortRead, match="Input/output error"):
            copy_exact(Broken(), io.BytesIO(), 3)

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            copy_exact(io.BytesIO(b"a"), io.BytesIO(), -1)


# ---------------------------------------------------------------------------
# TestFillExact
# ---------------------------------------------------------------------------


class TestFillExact:
    """fill_exact() writes count copies of a single byte."""

    @pytest.mark.parametrize("count", [0, 1, 7, 8, 9, 100])
    @pytest.mark.parametrize("value", [0x00, 0xAA, 0xFF])
    def test_writes_count_copies(self, count, value):
        dst = io.BytesIO()
        fill_exact(dst, value, count, bytearray(8))
        assert dst.getvalue() == bytes((value,)) * count

    def test_buffer_contents_are_overwritten(self):
        buf = bytearray(b"\x11" * 4)
        dst = io.BytesIO()
        fill_exact(dst, 0x00, 10, buf)
        assert dst.getvalue() == b"\x00" * 10

    def test_appends_after_existing_data(self):
        dst = io.BytesIO()
        dst.write(b"head")
        fill_exact(dst, 0x5A, 3)
        assert dst.getvalue() == b"headZZZ"

    def test_short_write_raises(self, short_writer):
        with pytest.raises(ShortWrite):
            fill_exact(short_writer(3), 0x00, 10, bytearray(4))

    @pytest.mark.parametrize("value", [-1, 256])
    def test_rejects_non_byte_value(self, value):
        with pytest.raises(ValueError):
            fill_exact(io.BytesIO(), value, 1)

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            fill_exact(io.BytesIO(), 0, -5)


# ---------------------------------------------------------------------------
# TestProbeSize
# ---------------------------------------------------------------------------


class TestProbeSize:
    """probe_size() reports the length and keeps the read position."""

    @pytest.mark.parametrize("position", [0, 1, 50, 99, 100])
    def test_position_unchanged(self, position, pattern):
        stream = io.BytesIO(pattern(100))
        stream.seek(position)
        assert probe_size(stream) == 100
        assert stream.tell() == position

    def test_read_probe_read(self, pattern):
        data = pattern(20)
        stream = io.BytesIO(data)
        first = stream.read(5)
        probe_size(stream)
        second = stream.read(5)
        assert first + second == data[:10]

    def test_empty_stream(self):
        assert probe_size(io.BytesIO()) == 0

    def test_real_file(self, write_image):
        path = write_image(b"\x01" * 1234)
        with open(path, "rb") as f:
            assert probe_size(f) == 1234

    def test_unseekable_raises_seek_failure(self, unseekable):
        with pytest.raises(SeekFailure) as excinfo:
            probe_size(unseekable)
        assert excinfo.value.context == "<stream>"

    def test_closed_stream_raises_seek_failure(self):
        stream = io.BytesIO(b"abc")
        stream.close()
        with pytest.raises(SeekFailure):
            probe_size(stream)


# ---------------------------------------------------------------------------
# TestSmallHelpers
# ---------------------------------------------------------------------------


class TestSmallHelpers:
    """write_exact, reposition, is_seekable and stream_name."""

    def test_write_exact(self):
        dst = io.BytesIO()
        write_exact(dst, b"\x4e\xf9")
        assert dst.getvalue() == b"\x4e\xf9"

    def test_write_exact_short(self, short_writer):
        with pytest.raises(ShortWrite):
            write_exact(short_writer(1), b"abc")

    def test_reposition_returns_position(self):
        stream = io.BytesIO(b"0123456789")
        assert reposition(stream, 4) == 4
        assert reposition(stream, 0, io.SEEK_END) == 10

    def test_reposition_failure(self, pipe_writer):
        with pytest.raises(SeekFailure):
            reposition(pipe_writer, 4)

    def test_is_seekable(self, pipe_writer):
        assert is_seekable(io.BytesIO())
        assert not is_seekable(pipe_writer)
        assert not is_seekable(object())

    def test_stream_name(self, write_image):
        path = write_image(b"")
        with open(path, "rb") as f:
            assert stream_name(f) == str(path)
        assert stream_name(io.BytesIO()) == "<stream>"
