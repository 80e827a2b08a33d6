"""Shared test fixtures for the mkrom test suite.

WHY: Most tests need small image files on disk or in memory, and a few
need streams that misbehave (short writes, no seeking). Centralizing them
keeps each test focused on the property it checks.

RULES:
- All file I/O tests use tmp_path for isolation
- MKROM_BUFFER_SIZE is cleared so tests see the default buffer size
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest


class PipeWriter(io.RawIOBase):
    """Append-only writable stream that refuses to seek (like a pipe)."""

    def __init__(self) -> None:
        super().__init__()
        self.data = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        self.data.extend(b)
        return len(b)


class ShortWriter(io.RawIOBase):
    """Writable stream that accepts ``limit`` bytes in total, then nothing."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self.data = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        room = max(self.limit - len(self.data), 0)
        accepted = bytes(b)[:room]
        self.data.extend(accepted)
        return len(accepted)


class SeekableShortWriter(io.BytesIO):
    """In-memory file that stops accepting bytes past offset ``limit``."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit

    def write(self, b) -> int:
        room = max(self.limit - self.tell(), 0)
        return super().write(bytes(b)[:room])


class Unseekable(io.RawIOBase):
    """Readable stream without random access."""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        return 0


@pytest.fixture(autouse=True)
def _default_buffer_size(monkeypatch):
    monkeypatch.delenv("MKROM_BUFFER_SIZE", raising=False)


@pytest.fixture
def write_image(tmp_path) -> Callable[..., Path]:
    """Factory writing ``data`` to ``tmp_path / name`` and returning the path."""

    def _write(data: bytes, name: str = "in.bin") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def pattern():
    """Factory for a non-zero, non-repeating-per-chunk byte pattern."""

    def _pattern(size: int) -> bytes:
        return bytes((i * 7 + 3) % 251 + 1 for i in range(size))

    return _pattern


@pytest.fixture
def pipe_writer() -> PipeWriter:
    return PipeWriter()


@pytest.fixture
def short_writer() -> Callable[[int], ShortWriter]:
    return ShortWriter


@pytest.fixture
def seekable_short_writer() -> Callable[[int], SeekableShortWriter]:
    return SeekableShortWriter


@pytest.fixture
def unseekable() -> Unseekable:
    return Unseekable()
