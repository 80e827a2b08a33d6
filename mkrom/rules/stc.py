"""Steem Engine cartridge image (.stc).

WHY: The Steem Engine emulator loads 128 KiB cartridge ROMs from a file
that starts with a 4-byte zero long in front of the ROM contents.

HOW: Writes the prefix from the TargetSpec, then the image, then zeros up
to 128 KiB of ROM area. The resulting file is 4 + 128 KiB bytes.

RULES:
- The prefix is fixed by the loader and not configurable
- Ceiling is the 128 KiB ROM area (the prefix does not count against it)
"""

from __future__ import annotations

from typing import BinaryIO

from mkrom.core.streams import fill_exact
from mkrom.core.targets import TARGETS, TargetKind
from mkrom.rules.base import BaseRule


class StcRule(BaseRule):
    """Cartridge with a leading zero prefix."""

    def __init__(self) -> None:
        super().__init__(TARGETS[TargetKind.stc])

    def layout(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        source_size: int,
        buffer: bytearray,
    ) -> None:
        prefix = self.spec.prefix
        fill_exact(dest, prefix.fill, prefix.count, buffer)
        self._append_and_pad(source, dest, source_size, buffer)
