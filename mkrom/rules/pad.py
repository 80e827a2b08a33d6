"""Generic zero padding to a caller-chosen size."""

from __future__ import annotations

from typing import BinaryIO

from mkrom.core.targets import TARGETS, TargetKind
from mkrom.rules.base import BaseRule


class PadRule(BaseRule):
    """Image followed by zeros, exactly ``target_size`` bytes long.

    RULES:
    - Ceiling equals the target size
    - A zero target size only accepts an empty image
    """

    def __init__(self, target_size: int) -> None:
        super().__init__(TARGETS[TargetKind.pad].with_target_size(target_size))

    def layout(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        source_size: int,
        buffer: bytearray,
    ) -> None:
        self._append_and_pad(source, dest, source_size, buffer)
