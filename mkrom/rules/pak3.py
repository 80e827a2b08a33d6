"""PAK/3 512 KiB cartridge image with a relocation jump.

WHY: The PAK/3 board maps a 512 KiB ROM but the system image is only ever
256 KiB. At reset the board starts executing in the upper half, so a JMP
back into the real image must be patched in at 0x40030.

HOW: Lays the image out like generic padding (image then zeros up to
512 KiB), then seeks back to the patch offset and overwrites the jump
instruction. When the destination cannot seek, the whole container
(bounded by 512 KiB) is staged in memory, patched there, and written out
in one ordered pass.

RULES:
- Ceiling is the 256 KiB input limit, NOT the 512 KiB target size
- The patch overwrites whatever the layout pass wrote at that offset
- The destination is left positioned at the end of the container
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO

from mkrom.core.streams import copy_exact, is_seekable, reposition, write_exact
from mkrom.core.targets import TARGETS, TargetKind
from mkrom.rules.base import BaseRule

logger = logging.getLogger(__name__)


class Pak3Rule(BaseRule):
    """Cartridge with a post-hoc fixed-offset patch."""

    def __init__(self) -> None:
        super().__init__(TARGETS[TargetKind.pak3])

    def layout(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        source_size: int,
        buffer: bytearray,
    ) -> None:
        if is_seekable(dest):
            self._append_and_pad(source, dest, source_size, buffer)
            self._apply_patch(dest)
            return

        logger.debug("Destination is not seekable; staging PAK/3 image in memory")
        staging = io.BytesIO()
        self._append_and_pad(source, staging, source_size, buffer)
        self._apply_patch(staging)
        staging.seek(0)
        copy_exact(staging, dest, self.spec.container_size, buffer)

    def _apply_patch(self, dest: BinaryIO) -> None:
        patch = self.spec.patch
        reposition(dest, patch.offset)
        write_exact(dest, patch.data)
        reposition(dest, 0, io.SEEK_END)
        logger.debug("Patched %d bytes at 0x%x", len(patch.data), patch.offset)
