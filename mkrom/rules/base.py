"""Abstract base rule and the shared transformation contract.

WHY: Every container kind follows the same outer steps (measure the input,
refuse it if it is too big, lay out bytes, report the free space) and
differs only in the layout. This base class owns the common steps so each
concrete rule only describes its byte layout.

HOW: BaseRule.apply() probes the input size, checks it against the
TargetSpec ceiling, delegates to the subclass's layout(), and builds the
TransformResult. _append_and_pad() is the "image then zeros" step that all
three layouts share.

RULES:
- Input size is probed before any byte is written
- Inputs above the ceiling raise ImageTooLarge and are never truncated
- The ceiling and the target size are separate numbers (see PAK/3)
- free_bytes = ceiling - source size

To add a new container kind:
1. Add a TargetSpec record to TARGETS in mkrom/core/targets.py
2. Subclass BaseRule and implement layout()
3. Register the class in RULES in mkrom/rules/__init__.py
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from mkrom.core.errors import ImageTooLarge
from mkrom.core.result import TransformResult
from mkrom.core.streams import copy_exact, fill_exact, make_buffer, probe_size, stream_name
from mkrom.core.targets import TargetSpec

logger = logging.getLogger(__name__)


class BaseRule(ABC):
    """Abstract base for all container transformation rules."""

    def __init__(self, spec: TargetSpec) -> None:
        if spec.target_size is None:
            raise ValueError("rule '{}' needs a target size".format(spec.kind.value))
        self.spec = spec

    @property
    def kind(self) -> str:
        return self.spec.kind.value

    @property
    def title(self) -> str:
        """Human-readable container label, e.g. 'Steem Engine cartridge'."""
        return self.spec.title

    def apply(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        buffer: Optional[bytearray] = None,
    ) -> TransformResult:
        """Build the container from ``source`` into ``dest``.

        Args:
            source: Readable, seekable binary stream holding the image.
            dest: Writable binary stream receiving the container.
            buffer: Scratch buffer shared by the primitives of this call.

        Returns:
            TransformResult describing the produced container.

        Raises:
            ImageTooLarge: The image exceeds the kind's ceiling.
            SeekFailure, ShortRead, ShortWrite: I/O failed mid-build.
        """
        if buffer is None:
            buffer = make_buffer()

        source_size = probe_size(source)
        ceiling = self.spec.ceiling
        if source_size > ceiling:
            raise ImageTooLarge(stream_name(source), source_size, ceiling)

        logger.debug(
            "Building %s container: %d byte image, ceiling %d, container %d",
            self.kind, source_size, ceiling, self.spec.container_size,
        )
        self.layout(source, dest, source_size, buffer)

        return TransformResult(
            kind=self.kind,
            source_size=source_size,
            container_size=self.spec.container_size,
            free_bytes=ceiling - source_size,
        )

    @abstractmethod
    def layout(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        source_size: int,
        buffer: bytearray,
    ) -> None:
        """Write the container bytes for an already validated image."""

    def _append_and_pad(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        source_size: int,
        buffer: bytearray,
    ) -> None:
        """Copy the whole image, then zero-fill up to target_size."""
        copy_exact(source, dest, source_size, buffer)
        fill_exact(dest, 0x00, self.spec.target_size - source_size, buffer)
