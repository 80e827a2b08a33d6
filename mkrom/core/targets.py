"""Container format table: one TargetSpec record per output kind.

WHY: Each loader expects an exact container size, sometimes a prefix in
front of the image and sometimes bytes patched at a fixed offset. Keeping
those numbers as validated data, not literals scattered through the rules,
means a new container kind is one new record plus one small rule class.

HOW: TargetSpec is a frozen pydantic model. A model validator enforces the
size invariants when a record is built, so a malformed table fails at
import time instead of producing a bad image. TARGETS maps each kind to
its record.

RULES:
- target_size is the size of the image area; a prefix comes on top of it
- max_input_size (the ceiling) defaults to target_size when unset
- target_size >= max_input_size >= 0 whenever both are set
- A patch must lie entirely inside the container
- The generic "pad" record has no target_size; the caller supplies it
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB


class TargetKind(str, Enum):
    """Known container kinds. Values double as command names."""

    pad = "pad"
    pak3 = "pak3"
    stc = "stc"


class PrefixSpec(BaseModel):
    """Bytes written in front of the copied image."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=0, description="Number of prefix bytes.")
    fill: int = Field(default=0, ge=0, le=0xFF, description="Prefix byte value.")


class PatchSpec(BaseModel):
    """Literal bytes overwritten at an absolute container offset after layout."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(ge=0, description="Absolute offset in the container.")
    data: bytes = Field(min_length=1, description="Bytes written at offset.")


class TargetSpec(BaseModel):
    """Constant layout data for one container kind."""

    model_config = ConfigDict(frozen=True)

    kind: TargetKind
    title: str = Field(description="Human-readable label used in progress lines.")
    target_size: Optional[int] = Field(default=None, ge=0)
    max_input_size: Optional[int] = Field(default=None, ge=0)
    prefix: Optional[PrefixSpec] = None
    patch: Optional[PatchSpec] = None

    @model_validator(mode="after")
    def _check_layout(self) -> "TargetSpec":
        if (
            self.target_size is not None
            and self.max_input_size is not None
            and self.max_input_size > self.target_size
        ):
            raise ValueError(
                "max_input_size ({}) exceeds target_size ({})".format(
                    self.max_input_size, self.target_size
                )
            )
        if self.patch is not None:
            if self.target_size is None:
                raise ValueError("a patch needs a fixed target_size")
            end = self.patch.offset + len(self.patch.data)
            if end > self.container_size:
                raise ValueError(
                    "patch ends at 0x{:x}, past the 0x{:x}-byte container".format(
                        end, self.container_size
                    )
                )
        return self

    @property
    def prefix_size(self) -> int:
        return self.prefix.count if self.prefix is not None else 0

    @property
    def ceiling(self) -> Optional[int]:
        """Largest accepted input size."""
        if self.max_input_size is not None:
            return self.max_input_size
        return self.target_size

    @property
    def container_size(self) -> Optional[int]:
        """Total output size: prefix plus image area."""
        if self.target_size is None:
            return None
        return self.prefix_size + self.target_size

    def with_target_size(self, target_size: int) -> "TargetSpec":
        """Return a validated copy with a caller-supplied target size."""
        data = self.model_dump()
        data["target_size"] = target_size
        return TargetSpec.model_validate(data)


# ---------------------------------------------------------------------------
# Known containers
# ---------------------------------------------------------------------------

PAK3_JMP_OFFSET = 0x40030
PAK3_JMP_INSTRUCTION = bytes((0x4E, 0xF9, 0x00, 0xE0, 0x00, 0x00))
"""68000 ``JMP $E00000`` placed where the PAK/3 board starts executing."""

TARGETS: Dict[TargetKind, TargetSpec] = {
    TargetKind.pad: TargetSpec(
        kind=TargetKind.pad,
        title="",
    ),
    TargetKind.pak3: TargetSpec(
        kind=TargetKind.pak3,
        title="PAK/3",
        target_size=512 * KIB,
        max_input_size=256 * KIB,
        patch=PatchSpec(offset=PAK3_JMP_OFFSET, data=PAK3_JMP_INSTRUCTION),
    ),
    TargetKind.stc: TargetSpec(
        kind=TargetKind.stc,
        title="Steem Engine cartridge",
        target_size=128 * KIB,
        prefix=PrefixSpec(count=4, fill=0x00),
    ),
}
