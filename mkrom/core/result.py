"""Outcome of a successful transformation.

A TransformResult only exists when a rule succeeded; failures are raised as
MkromError subclasses whose message has already been composed, so the
caller's remaining duty is cleanup.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TransformResult:
    """Sizes describing a freshly built container.

    RULES:
    - kind: TargetKind value of the rule that ran ("pad", "pak3", "stc")
    - source_size: bytes copied from the input image
    - container_size: total bytes of the produced container
    - free_bytes: ceiling - source_size, the room left for the image
    """

    kind: str
    source_size: int
    container_size: int
    free_bytes: int
