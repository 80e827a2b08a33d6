"""Pydantic model for the machine-readable build report (``--json``).

WHY: Build scripts that call mkrom want the container size and the free
space without scraping the ``#`` progress lines. A typed model gives a
stable JSON shape and a JSON Schema for it.

RULES:
- Only successful builds produce a report; failures go to stderr
- Field names are stable; add fields, never rename them
- Python 3.9+ compatible (no PEP 604 unions in model fields)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from mkrom.core.result import TransformResult
from mkrom.core.targets import TargetKind


class TransformReport(BaseModel):
    """Summary of one successful container build."""

    kind: TargetKind = Field(description="Container kind that was built.")
    source: str = Field(description="Path of the input image.")
    destination: str = Field(description="Path of the produced container.")
    source_size: int = Field(ge=0, description="Size of the input image in bytes.")
    container_size: int = Field(ge=0, description="Size of the produced container in bytes.")
    free_bytes: int = Field(ge=0, description="Room left below the kind's size ceiling.")

    @classmethod
    def from_result(
        cls,
        result: TransformResult,
        source: "os.PathLike[str] | str",
        destination: "os.PathLike[str] | str",
    ) -> TransformReport:
        return cls(
            kind=result.kind,
            source=os.fspath(source),
            destination=os.fspath(destination),
            source_size=result.source_size,
            container_size=result.container_size,
            free_bytes=result.free_bytes,
        )
