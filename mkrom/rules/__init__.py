"""Transformation rule registry — one rule per container kind.

WHY: The CLI and the builder need a single lookup from a command name to
the rule that implements it. A central dict makes adding a container kind
a one-line registration.

HOW: RULES maps TargetKind values to rule *classes* (not instances).
PadRule takes the target size; the cartridge rules take no arguments:
``rule = RULES["stc"]()``.

RULES:
- Keys are the command names ("pad", "pak3", "stc")
- Values are BaseRule subclasses
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mkrom.core.targets import TargetKind
from mkrom.rules.pad import PadRule
from mkrom.rules.pak3 import Pak3Rule
from mkrom.rules.stc import StcRule

if TYPE_CHECKING:
    from mkrom.rules.base import BaseRule

RULES: dict[str, type[BaseRule]] = {
    TargetKind.pad.value: PadRule,
    TargetKind.pak3.value: Pak3Rule,
    TargetKind.stc.value: StcRule,
}

__all__ = ["RULES", "PadRule", "Pak3Rule", "StcRule"]
