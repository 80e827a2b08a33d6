"""Exception taxonomy for image construction.

WHY: The command line must turn every failure into one diagnostic line and
exit status 1, while the builder must know which failures leave a corrupt
output behind. A single base class lets both catch "any build failure"
without catching programming errors.

HOW: Every error carries a ``context`` (normally the file name involved) and
a ``detail``. ``str()`` renders ``"<context>: <detail>"`` so the CLI only
has to prefix the program name.

RULES:
- Raise these only for failures of the build itself (bad input, I/O)
- Programming errors (bad arguments to primitives) stay ValueError
- ImageTooLarge keeps the original "<file> is too big: N extra bytes" wording
"""

from __future__ import annotations


class MkromError(Exception):
    """Base class for all image construction failures."""

    def __init__(self, context: str, detail: str) -> None:
        self.context = context
        self.detail = detail
        super().__init__(f"{context}: {detail}")


class InvalidSizeArgument(MkromError):
    """Raised when a size string cannot be parsed."""

    def __init__(self, text: str) -> None:
        super().__init__(text, "invalid size.")


class ImageTooLarge(MkromError):
    """Raised when the input image exceeds the target's accepted ceiling.

    RULES:
    - excess is always > 0 and equals size - ceiling
    """

    def __init__(self, context: str, size: int, ceiling: int) -> None:
        self.size = size
        self.ceiling = ceiling
        self.excess = size - ceiling
        super().__init__(context, f"{self.excess} extra bytes")

    def __str__(self) -> str:
        return f"{self.context} is too big: {self.excess} extra bytes"


class ShortRead(MkromError):
    """Raised when a source yields fewer bytes than required."""


class ShortWrite(MkromError):
    """Raised when a destination accepts fewer bytes than offered."""


class SeekFailure(MkromError):
    """Raised when querying or changing a stream position fails."""


class OpenFailure(MkromError):
    """Raised when a source or destination file cannot be opened."""


class CloseFailure(MkromError):
    """Raised when closing (and flushing) a file fails."""


class UsageError(MkromError):
    """Raised for a command line that matches no known command form."""

    def __init__(self, detail: str) -> None:
        super().__init__("usage", detail)
