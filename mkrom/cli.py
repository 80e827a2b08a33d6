"""Command-line interface for the image construction tool.

WHY: Firmware build scripts call the tool once per container right after
linking. They need three fixed command forms, a one-line diagnostic on
failure, and an exit status they can test.

HOW: argparse subcommands map each command form to one rule from RULES.
The size argument of ``pad`` is parsed by mkrom.sizes.parse_size. The
build itself (file handling and partial-output cleanup) is done by
mkrom.builder.build_image. Argument errors are turned into UsageError so
every failure exits with status 1 instead of argparse's 2.

RULES:
- Commands: pad <size> <src> <dst>, pak3 <src> <dst>, stc <src> <dst>
- Exit codes: 0 = success, 1 = any error, 130 = interrupted
- Diagnostics go to stderr as "<program>: <context>: <detail>"
- Progress lines ("# ...") go to stdout and are informational only
- --json replaces the progress lines with a TransformReport document
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from mkrom import __version__
from mkrom.builder import build_image
from mkrom.config import LOG_LEVEL, PROGRAM_NAME
from mkrom.core.errors import MkromError, UsageError
from mkrom.core.streams import make_buffer
from mkrom.core.targets import TargetKind
from mkrom.report import TransformReport
from mkrom.rules import RULES
from mkrom.rules.base import BaseRule
from mkrom.sizes import parse_size

USAGE_TEXT = """usage:
  # Generic zero padding
  {prog} pad <size> <source> <destination>

  # Steem Engine cartridge image
  {prog} stc <source.img> <destination.stc>

  # PAK/3 image
  {prog} pak3 <source.img> <destination.img>
"""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def _error(msg: object) -> None:
    print("{}: {}".format(PROGRAM_NAME, msg), file=sys.stderr, flush=True)


def _progress(msg: str) -> None:
    print(msg, flush=True)


def _configure_logging() -> None:
    level = getattr(logging, LOG_LEVEL, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="{}: %(message)s".format(PROGRAM_NAME),
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - One subcommand per registered rule
    - pad takes a size; the cartridge commands take only paths
    """
    parser = _Parser(
        prog=PROGRAM_NAME,
        description="Pad a raw binary image or wrap it into a cartridge container.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    common = _Parser(add_help=False)
    common.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON build report instead of progress lines.",
    )

    commands = parser.add_subparsers(dest="command", metavar="<command>")
    commands.required = True

    pad = commands.add_parser(
        TargetKind.pad.value,
        parents=[common],
        help="Generic zero padding.",
    )
    pad.add_argument("size", help="Target size, e.g. 1024, 256k, 4M, 1G.")
    pad.add_argument("source", help="Input image.")
    pad.add_argument("destination", help="Output image.")

    stc = commands.add_parser(
        TargetKind.stc.value,
        parents=[common],
        help="Steem Engine cartridge image.",
    )
    stc.add_argument("source", help="Input image (source.img).")
    stc.add_argument("destination", help="Output cartridge (destination.stc).")

    pak3 = commands.add_parser(
        TargetKind.pak3.value,
        parents=[common],
        help="PAK/3 512 KB image.",
    )
    pak3.add_argument("source", help="Input image (source.img, at most 256 KB).")
    pak3.add_argument("destination", help="Output image (destination.img).")

    return parser


def _make_rule(args: argparse.Namespace) -> BaseRule:
    rule_cls = RULES[args.command]
    if args.command == TargetKind.pad.value:
        return rule_cls(parse_size(args.size))
    return rule_cls()


def _describe_start(rule: BaseRule, args: argparse.Namespace) -> str:
    label = "{} image".format(rule.title) if rule.title else "image"
    return "# Padding {} to {} KB {} into {}".format(
        args.source, rule.spec.target_size // 1024, label, args.destination,
    )


def run(args: argparse.Namespace) -> int:
    """Execute one parsed command and return the exit status."""
    try:
        rule = _make_rule(args)
        buffer = make_buffer()
    except MkromError as e:
        _error(e)
        return 1
    except ValueError as e:
        # Config errors (bad MKROM_BUFFER_SIZE, unusable target size)
        _error(e)
        return 1

    if not args.json:
        _progress(_describe_start(rule, args))

    try:
        result = build_image(rule, args.source, args.destination, buffer)
    except MkromError as e:
        _error(e)
        return 1

    if args.json:
        report = TransformReport.from_result(result, args.source, args.destination)
        _progress(report.model_dump_json(indent=2))
    else:
        _progress("# {} done ({} bytes free)".format(args.destination, result.free_bytes))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns the process exit status
    """
    _configure_logging()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        _error(e)
        print(USAGE_TEXT.format(prog=PROGRAM_NAME), file=sys.stderr, end="")
        return 1

    try:
        return run(args)
    except KeyboardInterrupt:
        _error("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
