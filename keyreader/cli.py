"""Command-line front door for keyreader.

Parses CLI options, configures diagnostic logging, loads the config file,
then dispatches into the key-reading session.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .debug import DEFAULT_DEBUG_LEVEL, DEFAULT_STACK_FRAMES, configure_logging
from .runtime import run_session
from .runtime.config import load_config


class UsageError(Exception):
    """Raised for malformed command lines; reported on stderr with status 1."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def _bounded_int(flag: str, low: int, high: int):
    """Build an argparse type accepting integers in ``[low, high]``."""

    def parse(value: str) -> int:
        try:
            parsed = int(value, 10)
        except ValueError:
            parsed = None
        if parsed is None or not low <= parsed <= high:
            raise UsageError(f"Invalid value '{value}' for {flag} flag")
        return parsed

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="keyreader",
        description=(
            "Print information about each key pressed: byte values, control-character "
            "names, delay since the previous byte, and matching key names. "
            'Type "exit" or "quit" to terminate.'
        ),
    )
    parser.add_argument(
        "-c",
        "--continuous",
        action="store_true",
        default=None,
        help="Keep reading keys until exit/quit is typed instead of stopping after one key.",
    )
    parser.add_argument(
        "-d",
        "--debug-level",
        type=_bounded_int("debug-level", 0, 10),
        default=DEFAULT_DEBUG_LEVEL,
        metavar="LEVEL",
        help=f"Diagnostic verbosity, 0..10 (default: {DEFAULT_DEBUG_LEVEL}).",
    )
    parser.add_argument(
        "-D",
        "--debug-stack-frames",
        type=_bounded_int("debug-stack-frames", 1, 128),
        default=DEFAULT_STACK_FRAMES,
        metavar="FRAMES",
        help=f"Stack frames shown with error diagnostics, 1..128 (default: {DEFAULT_STACK_FRAMES}).",
    )
    parser.add_argument("extra", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse CLI arguments and run a key-reading session.

    Returns the process exit status: 0 after a normal session, 1 for any
    command-line error.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    if args.extra:
        print(f"Expected no arguments, got {len(args.extra)}", file=sys.stderr)
        return 1

    configure_logging(args.debug_level, args.debug_stack_frames)
    config = load_config()
    continuous = config.continuous if args.continuous is None else args.continuous
    return run_session(continuous, config=config)


if __name__ == "__main__":
    raise SystemExit(main())
