"""Session lifecycle around the input event loop.

Builds the key-name table, traps signals, enters raw mode when stdin is a
terminal, runs the loop, and guarantees the terminal is restored whichever
way the loop ends.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
import termios
from typing import TextIO

from ..input import FdInputSource, NamedSequenceTable
from .config import ReaderConfig
from .loop import LoopOutcome, LoopSettings, run_input_loop
from .signals import CancellationToken, installed_signal_handlers
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def continuous_mode_banner(pid: int) -> str:
    return (
        "\n"
        'To terminate this program type "exit" or "quit" in this window\n'
        f'or "kill {pid}" in another window\n'
        "\n"
    )


def _terminal_for(stdin_fd: int) -> TerminalController | None:
    """Return a controller for ``stdin_fd``, or ``None`` when it is not a TTY."""
    if not os.isatty(stdin_fd):
        return None
    try:
        return TerminalController(stdin_fd)
    except termios.error as exc:
        logger.warning("cannot read terminal attributes: %s", exc)
        return None


def run_session(
    continuous: bool,
    *,
    config: ReaderConfig | None = None,
    stdin_fd: int | None = None,
    out: TextIO | None = None,
    table: NamedSequenceTable | None = None,
) -> int:
    """Run one key-reading session and return the process exit status."""
    config = ReaderConfig() if config is None else config
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    out = sys.stdout if out is None else out
    if table is None:
        table = NamedSequenceTable.build(user_key_names=config.key_names, fd=stdin_fd)
    settings = LoopSettings(continuous=continuous, sequence_timeout_ms=config.sequence_timeout_ms)
    token = CancellationToken()
    terminal = _terminal_for(stdin_fd)

    with contextlib.ExitStack() as stack:
        wake_fd = stack.enter_context(installed_signal_handlers(token))
        if terminal is not None:
            stack.enter_context(terminal.raw_mode())
        else:
            logger.info("stdin is not a terminal; reading without raw mode")

        if continuous:
            out.write(continuous_mode_banner(os.getpid()))
            out.flush()
        outcome = run_input_loop(
            FdInputSource(stdin_fd, wake_fd=wake_fd),
            out,
            lookup=table.lookup,
            settings=settings,
            token=token,
        )

    logger.debug("session ended: %s", outcome.value)
    if outcome is LoopOutcome.CANCELLED:
        logger.info("session cancelled by signal")
    return 0
