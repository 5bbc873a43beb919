"""Terminal control helpers for the key-reading session.

Owns the raw-mode lifecycle: capture the tty attributes and foreground
process group up front, switch to byte-at-a-time input with every input
translation disabled, and restore both on the way out.
"""

from __future__ import annotations

import contextlib
import os
import signal
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions for the key reader."""

    def __init__(self, stdin_fd: int) -> None:
        """Capture tty state for ``stdin_fd``; raises ``termios.error`` off a TTY."""
        self.stdin_fd = stdin_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        try:
            self._saved_pgrp: int | None = os.tcgetpgrp(stdin_fd)
        except OSError:
            self._saved_pgrp = None

    @property
    def saved_tty_state(self) -> list:
        return [list(item) if isinstance(item, list) else item for item in self._saved_tty_state]

    def raw_attributes(self) -> list:
        """Return the raw-mode attribute list derived from the saved state.

        Canonical mode, echo, signal keys, extended input processing, CR/NL
        translation and flow control are all turned off so every key arrives
        as typed. Output post-processing stays on so report lines render.
        """
        mode = self.saved_tty_state
        mode[tty.IFLAG] &= ~(termios.ICRNL | termios.INLCR | termios.IGNCR | termios.IXON)
        mode[tty.LFLAG] &= ~(termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN)
        mode[tty.CC][termios.VMIN] = 1
        mode[tty.CC][termios.VTIME] = 0
        return mode

    def enable_raw_mode(self) -> None:
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self.raw_attributes())

    def restore_mode(self) -> None:
        """Put back the exact attributes and foreground group captured at init."""
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self._restore_foreground_process_group()

    def _restore_foreground_process_group(self) -> None:
        if self._saved_pgrp is None:
            return
        try:
            if os.tcgetpgrp(self.stdin_fd) == self._saved_pgrp:
                return
        except OSError:
            return
        # tcsetpgrp from a background group raises SIGTTOU unless it is ignored.
        previous = signal.signal(signal.SIGTTOU, signal.SIG_IGN)
        try:
            os.tcsetpgrp(self.stdin_fd, self._saved_pgrp)
        finally:
            signal.signal(signal.SIGTTOU, previous)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with raw-mode enter/restore calls."""
        try:
            self.enable_raw_mode()
            yield
        finally:
            self.restore_mode()
