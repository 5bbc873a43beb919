"""Low-level terminal input source.

Reads one byte at a time from a file descriptor. A read may block forever,
or wait at most ``timeout_ms``; an optional wake-up descriptor (fed by
``signal.set_wakeup_fd``) lets a signal interrupt a pending wait.
"""

from __future__ import annotations

import os
import select

DEFAULT_SEQUENCE_TIMEOUT_MS = 300


class _Interrupted:
    def __repr__(self) -> str:
        return "INTERRUPTED"


# Returned by ``read`` when the wake-up descriptor fired before any input.
INTERRUPTED = _Interrupted()


class FdInputSource:
    """Byte source over ``fd`` returning ``int``, ``None`` (EOF), or ``INTERRUPTED``."""

    def __init__(self, fd: int, wake_fd: int | None = None) -> None:
        self.fd = fd
        self.wake_fd = wake_fd

    def _drain_wake_fd(self) -> None:
        assert self.wake_fd is not None
        try:
            while os.read(self.wake_fd, 512):
                pass
        except BlockingIOError:
            pass

    def read(self, timeout_ms: int | None = None) -> int | None | _Interrupted:
        """Return the next byte value.

        ``timeout_ms=None`` blocks until input, EOF, or a wake-up. An expired
        timeout is reported as end of input.
        """
        watched = [self.fd] if self.wake_fd is None else [self.fd, self.wake_fd]
        timeout = None if timeout_ms is None else max(0.0, timeout_ms / 1000.0)
        ready, _, _ = select.select(watched, [], [], timeout)
        if not ready:
            return None
        if self.wake_fd is not None and self.wake_fd in ready:
            self._drain_wake_fd()
            if self.fd not in ready:
                return INTERRUPTED
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch[0]
