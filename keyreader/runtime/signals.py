"""Signal handling for the key-reading session.

Handlers never touch the terminal or stdout directly. They record the signal
on a ``CancellationToken`` and the event loop reports it at the next
iteration boundary. A ``set_wakeup_fd`` pipe makes a blocked ``select()``
return so that boundary is reached promptly.
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
from collections import deque
from collections.abc import Iterator

logger = logging.getLogger(__name__)

TERMINATING_SIGNALS = frozenset(
    {signal.SIGINT, signal.SIGTERM, signal.SIGABRT, signal.SIGSEGV}
)
# Classic signal numbers; anything the OS refuses to trap is skipped.
CLASSIC_SIGNAL_RANGE = range(1, 32)


def signal_name(signo: int) -> str:
    try:
        return signal.Signals(signo).name
    except ValueError:
        return f"SIG{signo}"


class CancellationToken:
    """Process-wide "keep running" flag plus signals awaiting a report."""

    def __init__(self) -> None:
        self.keep_running = True
        self.pending_signals: deque[int] = deque()

    def notify(self, signo: int) -> None:
        self.pending_signals.append(signo)
        if signo in TERMINATING_SIGNALS:
            self.keep_running = False

    def cancel(self) -> None:
        self.keep_running = False

    def drain_notices(self) -> list[str]:
        """Pop pending signals and return one notice line per signal."""
        notices = []
        while self.pending_signals:
            signo = self.pending_signals.popleft()
            notices.append(f"\nSignal #{signo} ({signal_name(signo)}) received\n\n")
        return notices


def _catchable_signals() -> list[int]:
    valid = signal.valid_signals()
    blocked = {signal.SIGKILL, signal.SIGSTOP}
    return [signo for signo in CLASSIC_SIGNAL_RANGE if signo in valid and signo not in blocked]


@contextlib.contextmanager
def installed_signal_handlers(token: CancellationToken) -> Iterator[int]:
    """Route every catchable classic signal to ``token`` for the block's duration.

    Yields the read end of the wake-up pipe; previous handlers and the
    previous wake-up descriptor are restored on exit.
    """

    def handler(signo, _frame) -> None:
        token.notify(signo)

    read_fd, write_fd = os.pipe()
    os.set_blocking(read_fd, False)
    os.set_blocking(write_fd, False)
    previous_handlers: dict[int, object] = {}
    previous_wakeup_fd = signal.set_wakeup_fd(write_fd)
    try:
        for signo in _catchable_signals():
            # None means a handler installed outside Python (e.g. faulthandler);
            # it could not be put back afterwards, so leave it alone.
            if signal.getsignal(signo) is None:
                logger.debug("leaving foreign handler for %s in place", signal_name(signo))
                continue
            try:
                previous_handlers[signo] = signal.signal(signo, handler)
            except (OSError, ValueError) as exc:
                logger.debug("cannot trap %s: %s", signal_name(signo), exc)
        yield read_fd
    finally:
        for signo, previous in previous_handlers.items():
            signal.signal(signo, previous)
        signal.set_wakeup_fd(previous_wakeup_fd)
        os.close(read_fd)
        os.close(write_fd)
