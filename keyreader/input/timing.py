"""Inter-byte delay measurement for the key report."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

LONG_PAUSE_US = 200_000
BLANK_DELAY_US = 1_000_000
BLANK_DELAY_FIELD = " " * 14


@dataclass(frozen=True)
class TimingSample:
    """Elapsed time since the previous byte.

    ``delay_us`` is ``None`` for the first byte of a session, which has no
    meaningful predecessor and is treated like an indefinitely long wait.
    """

    delay_us: int | None
    long_pause: bool


class TimingTracker:
    """Track the previous event timestamp and report elapsed delays."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._previous: float | None = None

    def sample(self, now: float | None = None) -> TimingSample:
        """Measure the delay since the last call and remember ``now``."""
        if now is None:
            now = self._clock()
        previous = self._previous
        self._previous = now
        if previous is None:
            return TimingSample(delay_us=None, long_pause=True)
        delay_us = int(1_000_000 * (now - previous))
        return TimingSample(delay_us=delay_us, long_pause=delay_us >= LONG_PAUSE_US)


def format_delay(sample: TimingSample, first_char_seen: bool) -> str:
    """Render the delay column, prefixed by a blank line after a pause."""
    prefix = "\n" if sample.long_pause and first_char_seen else ""
    if sample.delay_us is None or sample.delay_us >= BLANK_DELAY_US:
        return prefix + BLANK_DELAY_FIELD
    millis, micros = divmod(sample.delay_us, 1000)
    return f"{prefix}({millis:3d}.{micros:03d} ms)  "
