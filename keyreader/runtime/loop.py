"""Main input event loop for the key reader.

Pulls one byte per iteration, runs it through timing, classification and
both sequence matchers, writes the report, and decides whether to continue.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TextIO

from ..input import (
    DEFAULT_SEQUENCE_TIMEOUT_MS,
    INTERRUPTED,
    ExitPhraseMatcher,
    NamedSequenceMatcher,
    TimingTracker,
    describe_byte,
    format_delay,
)
from .signals import CancellationToken

logger = logging.getLogger(__name__)

HEADER = "Press a key\n\n"
FAREWELL = "\nExiting at your request.\n"


class InputSource(Protocol):
    def read(self, timeout_ms: int | None = None) -> Any: ...


class LoopOutcome(enum.Enum):
    EXIT_PHRASE = "exit-phrase"
    END_OF_INPUT = "end-of-input"
    ANOMALY = "anomaly"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class LoopSettings:
    """Per-session constants for ``run_input_loop``."""

    continuous: bool = False
    sequence_timeout_ms: int = DEFAULT_SEQUENCE_TIMEOUT_MS


def _emit(out: TextIO, text: str) -> None:
    out.write(text)
    out.flush()


def run_input_loop(
    source: InputSource,
    out: TextIO,
    *,
    lookup: Callable[[bytes], str | None],
    settings: LoopSettings = LoopSettings(),
    token: CancellationToken | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> LoopOutcome:
    """Read and report bytes until exit phrase, end of input, anomaly, or cancel.

    The first read always blocks. After that, continuous mode keeps blocking
    while single-key mode waits only ``sequence_timeout_ms`` for the rest of
    the current key, treating silence as end of input.
    """
    if token is None:
        token = CancellationToken()
    timing = TimingTracker(clock)
    exit_matcher = ExitPhraseMatcher()
    sequence_matcher = NamedSequenceMatcher(lookup)
    first_char_seen = False

    _emit(out, HEADER)
    while True:
        for notice in token.drain_notices():
            _emit(out, notice)
        if not token.keep_running:
            return LoopOutcome.CANCELLED

        blocking = settings.continuous or not first_char_seen
        unit = source.read(None if blocking else settings.sequence_timeout_ms)
        if unit is INTERRUPTED:
            continue
        if unit is None:
            return LoopOutcome.END_OF_INPUT
        if not 0 <= unit <= 255:
            _emit(out, f"\nUnexpected wide character from input source: {unit} / {unit:#x}\n")
            logger.error("input source produced out-of-range unit %r", unit)
            return LoopOutcome.ANOMALY

        sample = timing.sample()
        description = describe_byte(unit)
        should_exit = exit_matcher.feed(unit)
        key_name = sequence_matcher.feed(unit)
        logger.debug("byte %#04x delay_us=%s name=%s", unit, sample.delay_us, key_name)

        report = format_delay(sample, first_char_seen) + description.render() + "\n"
        if key_name is not None:
            report += f'Sequence matches bind key name "{key_name}"\n'
        _emit(out, report)
        first_char_seen = True

        if should_exit:
            _emit(out, FAREWELL)
            return LoopOutcome.EXIT_PHRASE
