"""Tests for the input event loop.

Drive ``run_input_loop`` with scripted byte sources and a fake clock, and
check the report text, read blocking policy, and how each session ends.
"""

from __future__ import annotations

import io
import signal
import unittest

from keyreader.input.reader import INTERRUPTED
from keyreader.runtime.loop import FAREWELL, HEADER, LoopOutcome, LoopSettings, run_input_loop
from keyreader.runtime.signals import CancellationToken


class ScriptedSource:
    """Input source replaying ``units`` and recording each read's timeout."""

    def __init__(self, units, on_read=None) -> None:
        self._units = list(units)
        self.timeouts: list[int | None] = []
        self._on_read = on_read

    def read(self, timeout_ms=None):
        self.timeouts.append(timeout_ms)
        if self._on_read is not None:
            self._on_read(len(self.timeouts))
        if not self._units:
            return None
        return self._units.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._units)


def _clock(times):
    ticks = iter(times)
    return lambda: next(ticks)


def _no_names(_seq: bytes) -> None:
    return None


class RunInputLoopTests(unittest.TestCase):
    def _run(self, source, *, continuous=True, lookup=_no_names, clock_times=None, token=None):
        out = io.StringIO()
        times = clock_times if clock_times is not None else [float(i) for i in range(1000)]
        outcome = run_input_loop(
            source,
            out,
            lookup=lookup,
            settings=LoopSettings(continuous=continuous, sequence_timeout_ms=50),
            token=token,
            clock=_clock(times),
        )
        return outcome, out.getvalue()

    def test_exit_phrase_ends_session_with_farewell(self) -> None:
        source = ScriptedSource(b"exitmore")
        outcome, text = self._run(source)

        self.assertIs(outcome, LoopOutcome.EXIT_PHRASE)
        self.assertTrue(text.startswith(HEADER))
        self.assertTrue(text.endswith(FAREWELL))
        self.assertEqual(text.count("dec: "), 4)
        self.assertEqual(source.remaining, 4)

    def test_quit_inside_other_input_ends_session(self) -> None:
        outcome, text = self._run(ScriptedSource(b"\x1b[Aquit"))
        self.assertIs(outcome, LoopOutcome.EXIT_PHRASE)
        self.assertEqual(text.count("dec: "), 7)

    def test_end_of_input_ends_without_further_report(self) -> None:
        outcome, text = self._run(ScriptedSource(b"ab"))
        self.assertIs(outcome, LoopOutcome.END_OF_INPUT)
        self.assertEqual(text.count("dec: "), 2)
        self.assertNotIn("Exiting", text)

    def test_out_of_range_unit_reports_anomaly_and_stops(self) -> None:
        source = ScriptedSource([ord("a"), 300, ord("b")])
        outcome, text = self._run(source)

        self.assertIs(outcome, LoopOutcome.ANOMALY)
        self.assertIn("\nUnexpected wide character from input source: 300 / 0x12c\n", text)
        self.assertEqual(text.count("dec: "), 1)
        self.assertEqual(source.remaining, 1)

    def test_report_lines_combine_delay_and_classification(self) -> None:
        _outcome, text = self._run(ScriptedSource(b"\r\n"), clock_times=[0.0, 0.000125])
        lines = text[len(HEADER) :].splitlines()

        self.assertEqual(lines[0], "              dec:  13  oct: 015  hex: 0D  char: \\cM   (or \\r)")
        self.assertEqual(lines[1], "(  0.125 ms)  dec:  10  oct: 012  hex: 0A  char: \\cJ   (or \\n)")

    def test_long_pause_inserts_blank_line_between_reports(self) -> None:
        _outcome, text = self._run(ScriptedSource(b"ab"), clock_times=[0.0, 0.5])
        lines = text[len(HEADER) :].splitlines()
        self.assertEqual(lines[1], "")
        self.assertTrue(lines[2].startswith("(500.000 ms)  dec:  98"))

    def test_named_sequence_reported_on_following_line(self) -> None:
        table = {b"\x1b[A": "up"}
        _outcome, text = self._run(ScriptedSource(b"\x1b[A"), lookup=table.get)
        self.assertTrue(text.endswith('char: A\nSequence matches bind key name "up"\n'))
        self.assertEqual(text.count("Sequence matches"), 1)

    def test_continuous_mode_always_blocks(self) -> None:
        source = ScriptedSource(b"abc")
        self._run(source, continuous=True)
        self.assertEqual(source.timeouts, [None, None, None, None])

    def test_single_key_mode_blocks_only_for_first_byte(self) -> None:
        source = ScriptedSource(b"\x1bOP")
        outcome, text = self._run(source, continuous=False)

        self.assertIs(outcome, LoopOutcome.END_OF_INPUT)
        self.assertEqual(source.timeouts, [None, 50, 50, 50])
        self.assertEqual(text.count("dec: "), 3)

    def test_interrupt_reports_pending_signal_and_continues(self) -> None:
        token = CancellationToken()

        def on_read(count: int) -> None:
            if count == 2:
                token.notify(signal.SIGWINCH)

        source = ScriptedSource([ord("a"), INTERRUPTED, ord("b")], on_read=on_read)
        outcome, text = self._run(source, token=token)

        self.assertIs(outcome, LoopOutcome.END_OF_INPUT)
        self.assertIn(f"\nSignal #{int(signal.SIGWINCH)} (SIGWINCH) received\n\n", text)
        self.assertEqual(text.count("dec: "), 2)

    def test_terminating_signal_stops_at_iteration_boundary(self) -> None:
        token = CancellationToken()

        def on_read(count: int) -> None:
            if count == 2:
                token.notify(signal.SIGTERM)

        source = ScriptedSource([ord("a"), INTERRUPTED, ord("b")], on_read=on_read)
        outcome, text = self._run(source, token=token)

        self.assertIs(outcome, LoopOutcome.CANCELLED)
        self.assertIn("(SIGTERM) received", text)
        self.assertEqual(text.count("dec: "), 1)
        self.assertEqual(source.remaining, 1)

    def test_cancelled_token_ends_before_first_read(self) -> None:
        token = CancellationToken()
        token.cancel()
        source = ScriptedSource(b"a")
        outcome, text = self._run(source, token=token)

        self.assertIs(outcome, LoopOutcome.CANCELLED)
        self.assertEqual(text, HEADER)
        self.assertEqual(source.timeouts, [])


if __name__ == "__main__":
    unittest.main()
