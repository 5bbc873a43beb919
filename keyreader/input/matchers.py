"""Sliding-window matchers over the most recent input bytes.

Both matchers keep their own fixed-capacity window and shift every byte in,
oldest byte out. The exit matcher compares its four bytes literally; the
named-sequence matcher looks up suffixes of its eight bytes, longest first.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

EXIT_PHRASES: tuple[bytes, ...] = (b"exit", b"quit")
EXIT_WINDOW_SIZE = 4
SEQUENCE_WINDOW_SIZE = 8


class ByteWindow:
    """Fixed-capacity, zero-filled window of the most recent bytes."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("window capacity must be >= 1")
        self._buf = bytearray(capacity)

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def shift_in(self, value: int) -> None:
        """Discard the oldest byte and append ``value``."""
        self._buf[:-1] = self._buf[1:]
        self._buf[-1] = value

    def suffix(self, length: int) -> bytes:
        return bytes(self._buf[len(self._buf) - length :])

    def contents(self) -> bytes:
        return bytes(self._buf)


class ExitPhraseMatcher:
    """Detect the user typing ``exit`` or ``quit`` in the raw byte stream."""

    def __init__(self, phrases: Iterable[bytes] = EXIT_PHRASES) -> None:
        self._phrases = frozenset(phrases)
        self._window = ByteWindow(EXIT_WINDOW_SIZE)

    def feed(self, value: int) -> bool:
        self._window.shift_in(value)
        return self._window.contents() in self._phrases


class NamedSequenceMatcher:
    """Report the longest window suffix registered in a key-name table.

    ``lookup`` is any callable returning the registered name for a byte
    sequence, or ``None``. The matcher never learns how the table is built.
    """

    def __init__(self, lookup: Callable[[bytes], str | None]) -> None:
        self._lookup = lookup
        self._window = ByteWindow(SEQUENCE_WINDOW_SIZE)

    def feed(self, value: int) -> str | None:
        self._window.shift_in(value)
        for length in range(self._window.capacity, 0, -1):
            name = self._lookup(self._window.suffix(length))
            if name is not None:
                return name
        return None
