"""Named key-sequence table used by the sequence matcher.

Sequences come from three layers, later layers overriding earlier ones:

1. A built-in table of the sequences xterm-compatible terminals send when the
   keypad is *not* in application mode (what a raw reader actually sees).
2. The terminfo key capabilities of ``$TERM``.
3. User ``key_names`` entries from the config file.
"""

from __future__ import annotations

import curses
import logging
import os
import re
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

MAX_SEQUENCE_LENGTH = 8

# Key name -> terminfo capability name.
TERMINFO_KEY_CAPABILITIES: dict[str, str] = {
    "a1": "ka1",
    "a3": "ka3",
    "b2": "kb2",
    "backspace": "kbs",
    "beg": "kbeg",
    "btab": "kcbt",
    "c1": "kc1",
    "c3": "kc3",
    "cancel": "kcan",
    "catab": "ktbc",
    "clear": "kclr",
    "close": "kclo",
    "command": "kcmd",
    "copy": "kcpy",
    "create": "kcrt",
    "ctab": "kctab",
    "dc": "kdch1",
    "dl": "kdl1",
    "down": "kcud1",
    "eic": "krmir",
    "end": "kend",
    "enter": "kent",
    "eol": "kel",
    "eos": "ked",
    "exit": "kext",
    **{f"f{index}": f"kf{index}" for index in range(21)},
    "find": "kfnd",
    "help": "khlp",
    "home": "khome",
    "ic": "kich1",
    "il": "kil1",
    "left": "kcub1",
    "ll": "kll",
    "mark": "kmrk",
    "message": "kmsg",
    "move": "kmov",
    "next": "knxt",
    "npage": "knp",
    "open": "kopn",
    "options": "kopt",
    "ppage": "kpp",
    "previous": "kprv",
    "print": "kprt",
    "redo": "krdo",
    "reference": "kref",
    "refresh": "krfr",
    "replace": "krpl",
    "restart": "krst",
    "resume": "kres",
    "right": "kcuf1",
    "save": "ksav",
    "sdc": "kDC",
    "select": "kslt",
    "send": "kEND",
    "sf": "kind",
    "shome": "kHOM",
    "sleft": "kLFT",
    "sr": "kri",
    "sright": "kRIT",
    "stab": "khts",
    "suspend": "kspd",
    "undo": "kund",
    "up": "kcuu1",
}

DEFAULT_KEY_SEQUENCES: dict[bytes, str] = {
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1b[H": "home",
    b"\x1b[F": "end",
    b"\x1b[1~": "home",
    b"\x1b[2~": "ic",
    b"\x1b[3~": "dc",
    b"\x1b[4~": "end",
    b"\x1b[5~": "ppage",
    b"\x1b[6~": "npage",
    b"\x1b[Z": "btab",
    b"\x1bOP": "f1",
    b"\x1bOQ": "f2",
    b"\x1bOR": "f3",
    b"\x1bOS": "f4",
    b"\x1b[15~": "f5",
    b"\x1b[17~": "f6",
    b"\x1b[18~": "f7",
    b"\x1b[19~": "f8",
    b"\x1b[20~": "f9",
    b"\x1b[21~": "f10",
    b"\x1b[23~": "f11",
    b"\x1b[24~": "f12",
}

_ESCAPE_RE = re.compile(r"\\(x[0-9a-fA-F]{1,2}|[0-7]{1,3}|.)|\^(.)", re.DOTALL)
_SIMPLE_ESCAPES = {
    "e": 0x1B,
    "E": 0x1B,
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    "\\": 0x5C,
    "^": 0x5E,
}


def parse_key_sequence(text: str) -> bytes:
    """Decode a binding-style escape string (``\\e[A``, ``^[[A``) to bytes.

    Raises ``ValueError`` for unknown escapes, non-latin-1 characters, or an
    empty result.
    """
    out = bytearray()
    pos = 0
    for match in _ESCAPE_RE.finditer(text):
        out.extend(text[pos : match.start()].encode("latin-1"))
        pos = match.end()
        escape, caret = match.group(1), match.group(2)
        if caret is not None:
            if caret == "?":
                out.append(0x7F)
                continue
            code = ord(caret.upper()) - 64
            if not 0 <= code < 32:
                raise ValueError(f"invalid caret escape: ^{caret}")
            out.append(code)
        elif escape.startswith("x"):
            out.append(int(escape[1:], 16))
        elif escape.isdigit():
            code = int(escape, 8)
            if code > 255:
                raise ValueError(f"octal escape out of range: \\{escape}")
            out.append(code)
        elif escape in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[escape])
        else:
            raise ValueError(f"unknown escape: \\{escape}")
    out.extend(text[pos:].encode("latin-1"))
    if not out:
        raise ValueError("empty key sequence")
    return bytes(out)


def terminfo_key_sequences(term: str | None, fd: int) -> dict[bytes, str]:
    """Read key capabilities for ``term`` from the terminfo database.

    Returns an empty table when ``term`` is unset or unknown to terminfo.
    """
    if not term:
        return {}
    try:
        curses.setupterm(term, fd)
    except curses.error as exc:
        logger.debug("no terminfo entry for %r: %s", term, exc)
        return {}
    table: dict[bytes, str] = {}
    for name, capability in TERMINFO_KEY_CAPABILITIES.items():
        seq = curses.tigetstr(capability)
        if seq and len(seq) <= MAX_SEQUENCE_LENGTH:
            table.setdefault(seq, name)
    return table


class NamedSequenceTable:
    """Read-only mapping from byte sequence to human-readable key name."""

    def __init__(self, sequences: Mapping[bytes, str] | None = None) -> None:
        self._by_sequence = dict(sequences or {})

    def __len__(self) -> int:
        return len(self._by_sequence)

    def __contains__(self, seq: object) -> bool:
        return seq in self._by_sequence

    def lookup(self, seq: bytes) -> str | None:
        return self._by_sequence.get(seq)

    def items(self) -> Iterable[tuple[bytes, str]]:
        return self._by_sequence.items()

    @classmethod
    def build(
        cls,
        *,
        term: str | None = None,
        fd: int = 1,
        user_key_names: Mapping[str, bytes] | None = None,
    ) -> NamedSequenceTable:
        """Layer defaults, terminfo, and user entries into one table."""
        if term is None:
            term = os.environ.get("TERM")
        sequences = dict(DEFAULT_KEY_SEQUENCES)
        sequences.update(terminfo_key_sequences(term, fd))
        for name, seq in (user_key_names or {}).items():
            if 0 < len(seq) <= MAX_SEQUENCE_LENGTH:
                sequences[seq] = name
        logger.debug("named sequence table has %d entries", len(sequences))
        return cls(sequences)
