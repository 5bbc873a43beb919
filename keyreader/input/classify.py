"""Single-byte classification for the key report.

Maps one input byte to its display form: caret notation for control bytes,
octal escapes for space, delete and bytes with the high bit set, and the
literal character for everything else.
"""

from __future__ import annotations

from dataclasses import dataclass

# Symbolic aliases for the control bytes that have a conventional C escape.
CONTROL_ALIASES: dict[int, str] = {
    0x07: "\\a",
    0x08: "\\b",
    0x09: "\\t",
    0x0A: "\\n",
    0x0B: "\\v",
    0x0C: "\\f",
    0x0D: "\\r",
    0x1B: "\\e",
}

CONTROL = "control"
SPACE = "space"
DELETE = "delete"
NON_ASCII = "non-ascii"
PRINTABLE = "printable"


@dataclass(frozen=True)
class ByteDescription:
    """Display record for one input byte."""

    value: int
    category: str
    glyph: str
    alias: str | None = None

    @property
    def dec(self) -> str:
        return f"{self.value:3d}"

    @property
    def oct(self) -> str:
        return f"{self.value:03o}"

    @property
    def hex(self) -> str:
        return f"{self.value:02X}"

    def char_text(self) -> str:
        """Render the ``char:`` column, including any alias."""
        if self.category == CONTROL:
            if self.alias is None:
                return self.glyph
            return f"{self.glyph}   (or {self.alias})"
        if self.category in {SPACE, DELETE}:
            return f'{self.glyph}  (aka "{self.alias}")'
        if self.category == NON_ASCII:
            return f"{self.glyph}  (aka {self.alias})"
        return self.glyph

    def render(self) -> str:
        return f"dec: {self.dec}  oct: {self.oct}  hex: {self.hex}  char: {self.char_text()}"


def _octal_escape(value: int) -> str:
    return f"\\{value:03o}"


def describe_byte(value: int) -> ByteDescription:
    """Classify ``value`` (0..255) into exactly one display category."""
    if not 0 <= value <= 255:
        raise ValueError(f"byte value out of range: {value}")
    if value < 32:
        return ByteDescription(value, CONTROL, f"\\c{chr(value + 64)}", CONTROL_ALIASES.get(value))
    if value == 32:
        return ByteDescription(value, SPACE, _octal_escape(value), "space")
    if value == 0x7F:
        return ByteDescription(value, DELETE, _octal_escape(value), "del")
    if value >= 128:
        return ByteDescription(value, NON_ASCII, _octal_escape(value), "non-ASCII")
    return ByteDescription(value, PRINTABLE, chr(value))
