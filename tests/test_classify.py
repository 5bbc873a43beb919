"""Tests for single-byte classification.

Covers every category boundary and the numeric renderings shown per byte.
Carriage return and newline must stay distinguishable in the report.
"""

from __future__ import annotations

import unittest

from keyreader.input import classify
from keyreader.input.classify import describe_byte


class DescribeByteTests(unittest.TestCase):
    def test_every_byte_gets_exactly_one_category_and_standard_numbers(self) -> None:
        categories = {
            classify.CONTROL,
            classify.SPACE,
            classify.DELETE,
            classify.NON_ASCII,
            classify.PRINTABLE,
        }
        for value in range(256):
            with self.subTest(value=value):
                description = describe_byte(value)
                self.assertIn(description.category, categories)
                self.assertEqual(int(description.dec), value)
                self.assertEqual(int(description.oct, 8), value)
                self.assertEqual(int(description.hex, 16), value)

    def test_printable_letter_renders_literally(self) -> None:
        description = describe_byte(65)
        self.assertEqual(description.category, classify.PRINTABLE)
        self.assertEqual(description.render(), "dec:  65  oct: 101  hex: 41  char: A")

    def test_newline_and_carriage_return_are_distinct(self) -> None:
        newline = describe_byte(10)
        carriage_return = describe_byte(13)

        self.assertEqual((newline.glyph, newline.alias), ("\\cJ", "\\n"))
        self.assertEqual((carriage_return.glyph, carriage_return.alias), ("\\cM", "\\r"))
        self.assertEqual(newline.render(), "dec:  10  oct: 012  hex: 0A  char: \\cJ   (or \\n)")
        self.assertEqual(carriage_return.render(), "dec:  13  oct: 015  hex: 0D  char: \\cM   (or \\r)")

    def test_control_without_alias_shows_only_caret_form(self) -> None:
        description = describe_byte(3)
        self.assertEqual(description.category, classify.CONTROL)
        self.assertIsNone(description.alias)
        self.assertEqual(description.char_text(), "\\cC")

    def test_nul_and_escape_control_forms(self) -> None:
        self.assertEqual(describe_byte(0).char_text(), "\\c@")
        self.assertEqual(describe_byte(27).char_text(), "\\c[   (or \\e)")
        self.assertEqual(describe_byte(31).char_text(), "\\c_")

    def test_space_delete_and_high_bytes_use_octal_escape_with_alias(self) -> None:
        self.assertEqual(describe_byte(32).char_text(), '\\040  (aka "space")')
        self.assertEqual(describe_byte(127).char_text(), '\\177  (aka "del")')
        self.assertEqual(describe_byte(128).char_text(), "\\200  (aka non-ASCII)")
        self.assertEqual(describe_byte(255).render(), "dec: 255  oct: 377  hex: FF  char: \\377  (aka non-ASCII)")

    def test_boundary_bytes_around_printable_range(self) -> None:
        self.assertEqual(describe_byte(33).category, classify.PRINTABLE)
        self.assertEqual(describe_byte(126).category, classify.PRINTABLE)
        self.assertEqual(describe_byte(126).glyph, "~")

    def test_out_of_range_values_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            describe_byte(256)
        with self.assertRaises(ValueError):
            describe_byte(-1)


if __name__ == "__main__":
    unittest.main()
