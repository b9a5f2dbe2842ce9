# PATH: tests/unit/test_format_money.py
"""
Unit tests for format_money module.
"""

import unittest
from decimal import Decimal

from core.format_money import format_money, format_rate


class TestFormatMoney(unittest.TestCase):
    """Tests for format_money function."""

    def test_format_string_input(self):
        self.assertEqual(format_money("18"), "18.0000")
        self.assertEqual(format_money("123.456789"), "123.4568")

    def test_format_decimal_input(self):
        self.assertEqual(format_money(Decimal("-1")), "-1.0000")
        self.assertEqual(format_money(Decimal("0")), "0.0000")

    def test_format_int_input(self):
        self.assertEqual(format_money(100), "100.0000")

    def test_format_float_input(self):
        """Formats float input correctly (legacy support)."""
        self.assertEqual(format_money(100.5), "100.5000")

    def test_round_half_up(self):
        self.assertEqual(format_money(Decimal("0.00005")), "0.0001")
        self.assertEqual(format_money(Decimal("-1.00005")), "-1.0001")

    def test_custom_decimals(self):
        self.assertEqual(format_money("1.23456", decimals=2), "1.23")
        self.assertEqual(format_money("7.6", decimals=0), "8")

    def test_none_and_empty(self):
        self.assertEqual(format_money(None), "0.0000")
        self.assertEqual(format_money(""), "0.0000")
        self.assertEqual(format_money("   "), "0.0000")

    def test_invalid_never_raises(self):
        self.assertEqual(format_money("abc"), "0.0000")

    def test_large_value_no_scientific_notation(self):
        self.assertEqual(format_money(Decimal("1E+6")), "1000000.0000")


class TestFormatRate(unittest.TestCase):

    def test_six_decimals(self):
        self.assertEqual(format_rate(Decimal("3512.1234567")), "3512.123457")
        self.assertEqual(format_rate(Decimal("1")), "1.000000")


if __name__ == "__main__":
    unittest.main()
