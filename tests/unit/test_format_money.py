# PATH: tests/unit/test_format_money.py
"""
Unit tests for format_money module.

Money and base-unit formatting for display.
"""

import unittest
from decimal import Decimal

from core.format_money import (
    format_money,
    format_pct,
    format_price,
    format_units,
)


class TestFormatMoney(unittest.TestCase):
    """Tests for format_money function."""

    def test_format_string_input(self):
        """Formats string input correctly."""
        self.assertEqual(format_money("123.456789"), "123.456789")
        self.assertEqual(format_money("0"), "0.000000")
        self.assertEqual(format_money("1000"), "1000.000000")

    def test_format_decimal_input(self):
        """Formats Decimal input correctly."""
        self.assertEqual(format_money(Decimal("123.456789")), "123.456789")
        self.assertEqual(format_money(Decimal("0")), "0.000000")

    def test_format_int_input(self):
        """Formats int input correctly."""
        self.assertEqual(format_money(100), "100.000000")

    def test_format_none_input(self):
        """Returns zero for None input."""
        self.assertEqual(format_money(None), "0.000000")

    def test_format_empty_string(self):
        """Returns zero for empty string."""
        self.assertEqual(format_money(""), "0.000000")
        self.assertEqual(format_money("   "), "0.000000")

    def test_format_invalid_string(self):
        """Returns zero for invalid string."""
        self.assertEqual(format_money("not_a_number"), "0.000000")

    def test_format_custom_decimals(self):
        """Respects custom decimal places."""
        self.assertEqual(format_money("123.456", decimals=2), "123.46")
        self.assertEqual(format_money("123.456", decimals=0), "123")

    def test_rounding_half_up(self):
        """Uses ROUND_HALF_UP rounding."""
        self.assertEqual(format_money(Decimal("0.005"), decimals=2), "0.01")
        self.assertEqual(format_money(Decimal("0.025"), decimals=2), "0.03")
        self.assertEqual(format_money(Decimal("0.004"), decimals=2), "0.00")

    def test_negative_numbers(self):
        """Handles negative numbers (losses) correctly."""
        self.assertEqual(format_money("-12.5"), "-12.500000")

    def test_eighteen_decimal_precision(self):
        """Values with more than 28 significant digits still format."""
        self.assertEqual(
            format_money(Decimal("123456789012.123456789012345678"), decimals=18),
            "123456789012.123456789012345678",
        )


class TestFormatUnits(unittest.TestCase):
    """Tests for format_units function."""

    def test_usdc(self):
        self.assertEqual(format_units("1500000", 6, "USDC"), "1.500000 USDC (1500000 raw)")

    def test_int_amount(self):
        self.assertEqual(format_units(150000000, 8, "TKN"), "1.50000000 TKN (150000000 raw)")

    def test_eighteen_decimals(self):
        self.assertEqual(
            format_units("1000000000000000001", 18, "WETH"),
            "1.000000000000000001 WETH (1000000000000000001 raw)",
        )

    def test_unparseable(self):
        self.assertEqual(format_units("abc", 6, "USDC"), "abc USDC (unparseable)")


class TestFormatPrice(unittest.TestCase):
    """Tests for format_price function."""

    def test_price(self):
        self.assertEqual(format_price(Decimal("666.6666666666666666666666667")), "666.666667")

    def test_missing_price(self):
        self.assertEqual(format_price(None), "0.000000")


class TestFormatPct(unittest.TestCase):
    """Tests for format_pct function."""

    def test_format_pct(self):
        """Formats percentage with 4 decimals."""
        self.assertEqual(format_pct("0.1234"), "0.1234")
        self.assertEqual(format_pct("1.23456"), "1.2346")
        self.assertEqual(format_pct(Decimal("0.00005")), "0.0001")


if __name__ == "__main__":
    unittest.main()
