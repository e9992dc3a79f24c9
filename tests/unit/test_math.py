"""
tests/unit/test_math.py - Tests for core/math.py

Critical tests for:
- No-float enforcement
- Base-unit amount parsing
"""

import pytest
from decimal import Decimal

from core.constants import ErrorCode
from core.exceptions import ValidationError
from core.math import parse_base_units, safe_decimal, safe_int


class TestNoFloatEnforcement:
    """Test that float values are rejected."""

    def test_safe_decimal_rejects_float(self):
        """safe_decimal must reject float input."""
        with pytest.raises(ValidationError) as exc_info:
            safe_decimal(1.5)
        assert "Float values are not allowed" in str(exc_info.value)

    def test_safe_decimal_accepts_int(self):
        assert safe_decimal(100) == Decimal("100")

    def test_safe_decimal_accepts_string(self):
        assert safe_decimal("0.000123") == Decimal("0.000123")

    def test_safe_decimal_rejects_garbage(self):
        with pytest.raises(ValidationError):
            safe_decimal("not-a-number")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
    def test_safe_decimal_rejects_non_finite(self, value):
        with pytest.raises(ValidationError):
            safe_decimal(value)

    def test_safe_int_rejects_float(self):
        with pytest.raises(ValidationError):
            safe_int(2.0)

    def test_safe_int_truncates_decimal(self):
        assert safe_int(Decimal("9.99")) == 9
        assert safe_int(Decimal("-9.99")) == -9

    def test_safe_int_parses_string(self):
        assert safe_int("1000000") == 1_000_000


class TestParseBaseUnits:
    """Canonical digit strings for venue amounts."""

    def test_int_becomes_string(self):
        assert parse_base_units(1500000) == "1500000"

    def test_string_is_stripped(self):
        assert parse_base_units("  42 ") == "42"

    def test_zero_allowed(self):
        assert parse_base_units("0") == "0"

    def test_large_amount_kept_exact(self):
        amount = "123456789012345678901234567890"
        assert parse_base_units(amount) == amount

    @pytest.mark.parametrize("value", ["-1", "1.5", "1e18", "", "0x10", "١٢"])
    def test_rejects_non_digit_strings(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_base_units(value, field="buyAmount")
        assert exc_info.value.code == ErrorCode.VALIDATION_INVALID_AMOUNT
        assert exc_info.value.details["field"] == "buyAmount"

    @pytest.mark.parametrize("value", [-5, 1.0, True])
    def test_rejects_negative_float_and_bool(self, value):
        with pytest.raises(ValidationError):
            parse_base_units(value)
