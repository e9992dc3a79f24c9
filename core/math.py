"""
core/math.py - Mathematical utilities.

CRITICAL: No float allowed in quoting/price/PnL.
All monetary values use int (base units), digit strings or Decimal.
"""

from decimal import Decimal, ROUND_DOWN, InvalidOperation

from core.constants import ErrorCode
from core.exceptions import ValidationError


# =============================================================================
# SAFE CONVERSIONS (NO FLOAT)
# =============================================================================

def safe_decimal(value: int | str | Decimal) -> Decimal:
    """
    Safely convert value to Decimal.

    Raises ValidationError if float is passed or conversion fails.
    """
    if isinstance(value, float):
        raise ValidationError(
            "Float values are not allowed. Use int, str, or Decimal.",
            {"value": value, "type": type(value).__name__},
        )

    try:
        result = Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(
            f"Cannot convert to Decimal: {value}",
            {"value": value, "type": type(value).__name__, "error": str(e)},
        )
    if not result.is_finite():
        raise ValidationError(f"Non-finite value: {value}", {"value": str(value)})
    return result


def safe_int(value: int | str | Decimal) -> int:
    """
    Safely convert value to int (base units).

    Raises ValidationError if float is passed or conversion fails.
    Decimals are truncated toward zero.
    """
    if isinstance(value, float):
        raise ValidationError(
            "Float values are not allowed. Use int, str, or Decimal.",
            {"value": value, "type": type(value).__name__},
        )

    try:
        if isinstance(value, Decimal):
            return int(value.to_integral_value(rounding=ROUND_DOWN))
        return int(value)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise ValidationError(
            f"Cannot convert to int: {value}",
            {"value": value, "type": type(value).__name__, "error": str(e)},
        )


def parse_base_units(value: int | str, field: str = "amount") -> str:
    """
    Canonicalize a base-unit amount into a non-negative digit string.

    Accepts int or digit string (venues send amounts as JSON strings).
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValidationError(
            f"{field} must be an integer amount, got {type(value).__name__}",
            {"field": field, "value": value},
            code=ErrorCode.VALIDATION_INVALID_AMOUNT,
        )
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(
                f"{field} must be non-negative: {value}",
                {"field": field, "value": value},
                code=ErrorCode.VALIDATION_INVALID_AMOUNT,
            )
        return str(value)

    text = str(value).strip()
    if not text or not text.isascii() or not text.isdigit():
        raise ValidationError(
            f"{field} is not a base-unit integer: {value!r}",
            {"field": field, "value": value},
            code=ErrorCode.VALIDATION_INVALID_AMOUNT,
        )
    return text

