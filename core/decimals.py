"""
core/decimals.py - Decimal precision normalization between tokens.

Converts base-unit amounts between precisions by editing the digit string.
Amounts never pass through float: an 18-decimal token balance easily
exceeds 2**53.

Scaling down truncates toward zero by default. This loses the dropped
digits on purpose and matches how evaluated amounts have always been
bridged between chains; HALF_UP and CEILING are opt-in.
"""

from decimal import Decimal, localcontext

from core.constants import ErrorCode, RoundingMode
from core.exceptions import ValidationError
from core.math import parse_base_units, safe_decimal


def _check_decimals(*values: int) -> None:
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(
                f"Decimals must be a non-negative integer, got {value!r}",
                {"decimals": value},
                code=ErrorCode.VALIDATION_INVALID_FIELD,
            )


def convert_decimals(
    amount: int | str,
    from_decimals: int,
    to_decimals: int,
    rounding: RoundingMode = RoundingMode.TRUNCATE,
) -> str:
    """
    Re-express a base-unit amount in another token's precision.

    Args:
        amount: Base-unit amount (int or digit string)
        from_decimals: Precision the amount is expressed in
        to_decimals: Target precision
        rounding: Applied only when scaling down

    Returns:
        Base-unit digit string in to_decimals precision

    Example:
        >>> convert_decimals("123", 2, 5)
        '123000'
        >>> convert_decimals("123456", 5, 2)
        '123'
        >>> convert_decimals("5", 3, 0)
        '0'
    """
    _check_decimals(from_decimals, to_decimals)

    canonical = parse_base_units(amount)
    if from_decimals == to_decimals:
        return amount if isinstance(amount, str) else canonical

    digits = canonical.lstrip("0") or "0"

    if from_decimals < to_decimals:
        if digits == "0":
            return "0"
        return digits + "0" * (to_decimals - from_decimals)

    drop = from_decimals - to_decimals
    kept = digits[:-drop] if drop < len(digits) else ""
    dropped = digits[-drop:] if drop < len(digits) else digits.zfill(drop)

    result = int(kept) if kept else 0
    if rounding == RoundingMode.HALF_UP:
        if int(dropped) * 2 >= 10 ** drop:
            result += 1
    elif rounding == RoundingMode.CEILING:
        if int(dropped) > 0:
            result += 1

    return str(result)


def to_human(amount: int | str, decimals: int) -> Decimal:
    """
    Convert a base-unit amount to whole-token units.

    Example: to_human("1500000", 6) -> Decimal('1.500000')
    """
    _check_decimals(decimals)
    digits = parse_base_units(amount)
    with localcontext() as ctx:
        ctx.prec = max(80, len(digits) + decimals + 2)
        return Decimal(digits).scaleb(-decimals)


def to_base_units(human: int | str | Decimal, decimals: int) -> str:
    """
    Convert a whole-token amount to a base-unit digit string.

    Digits beyond the token's precision are truncated.

    Example: to_base_units("1000", 6) -> '1000000000'
    """
    _check_decimals(decimals)
    value = safe_decimal(human)
    if value < 0:
        raise ValidationError(
            f"Amount must be non-negative: {human}",
            {"amount": str(human)},
            code=ErrorCode.VALIDATION_INVALID_AMOUNT,
        )
    with localcontext() as ctx:
        ctx.prec = 80
        scaled = value.scaleb(decimals)
        return str(int(scaled))
