# PATH: core/format_money.py
"""
Safe money formatting utilities for XARB.

No float money: all values are str, int or Decimal. Formatting is for
display only; nothing formatted here is fed back into computation.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union


def format_money(value: Union[str, Decimal, int, None], decimals: int = 6) -> str:
    """
    Safely format a money value to string with specified decimal places.

    Uses ROUND_HALF_UP (0.005 -> 0.01 with 2 decimals).
    Never raises on valid numeric input.

    Example:
        >>> format_money("123.45")
        '123.450000'
        >>> format_money(None)
        '0.000000'
    """
    zero = f"0.{'0' * decimals}" if decimals > 0 else "0"
    if value is None:
        return zero

    try:
        if isinstance(value, str):
            if not value.strip():
                return zero
            dec_value = Decimal(value)
        elif isinstance(value, Decimal):
            dec_value = value
        elif isinstance(value, bool):
            # bool before int (bool is subclass of int)
            dec_value = Decimal(1 if value else 0)
        else:
            dec_value = Decimal(str(value))

        # Base-unit amounts of 18-decimal tokens need more than the default 28 digits
        with localcontext() as ctx:
            ctx.prec = 80
            quantize_str = "0." + "0" * decimals if decimals > 0 else "0"
            rounded = dec_value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

        return f"{rounded:.{decimals}f}"

    except (InvalidOperation, ValueError, TypeError):
        return zero


def format_units(amount: Union[str, int], decimals: int, symbol: str) -> str:
    """
    Render a base-unit amount for humans, keeping the raw value visible.

    Example:
        >>> format_units("1500000", 6, "USDC")
        '1.500000 USDC (1500000 raw)'
    """
    with localcontext() as ctx:
        ctx.prec = 80
        try:
            human = Decimal(str(amount)).scaleb(-decimals)
        except (InvalidOperation, ValueError):
            return f"{amount} {symbol} (unparseable)"
    return f"{format_money(human, decimals)} {symbol} ({amount} raw)"


def format_price(value: Union[str, Decimal, None]) -> str:
    """Format a USDC-per-token price (6 places)."""
    return format_money(value, decimals=6)


def format_pct(value: Union[str, Decimal, int, None]) -> str:
    """
    Format percentage value.

    Returns:
        Formatted string like "0.1050"
    """
    return format_money(value, decimals=4)
