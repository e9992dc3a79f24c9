"""
core/gas.py - Gas cost normalization into the quote currency (USDC).

cost_native = gas_units * gas_price          (wei)
cost_eth    = cost_native / 10**18
cost_usdc   = cost_eth * native_to_quote_rate
"""

from decimal import Decimal, localcontext

from core.constants import WEI_PER_ETH, ErrorCode
from core.exceptions import QuoteFetchError
from core.math import safe_decimal, safe_int
from core.models import GasDetails, Quote


def gas_cost_in_quote_currency(
    gas_units: int | str,
    gas_price_native: int | str,
    native_to_quote_rate: int | str | Decimal,
) -> Decimal:
    """
    Calculate gas cost in quote-currency units (e.g., USDC).

    Args:
        gas_units: Estimated gas units
        gas_price_native: Gas price in the native smallest unit (wei)
        native_to_quote_rate: Quote-currency value of one native unit (ETH)

    Returns:
        Gas cost as Decimal (e.g., 0.50 USDC)
    """
    units = safe_int(gas_units)
    price = safe_int(gas_price_native)
    rate = safe_decimal(native_to_quote_rate)

    with localcontext() as ctx:
        ctx.prec = 60
        cost_eth = Decimal(units * price) / WEI_PER_ETH
        return cost_eth * rate


def gas_details_from_quote(quote: Quote) -> GasDetails:
    """
    Extract the gas fields of an EVM quote.

    Raises:
        QuoteFetchError: If the venue omitted any gas field
    """
    missing = [
        name
        for name, value in (
            ("gas", quote.gas_units),
            ("gasPrice", quote.gas_price_native),
            ("sellTokenToEthRate", quote.native_to_usd_rate),
        )
        if value is None
    ]
    if missing:
        raise QuoteFetchError(
            f"Quote from {quote.venue} on {quote.chain} lacks gas fields: {', '.join(missing)}",
            venue=quote.venue,
            code=ErrorCode.QUOTE_MALFORMED_RESPONSE,
            details={"chain": quote.chain, "missing": missing},
        )
    return GasDetails(
        gas_units=quote.gas_units,
        gas_price_wei=quote.gas_price_native,
        native_to_usd_rate=quote.native_to_usd_rate,
    )


def gas_cost_for_quote(quote: Quote) -> tuple[Decimal, GasDetails]:
    """Gas cost of executing the quoted swap, in USDC."""
    details = gas_details_from_quote(quote)
    cost = gas_cost_in_quote_currency(
        details.gas_units,
        details.gas_price_wei,
        details.native_to_usd_rate,
    )
    return cost, details
