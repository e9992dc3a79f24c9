"""
tests/unit/test_gas.py - Gas cost normalization tests.
"""

import pytest
from decimal import Decimal

from core.constants import ErrorCode
from core.exceptions import QuoteFetchError, ValidationError
from core.gas import gas_cost_for_quote, gas_cost_in_quote_currency, gas_details_from_quote
from core.models import Quote


def make_quote(**overrides) -> Quote:
    fields = dict(
        venue="0x",
        chain="ethereum",
        input_token="0xusdc",
        output_token="0xtoken",
        input_amount="1000000000",
        output_amount="500000000000000000",
        input_decimals=6,
        output_decimals=18,
        gas_units=200_000,
        gas_price_native=20_000_000_000,
        native_to_usd_rate=Decimal("2500"),
    )
    fields.update(overrides)
    return Quote(**fields)


class TestGasCostInQuoteCurrency:
    """cost = gas * price / 1e18 * rate"""

    def test_basic_cost(self):
        """200k gas at 20 gwei and 2500 USD/ETH is 10 USDC."""
        cost = gas_cost_in_quote_currency(200_000, 20_000_000_000, Decimal("2500"))
        assert cost == Decimal("10")

    def test_string_inputs(self):
        cost = gas_cost_in_quote_currency("21000", "1000000000", "3000")
        assert cost == Decimal("0.063")

    def test_zero_gas(self):
        assert gas_cost_in_quote_currency(0, 20_000_000_000, "2500") == 0

    def test_rejects_float_rate(self):
        with pytest.raises(ValidationError):
            gas_cost_in_quote_currency(21000, 1, 2500.0)

    def test_result_is_decimal(self):
        cost = gas_cost_in_quote_currency(1, 1, "1")
        assert isinstance(cost, Decimal)
        assert cost == Decimal("1E-18")


class TestGasFromQuote:
    """Extraction from an EVM quote."""

    def test_details_from_quote(self):
        details = gas_details_from_quote(make_quote())
        assert details.gas_units == 200_000
        assert details.gas_price_wei == 20_000_000_000
        assert details.native_to_usd_rate == Decimal("2500")

    def test_cost_for_quote(self):
        cost, details = gas_cost_for_quote(make_quote())
        assert cost == Decimal("10")
        assert details.to_dict() == {
            "gas_units": 200_000,
            "gas_price_wei": 20_000_000_000,
            "eth_to_usd_rate": "2500",
        }

    def test_missing_gas_fields_raise(self):
        quote = make_quote(gas_units=None, native_to_usd_rate=None)
        with pytest.raises(QuoteFetchError) as exc_info:
            gas_details_from_quote(quote)

        assert exc_info.value.code == ErrorCode.QUOTE_MALFORMED_RESPONSE
        assert exc_info.value.venue == "0x"
        assert exc_info.value.details["missing"] == ["gas", "sellTokenToEthRate"]
