"""
dex/adapters/zerox.py - 0x swap API adapter (EVM chains).

GET {endpoint}/swap/v1/quote
    sellToken, buyToken, sellAmount (base units), slippagePercentage
    header: 0x-api-key

Response fields used: buyAmount, gas | estimatedGas, gasPrice,
sellTokenToEthRate, sources[].

Failures are not retried here.
"""

import asyncio
from decimal import Decimal, InvalidOperation

import httpx

from core.constants import DEFAULT_ZEROX_SLIPPAGE_PERCENTAGE, VenueId
from core.exceptions import QuoteFetchError
from core.logging import get_logger
from core.math import parse_base_units
from core.models import Quote
from core.time import elapsed_ms, now_ms
from dex.adapters.common import (
    json_body,
    optional_decimal,
    optional_int,
    raise_for_quote_status,
    required_amount,
)

logger = get_logger(__name__)

QUOTE_PATH = "/swap/v1/quote"


def active_sources(data: dict) -> list[str]:
    """Names of liquidity sources that carry part of the fill."""
    names = []
    for source in data.get("sources") or []:
        if not isinstance(source, dict):
            continue
        try:
            proportion = Decimal(str(source.get("proportion", "0")))
        except InvalidOperation:
            continue
        if proportion > 0 and source.get("name"):
            names.append(source["name"])
    return names


def parse_zerox_quote(
    data: dict,
    chain: str,
    sell_token: str,
    buy_token: str,
    sell_amount: str,
    sell_decimals: int,
    buy_decimals: int,
    latency_ms: int = 0,
) -> Quote:
    """
    Map a 0x quote body onto Quote.

    Raises:
        QuoteFetchError: buyAmount missing or not a base-unit integer
    """
    venue = VenueId.ZEROX.value
    buy_amount = required_amount(data, "buyAmount", venue, chain)

    return Quote(
        venue=venue,
        chain=chain,
        input_token=sell_token,
        output_token=buy_token,
        input_amount=sell_amount,
        output_amount=buy_amount,
        input_decimals=sell_decimals,
        output_decimals=buy_decimals,
        gas_units=optional_int(data, "gas", "estimatedGas"),
        gas_price_native=optional_int(data, "gasPrice"),
        native_to_usd_rate=optional_decimal(data, "sellTokenToEthRate"),
        sources=active_sources(data),
        latency_ms=latency_ms,
        raw=data,
    )


class ZeroExAdapter:
    """
    0x quote adapter for one EVM chain.

    Usage:
        adapter = ZeroExAdapter("ethereum", "https://api.0x.org", api_key, resolver)
        quote = await adapter.get_swap_quote(usdc, token, "1000000000")
    """

    venue = VenueId.ZEROX.value

    def __init__(
        self,
        chain: str,
        endpoint: str,
        api_key: str,
        resolver,
        slippage_percentage: str = DEFAULT_ZEROX_SLIPPAGE_PERCENTAGE,
        timeout_seconds: int = 10,
        client: httpx.AsyncClient | None = None,
    ):
        self.chain = chain
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.resolver = resolver
        self.slippage_percentage = slippage_percentage
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds))
        return self._client

    async def close(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def get_swap_quote(
        self,
        sell_token: str,
        buy_token: str,
        sell_amount: int | str,
    ) -> Quote:
        """
        Quote selling an exact base-unit amount of sell_token for buy_token.

        Raises:
            QuoteFetchError: Transport error, non-2xx or malformed body
        """
        amount = parse_base_units(sell_amount, "sellAmount")
        sell_meta, buy_meta = await asyncio.gather(
            self.resolver.resolve(self.chain, sell_token),
            self.resolver.resolve(self.chain, buy_token),
        )

        url = f"{self.endpoint}{QUOTE_PATH}"
        params = {
            "sellToken": sell_token,
            "buyToken": buy_token,
            "sellAmount": amount,
            "slippagePercentage": self.slippage_percentage,
        }

        logger.info(
            f"Getting {self.chain} quote",
            extra={"context": {"venue": self.venue, "url": url, **params}},
        )

        client = await self._get_client()
        start_ms = now_ms()
        try:
            resp = await client.get(url, params=params, headers={"0x-api-key": self.api_key})
        except httpx.HTTPError as e:
            raise QuoteFetchError(
                f"Error getting swap quote for {self.chain}: {e}",
                venue=self.venue,
                details={"chain": self.chain, "error_type": type(e).__name__},
            )
        latency_ms = elapsed_ms(start_ms)

        raise_for_quote_status(resp, self.venue, self.chain)
        data = json_body(resp, self.venue, self.chain)

        quote = parse_zerox_quote(
            data,
            chain=self.chain,
            sell_token=sell_token,
            buy_token=buy_token,
            sell_amount=amount,
            sell_decimals=sell_meta.decimals,
            buy_decimals=buy_meta.decimals,
            latency_ms=latency_ms,
        )

        logger.debug(
            f"0x quote: {sell_meta.symbol}->{buy_meta.symbol} {amount} -> {quote.output_amount}",
            extra={"context": {
                "chain": self.chain,
                "gas": quote.gas_units,
                "gas_price": quote.gas_price_native,
                "sources": quote.sources,
                "latency_ms": latency_ms,
            }},
        )
        return quote
