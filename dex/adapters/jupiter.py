"""
dex/adapters/jupiter.py - Jupiter quote API adapter (Solana).

GET {base_url}/quote
    inputMint, outputMint, amount (base units), slippageBps,
    onlyDirectRoutes=false

Response fields used: outAmount, priceImpactPct, routePlan[] where each
entry is {swapInfo: {label, inputMint, outputMint, inAmount, outAmount},
percent}. The route plan is reported, never used for profit math.
"""

import asyncio
import math

import httpx

from core.constants import DEFAULT_JUPITER_SLIPPAGE_BPS, SOLANA_CHAIN, VenueId
from core.exceptions import QuoteFetchError, ValidationError
from core.logging import get_logger
from core.math import parse_base_units, safe_int
from core.models import Quote, RouteHop
from core.time import elapsed_ms, now_ms
from dex.adapters.common import (
    json_body,
    optional_decimal,
    raise_for_quote_status,
    required_amount,
)

logger = get_logger(__name__)


def _hop_percent(value) -> int:
    """Route share as an int; unparseable values report as 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, float):
        # percent is not money; JSON numbers may arrive as floats
        value = int(value) if math.isfinite(value) else 0
    try:
        return safe_int(value)
    except ValidationError:
        return 0


def parse_route_plan(data: dict) -> list[RouteHop]:
    """
    Route hops in execution order.

    Diagnostic only: entries without a swapInfo object are skipped and a
    malformed percent is reported as 0, so the quote itself still stands.
    """
    hops = []
    plan = data.get("routePlan")
    if not isinstance(plan, list):
        return hops
    for entry in plan:
        if not isinstance(entry, dict):
            continue
        info = entry.get("swapInfo")
        if not isinstance(info, dict) or not info:
            continue
        hops.append(RouteHop(
            label=str(info.get("label") or "unknown"),
            input_mint=str(info.get("inputMint", "")),
            output_mint=str(info.get("outputMint", "")),
            in_amount=str(info.get("inAmount", "0")),
            out_amount=str(info.get("outAmount", "0")),
            percent=_hop_percent(entry.get("percent")),
        ))
    return hops


def parse_jupiter_quote(
    data: dict,
    input_mint: str,
    output_mint: str,
    amount: str,
    input_decimals: int,
    output_decimals: int,
    latency_ms: int = 0,
    chain: str = SOLANA_CHAIN,
) -> Quote:
    """
    Map a Jupiter quote body onto Quote.

    Raises:
        QuoteFetchError: outAmount missing or not a base-unit integer
    """
    venue = VenueId.JUPITER.value
    out_amount = required_amount(data, "outAmount", venue, chain)

    return Quote(
        venue=venue,
        chain=chain,
        input_token=input_mint,
        output_token=output_mint,
        input_amount=amount,
        output_amount=out_amount,
        input_decimals=input_decimals,
        output_decimals=output_decimals,
        price_impact_pct=optional_decimal(data, "priceImpactPct"),
        route_plan=parse_route_plan(data),
        latency_ms=latency_ms,
        raw=data,
    )


class JupiterAdapter:
    """
    Jupiter quote adapter.

    Usage:
        adapter = JupiterAdapter("https://quote-api.jup.ag/v6", resolver)
        quote = await adapter.get_swap_quote(usdc_mint, token_mint, "1000000000")
    """

    venue = VenueId.JUPITER.value

    def __init__(
        self,
        base_url: str,
        resolver,
        chain: str = SOLANA_CHAIN,
        slippage_bps: int = DEFAULT_JUPITER_SLIPPAGE_BPS,
        timeout_seconds: int = 10,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.resolver = resolver
        self.chain = chain
        self.slippage_bps = slippage_bps
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
        input_mint: str,
        output_mint: str,
        amount: int | str,
        slippage_bps: int | None = None,
    ) -> Quote:
        """
        Quote swapping an exact base-unit amount of input_mint.

        Raises:
            QuoteFetchError: Transport error, non-2xx or malformed body
        """
        amount_str = parse_base_units(amount, "amount")
        input_meta, output_meta = await asyncio.gather(
            self.resolver.resolve(self.chain, input_mint),
            self.resolver.resolve(self.chain, output_mint),
        )

        url = f"{self.base_url}/quote"
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": amount_str,
            "slippageBps": self.slippage_bps if slippage_bps is None else slippage_bps,
            "onlyDirectRoutes": "false",
        }

        logger.info(
            "Getting Jupiter quote",
            extra={"context": {
                "venue": self.venue,
                "url": url,
                "input_decimals": input_meta.decimals,
                "output_decimals": output_meta.decimals,
                **params,
            }},
        )

        client = await self._get_client()
        start_ms = now_ms()
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise QuoteFetchError(
                f"Error getting Jupiter quote: {e}",
                venue=self.venue,
                details={"chain": self.chain, "error_type": type(e).__name__},
            )
        latency_ms = elapsed_ms(start_ms)

        raise_for_quote_status(resp, self.venue, self.chain)
        data = json_body(resp, self.venue, self.chain)

        quote = parse_jupiter_quote(
            data,
            input_mint=input_mint,
            output_mint=output_mint,
            amount=amount_str,
            input_decimals=input_meta.decimals,
            output_decimals=output_meta.decimals,
            latency_ms=latency_ms,
            chain=self.chain,
        )

        logger.debug(
            f"Jupiter quote: {amount_str} -> {quote.output_amount}",
            extra={"context": {
                "price_impact_pct": quote.price_impact_pct,
                "hops": len(quote.route_plan),
                "latency_ms": latency_ms,
            }},
        )
        return quote
