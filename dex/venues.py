"""
dex/venues.py - Quote venue selection per chain.

Each configured chain maps to exactly one venue, chosen by the chain's
family tag: EVM chains get a ZeroExAdapter bound to the chain's 0x
endpoint, Solana-family chains get a JupiterAdapter bound to the chain
name. Both expose
get_swap_quote(sell_token, buy_token, sell_amount) -> Quote.
"""

from typing import Protocol

import httpx

from config.settings import Settings
from core.constants import ChainFamily
from core.exceptions import UnsupportedChainError
from core.models import Quote
from dex.adapters.jupiter import JupiterAdapter
from dex.adapters.zerox import ZeroExAdapter


class QuoteVenue(Protocol):
    """Capability shared by all venue adapters."""

    venue: str

    async def get_swap_quote(
        self,
        sell_token: str,
        buy_token: str,
        sell_amount: int | str,
    ) -> Quote: ...

    async def close(self) -> None: ...


class VenueRouter:
    """
    Chain -> venue lookup.

    Usage:
        venues = build_venues(settings, resolver)
        quote = await venues.get_swap_quote("base", usdc, token, amount)
    """

    def __init__(self, venues: dict[str, QuoteVenue]):
        self._venues = dict(venues)

    def for_chain(self, chain: str) -> QuoteVenue:
        venue = self._venues.get(chain)
        if venue is None:
            raise UnsupportedChainError(chain, {"reason": "no quote venue"})
        return venue

    async def get_swap_quote(
        self,
        chain: str,
        sell_token: str,
        buy_token: str,
        sell_amount: int | str,
    ) -> Quote:
        return await self.for_chain(chain).get_swap_quote(sell_token, buy_token, sell_amount)

    @property
    def chains(self) -> list[str]:
        return list(self._venues)

    async def close(self) -> None:
        # A venue may be registered under several chains; close each once
        seen: set[int] = set()
        for venue in self._venues.values():
            if id(venue) in seen:
                continue
            seen.add(id(venue))
            await venue.close()


def build_venues(
    settings: Settings,
    resolver,
    client: httpx.AsyncClient | None = None,
) -> VenueRouter:
    """
    Build one adapter per configured chain, dispatching on chain family.

    Args:
        settings: Loaded settings
        resolver: TokenMetadataResolver shared with the evaluator
        client: Optional shared HTTP client
    """
    venues: dict[str, QuoteVenue] = {}

    for name, chain in settings.chains.items():
        if chain.family == ChainFamily.EVM:
            venues[name] = ZeroExAdapter(
                chain=name,
                endpoint=chain.zerox_endpoint,
                api_key=settings.zerox_api_key,
                resolver=resolver,
                slippage_percentage=settings.zerox_slippage_percentage,
                timeout_seconds=settings.request_timeout_seconds,
                client=client,
            )
        elif chain.family == ChainFamily.SOLANA:
            venues[name] = JupiterAdapter(
                base_url=settings.jupiter_base_url,
                resolver=resolver,
                chain=name,
                slippage_bps=settings.jupiter_slippage_bps,
                timeout_seconds=settings.request_timeout_seconds,
                client=client,
            )

    return VenueRouter(venues)
