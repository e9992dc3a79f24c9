"""
metadata/solana.py - SPL token metadata from an HTTP token registry.
"""

import httpx

from core.constants import UNKNOWN_SYMBOL, UNKNOWN_TOKEN_NAME
from core.exceptions import MetadataResolutionError
from core.logging import get_logger
from core.models import TokenMetadata

logger = get_logger(__name__)


class SolanaTokenRegistry:
    """
    Looks up mint metadata via GET {base_url}/v1/tokens/{mint}.

    Response fields used: decimals, tokenList.symbol, tokenList.name.
    """

    def __init__(
        self,
        base_url: str = "https://api.solana.fm",
        timeout_seconds: int = 10,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
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

    async def fetch(self, mint: str) -> TokenMetadata:
        """
        Fetch metadata for a mint.

        Raises:
            httpx.HTTPError: Transport failure or non-2xx status
            MetadataResolutionError: Response lacks usable decimals
        """
        client = await self._get_client()
        url = f"{self.base_url}/v1/tokens/{mint}"

        logger.debug(
            f"Fetching Solana token metadata for {mint}",
            extra={"context": {"mint": mint, "url": url}},
        )

        resp = await client.get(url, headers={"accept": "application/json"})
        resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError:
            raise MetadataResolutionError(
                "Token registry returned a non-JSON body",
                {"mint": mint, "status_code": resp.status_code},
            )

        decimals = data.get("decimals") if isinstance(data, dict) else None
        if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
            raise MetadataResolutionError(
                f"Token registry has no decimals for {mint}",
                {"mint": mint, "decimals": decimals},
            )

        token_list = data.get("tokenList") or {}
        if not isinstance(token_list, dict):
            raise MetadataResolutionError(
                f"Token registry tokenList is not an object for {mint}",
                {"mint": mint, "tokenList_type": type(token_list).__name__},
            )
        symbol = token_list.get("symbol") or UNKNOWN_SYMBOL
        name = token_list.get("name") or UNKNOWN_TOKEN_NAME
        if not isinstance(symbol, str) or not isinstance(name, str):
            raise MetadataResolutionError(
                f"Token registry symbol or name is not a string for {mint}",
                {"mint": mint},
            )

        return TokenMetadata(address=mint, symbol=symbol, decimals=decimals, name=name)
