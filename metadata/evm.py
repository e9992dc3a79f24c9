"""
metadata/evm.py - ERC-20 metadata over JSON-RPC.

Reads decimals() and symbol() with raw eth_call through the chain's
RPCProvider and decodes the ABI words by hand.
"""

import asyncio

from chains.providers import ProviderRegistry
from core.constants import SELECTOR_DECIMALS, SELECTOR_SYMBOL
from core.exceptions import MetadataResolutionError, UnsupportedChainError
from core.logging import get_logger
from core.models import TokenMetadata

logger = get_logger(__name__)

WORD_HEX = 64


def _strip_hex(hex_result: object) -> str:
    if hex_result is None or hex_result == "0x":
        return ""
    if not isinstance(hex_result, str):
        raise MetadataResolutionError(
            "eth_call result is not a hex string",
            {"result_type": type(hex_result).__name__},
        )
    return hex_result[2:] if hex_result.startswith("0x") else hex_result


def decode_uint(hex_result: str | None) -> int:
    """
    Decode a single uint return word.

    Raises:
        MetadataResolutionError: Empty or non-hex response
    """
    data = _strip_hex(hex_result)
    if not data:
        raise MetadataResolutionError("Empty uint response")
    try:
        return int(data[:WORD_HEX], 16)
    except ValueError:
        raise MetadataResolutionError(
            "Non-hex uint response",
            {"raw": str(hex_result)[:100]},
        )


def decode_symbol(hex_result: str | None) -> str:
    """
    Decode an ERC-20 symbol() response.

    Handles the standard ABI string encoding (offset, length, bytes) and
    the legacy bytes32 encoding used by some older tokens (e.g. MKR).

    Raises:
        MetadataResolutionError: Empty or malformed response
    """
    data = _strip_hex(hex_result)
    if not data:
        raise MetadataResolutionError("Empty symbol response")

    try:
        if len(data) == WORD_HEX:
            raw = bytes.fromhex(data).rstrip(b"\x00")
        else:
            offset = int(data[:WORD_HEX], 16) * 2
            length = int(data[offset:offset + WORD_HEX], 16)
            start = offset + WORD_HEX
            raw = bytes.fromhex(data[start:start + length * 2])
            if len(raw) != length:
                raise MetadataResolutionError(
                    "Truncated symbol response",
                    {"expected_bytes": length, "got_bytes": len(raw)},
                )
    except ValueError as e:
        raise MetadataResolutionError(
            f"Malformed symbol response: {e}",
            {"raw": str(hex_result)[:100]},
        )

    symbol = raw.decode("utf-8", errors="replace").strip()
    if not symbol:
        raise MetadataResolutionError("Blank symbol")
    return symbol


class EvmTokenMetadataSource:
    """
    Reads token metadata from ERC-20 contracts.

    Usage:
        source = EvmTokenMetadataSource(providers)
        meta = await source.fetch("ethereum", "0xA0b8...eB48")
    """

    def __init__(self, providers: ProviderRegistry):
        self.providers = providers

    async def fetch(self, chain: str, address: str) -> TokenMetadata:
        """
        Fetch decimals and symbol for a token contract.

        Raises:
            UnsupportedChainError: No provider registered for the chain
            MetadataResolutionError: Undecodable contract response
            InfraError: All RPC endpoints failed
        """
        provider = self.providers.get(chain)
        if provider is None:
            raise UnsupportedChainError(chain, {"reason": "no RPC provider"})

        logger.debug(
            f"Fetching metadata for token {address} on {chain}",
            extra={"context": {"chain": chain, "address": address}},
        )

        decimals_resp, symbol_resp = await asyncio.gather(
            provider.eth_call(to=address, data=SELECTOR_DECIMALS),
            provider.eth_call(to=address, data=SELECTOR_SYMBOL),
        )

        decimals = decode_uint(decimals_resp.result)
        if decimals > 255:
            raise MetadataResolutionError(
                f"decimals() out of uint8 range: {decimals}",
                {"chain": chain, "address": address},
            )

        return TokenMetadata(
            address=address,
            symbol=decode_symbol(symbol_resp.result),
            decimals=decimals,
        )
