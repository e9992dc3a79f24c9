"""
metadata/resolver.py - Token metadata resolution with fallback defaults.

Resolution order per (chain, address):
1. Cache hit -> returned, no network
2. Solana known mint -> built-in table
3. Chain source (ERC-20 eth_call for EVM, token registry for Solana)
4. Any lookup failure -> deterministic default, cached like a real value

Step 4 makes a transient failure sticky for the process lifetime.
Defaulted values carry MetadataSource.DEFAULTED so callers can tell.
"""

import httpx

from chains.providers import ProviderRegistry
from config.settings import Settings
from core.constants import (
    EVM_DEFAULT_DECIMALS,
    SOLANA_DEFAULT_DECIMALS,
    SOLANA_KNOWN_MINTS,
    UNKNOWN_SYMBOL,
    UNKNOWN_TOKEN_NAME,
    USDC_DECIMALS,
    USDC_SYMBOL,
    ChainFamily,
    MetadataSource,
)
from core.exceptions import (
    InfraError,
    MetadataResolutionError,
    UnsupportedChainError,
    ValidationError,
)
from core.logging import get_logger
from core.models import TokenMetadata
from metadata.cache import MetadataCache, metadata_cache_key
from metadata.evm import EvmTokenMetadataSource
from metadata.solana import SolanaTokenRegistry

logger = get_logger(__name__)

# Failures absorbed into default metadata
LOOKUP_ERRORS = (
    MetadataResolutionError,
    InfraError,
    ValidationError,
    httpx.HTTPError,
    ValueError,
)


class TokenMetadataResolver:
    """
    Resolves token decimals/symbol per chain.

    Usage:
        resolver = build_resolver(settings, MetadataCache())
        meta = await resolver.resolve("ethereum", "0xA0b8...eB48")
        await resolver.close()
    """

    def __init__(
        self,
        settings: Settings,
        cache: MetadataCache,
        evm_source: EvmTokenMetadataSource,
        solana_registry: SolanaTokenRegistry,
    ):
        self.settings = settings
        self.cache = cache
        self.evm_source = evm_source
        self.solana_registry = solana_registry

    async def resolve(self, chain: str, address: str) -> TokenMetadata:
        """
        Resolve metadata for a token on a chain.

        Raises:
            UnsupportedChainError: Chain not configured
        """
        chain_settings = self.settings.get_chain(chain)
        key = metadata_cache_key(chain, address, chain_settings.family)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if chain_settings.family == ChainFamily.SOLANA:
            metadata = await self._resolve_solana(chain, address)
        else:
            metadata = await self._resolve_evm(chain, address)

        return self.cache.set(key, metadata)

    async def _resolve_evm(self, chain: str, address: str) -> TokenMetadata:
        try:
            metadata = await self.evm_source.fetch(chain, address)
        except UnsupportedChainError:
            raise
        except LOOKUP_ERRORS as e:
            metadata = self.evm_default(chain, address)
            logger.warning(
                f"Using default metadata for {address} on {chain}: {e}",
                extra={"context": {
                    "chain": chain,
                    "address": address,
                    "decimals": metadata.decimals,
                    "symbol": metadata.symbol,
                    "error_type": type(e).__name__,
                }},
            )
            return metadata

        logger.debug(
            f"Metadata retrieved for {address} on {chain}",
            extra={"context": metadata.to_dict()},
        )
        return metadata

    async def _resolve_solana(self, chain: str, mint: str) -> TokenMetadata:
        known = SOLANA_KNOWN_MINTS.get(mint)
        if known:
            return TokenMetadata(
                address=mint,
                symbol=known["symbol"],
                decimals=known["decimals"],
                name=known.get("name"),
                source=MetadataSource.KNOWN,
            )

        try:
            metadata = await self.solana_registry.fetch(mint)
        except LOOKUP_ERRORS as e:
            metadata = self.solana_default(mint)
            logger.warning(
                f"Using default metadata for Solana mint {mint}: {e}",
                extra={"context": {
                    "chain": chain,
                    "address": mint,
                    "decimals": metadata.decimals,
                    "error_type": type(e).__name__,
                }},
            )
            return metadata

        logger.debug(
            f"Solana metadata retrieved for {mint}",
            extra={"context": metadata.to_dict()},
        )
        return metadata

    def evm_default(self, chain: str, address: str) -> TokenMetadata:
        """18 decimals / UNKNOWN, or 6 / USDC for the chain's USDC address."""
        usdc = self.settings.usdc_address(chain)
        if usdc and address.strip().lower() == usdc.lower():
            return TokenMetadata(
                address=address,
                symbol=USDC_SYMBOL,
                decimals=USDC_DECIMALS,
                source=MetadataSource.DEFAULTED,
            )
        return TokenMetadata(
            address=address,
            symbol=UNKNOWN_SYMBOL,
            decimals=EVM_DEFAULT_DECIMALS,
            source=MetadataSource.DEFAULTED,
        )

    @staticmethod
    def solana_default(mint: str) -> TokenMetadata:
        return TokenMetadata(
            address=mint,
            symbol=UNKNOWN_SYMBOL,
            decimals=SOLANA_DEFAULT_DECIMALS,
            name=UNKNOWN_TOKEN_NAME,
            source=MetadataSource.DEFAULTED,
        )

    async def close(self) -> None:
        await self.evm_source.providers.close_all()
        await self.solana_registry.close()


def build_resolver(
    settings: Settings,
    cache: MetadataCache,
    client: httpx.AsyncClient | None = None,
) -> TokenMetadataResolver:
    """
    Wire a resolver from settings.

    Args:
        settings: Loaded settings (RPC URLs, registry URL, timeouts)
        cache: Process-lifetime cache instance
        client: Optional shared HTTP client (tests inject a mock transport)
    """
    providers = ProviderRegistry()
    for name in settings.evm_chains:
        chain = settings.chains[name]
        if chain.rpc_urls:
            providers.register(
                name,
                chain.rpc_urls,
                timeout_seconds=settings.request_timeout_seconds,
                client=client,
            )

    return TokenMetadataResolver(
        settings=settings,
        cache=cache,
        evm_source=EvmTokenMetadataSource(providers),
        solana_registry=SolanaTokenRegistry(
            base_url=settings.solana_registry_url,
            timeout_seconds=settings.request_timeout_seconds,
            client=client,
        ),
    )
