"""
metadata/ - Token metadata resolution.

Modules:
- cache: Process-lifetime (chain, address) cache
- evm: ERC-20 decimals()/symbol() over JSON-RPC
- solana: SPL mint lookups via the token registry
- resolver: Cache-first resolution with default fallbacks
"""

from metadata.cache import MetadataCache, metadata_cache_key
from metadata.evm import EvmTokenMetadataSource
from metadata.resolver import TokenMetadataResolver, build_resolver
from metadata.solana import SolanaTokenRegistry

__all__ = [
    "EvmTokenMetadataSource",
    "MetadataCache",
    "SolanaTokenRegistry",
    "TokenMetadataResolver",
    "build_resolver",
    "metadata_cache_key",
]
