"""
metadata/cache.py - Process-lifetime token metadata cache.

Read-through store with no TTL and no invalidation: the first value stored
for a key wins for the rest of the process, defaulted values included.
Constructed once by the caller and injected into the resolver.
"""

from typing import Iterator

from core.constants import ChainFamily
from core.models import TokenMetadata

CacheKey = tuple[str, str]


def metadata_cache_key(chain: str, address: str, family: ChainFamily) -> CacheKey:
    """
    Build the cache key for a token.

    EVM addresses are hex and compared case-insensitively; Solana mints are
    base58, so case is significant and kept as-is.
    """
    if family == ChainFamily.SOLANA:
        return (chain.lower(), address.strip())
    return (chain.lower(), address.strip().lower())


class MetadataCache:
    """In-memory (chain, address) -> TokenMetadata map."""

    def __init__(self):
        self._entries: dict[CacheKey, TokenMetadata] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> TokenMetadata | None:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
        else:
            self.hits += 1
        return entry

    def set(self, key: CacheKey, metadata: TokenMetadata) -> TokenMetadata:
        """
        Store metadata for key and return the cached value.

        Concurrent lookups of the same key may both land here; the later
        write replaces the earlier one (values are expected to be equal).
        """
        self._entries[key] = metadata
        return metadata

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CacheKey]:
        return iter(self._entries)

    def stats(self) -> dict:
        return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}
