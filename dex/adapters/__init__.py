"""
dex/adapters/ - Venue quoting adapters.

Adapters:
- zerox: 0x swap API (EVM chains)
- jupiter: Jupiter quote API (Solana)
"""

from dex.adapters.jupiter import JupiterAdapter, parse_jupiter_quote
from dex.adapters.zerox import ZeroExAdapter, parse_zerox_quote

__all__ = [
    "JupiterAdapter",
    "ZeroExAdapter",
    "parse_jupiter_quote",
    "parse_zerox_quote",
]
