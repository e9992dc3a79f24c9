"""
dex/ - Swap quote venues.

Modules:
- adapters: 0x and Jupiter quote adapters
- venues: chain -> venue dispatch
"""

from dex.venues import QuoteVenue, VenueRouter, build_venues

__all__ = [
    "QuoteVenue",
    "VenueRouter",
    "build_venues",
]
