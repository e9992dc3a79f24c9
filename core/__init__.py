"""
core - Core utilities and models for XARB.

This package contains:
- models.py: Data models (OpportunityRecord, TokenMetadata, Quote, ArbitrageResult)
- constants.py: Enums and constants
- exceptions.py: Typed exceptions with error codes
- math.py: Safe conversions (no float)
- decimals.py: Base-unit precision normalization
- gas.py: Gas cost in USDC
- logging.py: Structured JSON logging
"""

from core.constants import (
    ChainFamily,
    ErrorCode,
    EthereumRole,
    EvaluationStage,
    MetadataSource,
    RoundingMode,
    VenueId,
)
from core.exceptions import (
    ConfigError,
    InfraError,
    MetadataResolutionError,
    QuoteFetchError,
    UnsupportedChainError,
    ValidationError,
    XarbError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    ArbitrageResult,
    GasDetails,
    OpportunityRecord,
    Quote,
    RouteHop,
    TokenMetadata,
)

__all__ = [
    # Constants
    "ChainFamily",
    "ErrorCode",
    "EthereumRole",
    "EvaluationStage",
    "MetadataSource",
    "RoundingMode",
    "VenueId",
    # Exceptions
    "ConfigError",
    "InfraError",
    "MetadataResolutionError",
    "QuoteFetchError",
    "UnsupportedChainError",
    "ValidationError",
    "XarbError",
    # Models
    "ArbitrageResult",
    "GasDetails",
    "OpportunityRecord",
    "Quote",
    "RouteHop",
    "TokenMetadata",
    # Logging
    "get_logger",
    "setup_logging",
]
