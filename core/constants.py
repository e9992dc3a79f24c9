# PATH: core/constants.py
"""
Constants for XARB.

Contains enums, defaults, and fixed unit conventions.
"""

from decimal import Decimal
from enum import Enum
from typing import Final

# =============================================================================
# UNITS
# =============================================================================

# Native gas currency is always priced in an 18-decimal smallest unit (wei)
NATIVE_GAS_DECIMALS: Final[int] = 18
WEI_PER_ETH: Final[Decimal] = Decimal(10) ** NATIVE_GAS_DECIMALS

# =============================================================================
# EVALUATION DEFAULTS
# =============================================================================

DEFAULT_START_NOTIONAL_USDC = "1000"
DEFAULT_GAS_METERED_CHAIN = "ethereum"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10

# Slippage defaults
DEFAULT_ZEROX_SLIPPAGE_PERCENTAGE = "0.01"
DEFAULT_JUPITER_SLIPPAGE_BPS = 100

# =============================================================================
# TOKEN CONVENTIONS
# =============================================================================

SOLANA_CHAIN = "solana"
SOLANA_USDC_MINT: Final[str] = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

USDC_SYMBOL = "USDC"
UNKNOWN_SYMBOL = "UNKNOWN"
UNKNOWN_TOKEN_NAME = "Unknown Token"

USDC_DECIMALS = 6
EVM_DEFAULT_DECIMALS = 18
SOLANA_DEFAULT_DECIMALS = 8

# Mints whose metadata never needs a registry round trip
SOLANA_KNOWN_MINTS: Final[dict[str, dict]] = {
    SOLANA_USDC_MINT: {"decimals": USDC_DECIMALS, "symbol": USDC_SYMBOL, "name": "USD Coin"},
}

# ERC-20 view selectors
SELECTOR_DECIMALS: Final[str] = "0x313ce567"
SELECTOR_SYMBOL: Final[str] = "0x95d89b41"


class ChainFamily(str, Enum):
    """Addressing/venue family of a chain."""
    EVM = "EVM"
    SOLANA = "SOLANA"


class EthereumRole(str, Enum):
    """Which leg of an opportunity runs on the gas-metered chain."""
    BUY = "buy"
    SELL = "sell"


class MetadataSource(str, Enum):
    """How a TokenMetadata value was obtained."""
    RESOLVED = "RESOLVED"
    KNOWN = "KNOWN"
    DEFAULTED = "DEFAULTED"


class RoundingMode(str, Enum):
    """Rounding applied when scaling an amount down to fewer decimals."""
    TRUNCATE = "TRUNCATE"
    HALF_UP = "HALF_UP"
    CEILING = "CEILING"


class VenueId(str, Enum):
    """Quote venues."""
    ZEROX = "0x"
    JUPITER = "jupiter"


class EvaluationStage(str, Enum):
    """Evaluation pipeline stages, in order."""
    START = "START"
    METADATA_RESOLVED = "METADATA_RESOLVED"
    BUY_QUOTED = "BUY_QUOTED"
    AMOUNT_NORMALIZED = "AMOUNT_NORMALIZED"
    SELL_QUOTED = "SELL_QUOTED"
    EVALUATED = "EVALUATED"
    FAILED = "FAILED"


class ErrorCode(str, Enum):
    """Error codes carried by XarbError and failure results."""
    # Validation
    VALIDATION_MISSING_FIELD = "VALIDATION_MISSING_FIELD"
    VALIDATION_INVALID_FIELD = "VALIDATION_INVALID_FIELD"
    VALIDATION_INVALID_AMOUNT = "VALIDATION_INVALID_AMOUNT"

    # Routing
    UNSUPPORTED_CHAIN = "UNSUPPORTED_CHAIN"

    # Quotes
    QUOTE_FETCH_FAILED = "QUOTE_FETCH_FAILED"
    QUOTE_HTTP_ERROR = "QUOTE_HTTP_ERROR"
    QUOTE_MALFORMED_RESPONSE = "QUOTE_MALFORMED_RESPONSE"

    # Metadata
    METADATA_LOOKUP_FAILED = "METADATA_LOOKUP_FAILED"

    # Infrastructure
    INFRA_RPC_ERROR = "INFRA_RPC_ERROR"
    INFRA_TIMEOUT = "INFRA_TIMEOUT"

    # Config
    CONFIG_INVALID = "CONFIG_INVALID"

    UNKNOWN = "UNKNOWN"
