# PATH: core/models.py
"""
Core data models for XARB.

AMOUNT CONTRACT
===============
Every token amount on a model is a base-unit integer carried as a digit
string ("1500000" is 1.5 USDC at 6 decimals). Human-readable values are
Decimal and are derived for results and display only.
===============
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from core.constants import (
    ErrorCode,
    EthereumRole,
    EvaluationStage,
    MetadataSource,
)
from core.exceptions import ValidationError


# Opportunity records come from the datastore in camelCase
_OPPORTUNITY_FIELDS = {
    "token_symbol": ("tokenSymbol", "token_symbol"),
    "buy_chain": ("buyChain", "buy_chain"),
    "sell_chain": ("sellChain", "sell_chain"),
    "buy_address": ("buyAddress", "buy_address"),
    "sell_address": ("sellAddress", "sell_address"),
}


def _decimal_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


# ============================================================================
# INPUT
# ============================================================================

@dataclass(frozen=True)
class OpportunityRecord:
    """An arbitrage opportunity to evaluate. Immutable once built."""
    token_symbol: str
    buy_chain: str
    sell_chain: str
    buy_address: str
    sell_address: str
    ethereum_role: Optional[EthereumRole] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OpportunityRecord":
        """
        Build a record from a datastore document.

        Raises:
            ValidationError: Required field missing/blank or bad ethereumRole
        """
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Opportunity must be a mapping, got {type(data).__name__}",
                code=ErrorCode.VALIDATION_INVALID_FIELD,
            )

        values: Dict[str, str] = {}
        missing: List[str] = []
        for attr, keys in _OPPORTUNITY_FIELDS.items():
            raw = next((data[k] for k in keys if data.get(k) is not None), None)
            if not isinstance(raw, str) or not raw.strip():
                missing.append(keys[0])
                continue
            values[attr] = raw.strip()

        if missing:
            raise ValidationError(
                f"Opportunity is missing required fields: {', '.join(missing)}",
                {"missing": missing},
                code=ErrorCode.VALIDATION_MISSING_FIELD,
            )

        role_raw = data.get("ethereumRole", data.get("ethereum_role"))
        role: Optional[EthereumRole] = None
        if role_raw not in (None, "", "none"):
            try:
                role = EthereumRole(str(role_raw).lower())
            except ValueError:
                raise ValidationError(
                    f"Invalid ethereumRole: {role_raw!r}",
                    {"ethereumRole": role_raw},
                )

        return cls(
            token_symbol=values["token_symbol"],
            buy_chain=values["buy_chain"].lower(),
            sell_chain=values["sell_chain"].lower(),
            buy_address=values["buy_address"],
            sell_address=values["sell_address"],
            ethereum_role=role,
        )

    @property
    def is_cross_chain(self) -> bool:
        return self.buy_chain != self.sell_chain

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokenSymbol": self.token_symbol,
            "buyChain": self.buy_chain,
            "sellChain": self.sell_chain,
            "buyAddress": self.buy_address,
            "sellAddress": self.sell_address,
            "ethereumRole": self.ethereum_role.value if self.ethereum_role else None,
        }


# ============================================================================
# METADATA
# ============================================================================

@dataclass(frozen=True)
class TokenMetadata:
    """Token precision and symbol on one chain."""
    address: str
    symbol: str
    decimals: int
    name: Optional[str] = None
    source: MetadataSource = MetadataSource.RESOLVED

    def __post_init__(self):
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int) or self.decimals < 0:
            raise ValidationError(
                f"Token decimals must be a non-negative integer, got {self.decimals!r}",
                {"address": self.address, "decimals": self.decimals},
            )

    @property
    def is_defaulted(self) -> bool:
        return self.source == MetadataSource.DEFAULTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "name": self.name,
            "source": self.source.value,
        }


# ============================================================================
# QUOTES
# ============================================================================

@dataclass
class RouteHop:
    """One hop of a multi-hop route. Diagnostic only."""
    label: str
    input_mint: str
    output_mint: str
    in_amount: str
    out_amount: str
    percent: int = 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "input_mint": self.input_mint,
            "output_mint": self.output_mint,
            "in_amount": self.in_amount,
            "out_amount": self.out_amount,
            "percent": self.percent,
        }


@dataclass
class Quote:
    """Venue quote normalized into one shape."""
    venue: str
    chain: str
    input_token: str
    output_token: str
    input_amount: str
    output_amount: str
    input_decimals: int
    output_decimals: int

    # EVM aggregator fields
    gas_units: Optional[int] = None
    gas_price_native: Optional[int] = None
    native_to_usd_rate: Optional[Decimal] = None
    sources: List[str] = field(default_factory=list)

    # Solana aggregator fields
    price_impact_pct: Optional[Decimal] = None
    route_plan: List[RouteHop] = field(default_factory=list)

    latency_ms: int = 0
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "venue": self.venue,
            "chain": self.chain,
            "input_token": self.input_token,
            "output_token": self.output_token,
            "input_amount": self.input_amount,
            "output_amount": self.output_amount,
            "input_decimals": self.input_decimals,
            "output_decimals": self.output_decimals,
            "gas_units": self.gas_units,
            "gas_price_native": self.gas_price_native,
            "native_to_usd_rate": _decimal_str(self.native_to_usd_rate),
            "sources": list(self.sources),
            "price_impact_pct": _decimal_str(self.price_impact_pct),
            "route_plan": [hop.to_dict() for hop in self.route_plan],
            "latency_ms": self.latency_ms,
        }


@dataclass
class GasDetails:
    """Gas inputs behind a gas cost figure."""
    gas_units: int
    gas_price_wei: int
    native_to_usd_rate: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gas_units": self.gas_units,
            "gas_price_wei": self.gas_price_wei,
            "eth_to_usd_rate": str(self.native_to_usd_rate),
        }


# ============================================================================
# RESULT
# ============================================================================

@dataclass
class ArbitrageResult:
    """Verdict of one evaluation. Decimals serialize as strings."""
    success: bool
    stage: EvaluationStage
    processing_time_ms: int = 0
    profit: Optional[Decimal] = None
    gas_cost: Optional[Decimal] = None
    gas_details: Optional[GasDetails] = None
    buy_price: Optional[Decimal] = None
    sell_price: Optional[Decimal] = None
    price_impact_pct: Optional[Decimal] = None
    token_decimals: Dict[str, int] = field(default_factory=dict)

    start_amount: Optional[str] = None
    token_amount_received: Optional[str] = None
    adjusted_token_amount: Optional[str] = None
    final_amount: Optional[str] = None

    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    # Last stage completed before a failure
    last_stage: Optional[EvaluationStage] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def is_profitable(self) -> bool:
        return self.success and self.profit is not None and self.profit > 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "stage": self.stage.value,
            "processing_time_ms": self.processing_time_ms,
            "token_decimals": dict(self.token_decimals),
        }
        if not self.success:
            data["error"] = self.error
            data["error_code"] = self.error_code.value if self.error_code else None
            data["last_stage"] = self.last_stage.value if self.last_stage else None
            return data

        data.update({
            "profit": _decimal_str(self.profit),
            "buy_price": _decimal_str(self.buy_price),
            "sell_price": _decimal_str(self.sell_price),
            "start_amount": self.start_amount,
            "token_amount_received": self.token_amount_received,
            "adjusted_token_amount": self.adjusted_token_amount,
            "final_amount": self.final_amount,
            "warnings": list(self.warnings),
        })
        if self.gas_cost is not None:
            data["gas_cost"] = str(self.gas_cost)
            data["gas_details"] = self.gas_details.to_dict() if self.gas_details else None
        if self.price_impact_pct is not None:
            data["price_impact_pct"] = str(self.price_impact_pct)
        return data
