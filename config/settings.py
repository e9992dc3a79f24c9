"""
config/settings.py - Runtime settings.

Chain endpoints, USDC addresses and venue tuning come from a YAML file
(default: config/chains.yaml). Secrets and per-deployment RPC URLs come
from the environment (.env is loaded via python-dotenv).

Environment overrides:
- ZEROX_API_KEY: 0x API key
- <CHAIN>_RPC_URL: tried before the YAML RPC URLs (e.g. ETHEREUM_RPC_URL)
- XARB_START_NOTIONAL_USDC: notional of the buy leg
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_GAS_METERED_CHAIN,
    DEFAULT_JUPITER_SLIPPAGE_BPS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_START_NOTIONAL_USDC,
    DEFAULT_ZEROX_SLIPPAGE_PERCENTAGE,
    SOLANA_USDC_MINT,
    ChainFamily,
)
from core.exceptions import ConfigError, UnsupportedChainError

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "chains.yaml"


@dataclass
class ChainSettings:
    """Per-chain endpoints and addresses."""
    name: str
    family: ChainFamily
    rpc_urls: list[str] = field(default_factory=list)
    usdc_address: str = ""
    zerox_endpoint: str | None = None

    @property
    def is_evm(self) -> bool:
        return self.family == ChainFamily.EVM


@dataclass
class Settings:
    """Full XARB configuration."""

    chains: dict[str, ChainSettings] = field(default_factory=dict)

    # Venues
    zerox_api_key: str = ""
    zerox_slippage_percentage: str = DEFAULT_ZEROX_SLIPPAGE_PERCENTAGE
    jupiter_base_url: str = "https://quote-api.jup.ag/v6"
    jupiter_slippage_bps: int = DEFAULT_JUPITER_SLIPPAGE_BPS

    # Metadata
    solana_registry_url: str = "https://api.solana.fm"

    # Evaluation
    start_notional_usdc: str = DEFAULT_START_NOTIONAL_USDC
    gas_metered_chain: str = DEFAULT_GAS_METERED_CHAIN
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS

    def get_chain(self, chain: str) -> ChainSettings:
        """Settings for a chain; UnsupportedChainError if not configured."""
        settings = self.chains.get(chain)
        if settings is None:
            raise UnsupportedChainError(chain, {"configured": sorted(self.chains)})
        return settings

    def usdc_address(self, chain: str) -> str:
        return self.get_chain(chain).usdc_address

    @property
    def evm_chains(self) -> list[str]:
        return [name for name, c in self.chains.items() if c.is_evm]


def _parse_chain(name: str, data: Mapping[str, Any]) -> ChainSettings:
    try:
        family = ChainFamily(str(data.get("family", "EVM")).upper())
    except ValueError:
        raise ConfigError(
            f"Unknown chain family for {name}: {data.get('family')!r}",
            {"chain": name},
        )

    usdc = data.get("usdc") or ""
    if family == ChainFamily.SOLANA and not usdc:
        usdc = SOLANA_USDC_MINT
    if not usdc:
        raise ConfigError(f"No USDC address configured for {name}", {"chain": name})

    rpc_urls = data.get("rpc_urls") or []
    if isinstance(rpc_urls, str):
        rpc_urls = [rpc_urls]

    env_rpc = os.getenv(f"{name.upper()}_RPC_URL")
    if env_rpc:
        rpc_urls = [env_rpc, *[u for u in rpc_urls if u != env_rpc]]

    zerox_endpoint = data.get("zerox_endpoint")
    if family == ChainFamily.EVM and not zerox_endpoint:
        raise ConfigError(f"No 0x endpoint configured for {name}", {"chain": name})

    return ChainSettings(
        name=name,
        family=family,
        rpc_urls=list(rpc_urls),
        usdc_address=usdc,
        zerox_endpoint=zerox_endpoint.rstrip("/") if zerox_endpoint else None,
    )


def settings_from_dict(data: Mapping[str, Any]) -> Settings:
    """
    Build Settings from a parsed config mapping plus environment overrides.

    Raises:
        ConfigError: Invalid chain entries or notional
    """
    chains_data = data.get("chains") or {}
    if not chains_data:
        raise ConfigError("No chains configured")

    chains = {
        str(name).lower(): _parse_chain(str(name).lower(), chain_data or {})
        for name, chain_data in chains_data.items()
    }

    evaluation = data.get("evaluation") or {}
    venues = data.get("venues") or {}
    zerox = venues.get("zerox") or {}
    jupiter = venues.get("jupiter") or {}
    metadata = data.get("metadata") or {}

    start_notional = str(
        os.getenv("XARB_START_NOTIONAL_USDC")
        or evaluation.get("start_notional_usdc", DEFAULT_START_NOTIONAL_USDC)
    )
    try:
        if Decimal(start_notional) <= 0:
            raise ConfigError(f"Start notional must be positive: {start_notional}")
    except InvalidOperation:
        raise ConfigError(f"Start notional is not a number: {start_notional!r}")

    return Settings(
        chains=chains,
        zerox_api_key=os.getenv("ZEROX_API_KEY", zerox.get("api_key", "")),
        zerox_slippage_percentage=str(
            zerox.get("slippage_percentage", DEFAULT_ZEROX_SLIPPAGE_PERCENTAGE)
        ),
        jupiter_base_url=str(jupiter.get("base_url", Settings.jupiter_base_url)).rstrip("/"),
        jupiter_slippage_bps=int(jupiter.get("slippage_bps", DEFAULT_JUPITER_SLIPPAGE_BPS)),
        solana_registry_url=str(
            metadata.get("solana_registry_url", Settings.solana_registry_url)
        ).rstrip("/"),
        start_notional_usdc=start_notional,
        gas_metered_chain=str(
            evaluation.get("gas_metered_chain", DEFAULT_GAS_METERED_CHAIN)
        ).lower(),
        request_timeout_seconds=int(
            evaluation.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS)
        ),
    )


def load_settings(config_path: Path | str | None = None) -> Settings:
    """
    Load settings from YAML file and environment.

    Args:
        config_path: Path to settings YAML (default: config/chains.yaml)

    Returns:
        Settings with environment overrides applied
    """
    load_dotenv()

    path = Path(config_path) if config_path else DEFAULT_SETTINGS_PATH
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", {"path": str(path)})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return settings_from_dict(data)
