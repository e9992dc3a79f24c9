# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for XARB tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import settings_from_dict  # noqa: E402

ETHEREUM_USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
BASE_USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
SOLANA_USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def settings_data():
    """Raw settings document with ethereum, base and solana configured."""
    return {
        "evaluation": {
            "start_notional_usdc": "1000",
            "gas_metered_chain": "ethereum",
            "request_timeout_seconds": 5,
        },
        "venues": {
            "zerox": {"api_key": "test-key", "slippage_percentage": "0.01"},
            "jupiter": {"base_url": "https://jup.test/v6", "slippage_bps": 100},
        },
        "metadata": {"solana_registry_url": "https://registry.test"},
        "chains": {
            "ethereum": {
                "family": "evm",
                "rpc_urls": ["https://eth.rpc.test"],
                "usdc": ETHEREUM_USDC,
                "zerox_endpoint": "https://api.0x.test",
            },
            "base": {
                "family": "evm",
                "rpc_urls": ["https://base.rpc.test"],
                "usdc": BASE_USDC,
                "zerox_endpoint": "https://base.api.0x.test",
            },
            "solana": {
                "family": "solana",
                "usdc": SOLANA_USDC,
            },
        },
    }


@pytest.fixture
def settings(settings_data, monkeypatch):
    """Settings built from settings_data with no environment overrides."""
    for name in (
        "ZEROX_API_KEY",
        "ETHEREUM_RPC_URL",
        "BASE_RPC_URL",
        "SOLANA_RPC_URL",
        "XARB_START_NOTIONAL_USDC",
    ):
        monkeypatch.delenv(name, raising=False)
    return settings_from_dict(settings_data)


@pytest.fixture
def step_clock(monkeypatch):
    """Millisecond clock that advances 25ms on every read."""
    import chains.providers
    import core.time
    import dex.adapters.jupiter
    import dex.adapters.zerox

    ticks = iter(range(1_000, 1_000_000, 25))

    def now_ms() -> int:
        return next(ticks)

    for module in (core.time, chains.providers, dex.adapters.jupiter, dex.adapters.zerox):
        monkeypatch.setattr(module, "now_ms", now_ms)
    return now_ms
