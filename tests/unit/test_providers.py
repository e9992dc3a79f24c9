"""
tests/unit/test_providers.py - RPC failover tests.
"""

import json

import httpx
import pytest

from chains.providers import ProviderRegistry, RPCProvider, resolve_env_placeholders
from core.constants import ErrorCode
from core.exceptions import InfraError

PRIMARY = "https://primary.rpc.test"
BACKUP = "https://backup.rpc.test"


def make_client(routes: dict) -> httpx.AsyncClient:
    """Mock client answering per host: a dict body, a status int, or an exception."""
    def handler(request: httpx.Request) -> httpx.Response:
        outcome = routes[f"https://{request.url.host}"]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, text="upstream error")
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], **outcome})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestResolveEnvPlaceholders:
    """${VAR} expansion in endpoint URLs."""

    def test_expands_and_drops_unresolved(self, monkeypatch):
        monkeypatch.setenv("ALCHEMY_API_KEY", "secret")
        monkeypatch.delenv("MISSING_KEY", raising=False)

        urls = resolve_env_placeholders([
            "https://eth.alchemy.test/v2/${ALCHEMY_API_KEY}",
            "https://other.test/${MISSING_KEY}",
            PRIMARY,
        ])

        assert urls == ["https://eth.alchemy.test/v2/secret", PRIMARY]


class TestRPCProvider:
    """Failover across endpoints."""

    @pytest.mark.asyncio
    async def test_first_endpoint_answers(self):
        client = make_client({PRIMARY: {"result": "0x12"}, BACKUP: {"result": "0xff"}})
        provider = RPCProvider("ethereum", [PRIMARY, BACKUP], client=client)

        response = await provider.eth_call("0xtoken", "0x313ce567")

        assert response.result == "0x12"
        assert response.endpoint_used == PRIMARY
        assert provider.stats[BACKUP].total_requests == 0

    @pytest.mark.asyncio
    async def test_latency_from_clock(self, step_clock):
        client = make_client({PRIMARY: {"result": "0x12"}})
        provider = RPCProvider("ethereum", [PRIMARY], client=client)

        response = await provider.eth_call("0xtoken", "0x313ce567")

        assert response.latency_ms == 25
        assert provider.stats[PRIMARY].avg_latency_ms == 25

    @pytest.mark.asyncio
    async def test_http_error_fails_over(self):
        client = make_client({PRIMARY: 503, BACKUP: {"result": "0x06"}})
        provider = RPCProvider("ethereum", [PRIMARY, BACKUP], client=client)

        response = await provider.call("eth_call", [{}, "latest"])

        assert response.endpoint_used == BACKUP
        assert provider.stats[PRIMARY].failed_requests == 1
        assert provider.stats[BACKUP].successful_requests == 1

    @pytest.mark.asyncio
    async def test_rpc_error_fails_over(self):
        client = make_client({
            PRIMARY: {"error": {"code": -32000, "message": "header not found"}},
            BACKUP: {"result": "0x06"},
        })
        provider = RPCProvider("base", [PRIMARY, BACKUP], client=client)

        response = await provider.call("eth_call")

        assert response.result == "0x06"
        assert provider.stats[PRIMARY].last_error == "header not found"

    @pytest.mark.asyncio
    async def test_all_endpoints_fail(self):
        client = make_client({PRIMARY: 500, BACKUP: {"error": "rate limited"}})
        provider = RPCProvider("base", [PRIMARY, BACKUP], client=client)

        with pytest.raises(InfraError) as exc_info:
            await provider.call("eth_call")

        assert exc_info.value.code == ErrorCode.INFRA_RPC_ERROR
        assert exc_info.value.details["endpoints_tried"] == 2
        assert exc_info.value.details["chain"] == "base"

    @pytest.mark.asyncio
    async def test_timeout_reported_as_timeout(self):
        client = make_client({PRIMARY: httpx.ReadTimeout("slow")})
        provider = RPCProvider("ethereum", [PRIMARY], client=client)

        with pytest.raises(InfraError) as exc_info:
            await provider.call("eth_call")

        assert exc_info.value.code == ErrorCode.INFRA_TIMEOUT
        assert provider.get_stats_summary()[PRIMARY]["last_error"].startswith("Timeout")

    @pytest.mark.asyncio
    async def test_no_endpoints(self, monkeypatch):
        monkeypatch.delenv("MISSING_KEY", raising=False)
        provider = RPCProvider("ethereum", ["https://x.test/${MISSING_KEY}"])

        with pytest.raises(InfraError) as exc_info:
            await provider.call("eth_call")
        assert exc_info.value.details == {"chain": "ethereum"}

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = make_client({PRIMARY: {"result": "0x"}})
        provider = RPCProvider("ethereum", [PRIMARY], client=client)

        await provider.close()

        assert not client.is_closed
        await client.aclose()


class TestProviderRegistry:
    """Per-chain registry."""

    @pytest.mark.asyncio
    async def test_register_get_close(self):
        registry = ProviderRegistry()
        provider = registry.register("ethereum", [PRIMARY], timeout_seconds=3)

        assert registry.get("ethereum") is provider
        assert registry.get("solana") is None
        assert registry.chains == ["ethereum"]
        assert provider.timeout_seconds == 3

        await registry.close_all()
        assert registry.chains == []
