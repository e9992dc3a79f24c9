"""
chains/providers.py - JSON-RPC transport for EVM contract reads.

Each chain gets an RPCProvider holding an ordered list of endpoints. A call
walks the list until one endpoint answers; per-endpoint counters are kept
for the end-of-run summary.
"""

import os
from dataclasses import dataclass
from typing import Any

import httpx

from core.constants import ErrorCode
from core.exceptions import InfraError
from core.logging import get_logger
from core.time import elapsed_ms, now_ms

logger = get_logger(__name__)


@dataclass
class RPCStats:
    """Counters for one endpoint."""
    url: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_latency_ms: int = 0
    last_error: str | None = None

    @property
    def avg_latency_ms(self) -> int:
        if not self.successful_requests:
            return 0
        return self.total_latency_ms // self.successful_requests

    def record_success(self, latency_ms: int) -> None:
        self.total_requests += 1
        self.successful_requests += 1
        self.total_latency_ms += latency_ms

    def record_failure(self, error: str) -> None:
        self.total_requests += 1
        self.failed_requests += 1
        self.last_error = error

    def to_dict(self) -> dict:
        return {
            "total_requests": self.total_requests,
            "failed_requests": self.failed_requests,
            "avg_latency_ms": self.avg_latency_ms,
            "last_error": self.last_error,
        }


@dataclass
class RPCResponse:
    """Successful JSON-RPC result and where it came from."""
    result: Any
    latency_ms: int
    endpoint_used: str


def resolve_env_placeholders(urls: list[str]) -> list[str]:
    """
    Expand ${VAR} placeholders (e.g. ${ALCHEMY_API_KEY}) from the environment.

    URLs still holding a placeholder after expansion are dropped.
    """
    resolved = []
    for url in urls:
        expanded = os.path.expandvars(url)
        if "${" in expanded:
            logger.debug(
                "Dropping RPC URL with unresolved placeholder",
                extra={"context": {"url": url}},
            )
            continue
        resolved.append(expanded)
    return resolved


def _rpc_error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message", error))
    return str(error)


class RPCProvider:
    """
    Ordered-failover JSON-RPC client for one chain.

    Endpoints are tried in configuration order; the first success wins.
    An injected httpx client is shared and left open on close().
    """

    def __init__(
        self,
        chain: str,
        rpc_urls: list[str],
        timeout_seconds: int = 10,
        client: httpx.AsyncClient | None = None,
    ):
        self.chain = chain
        self.timeout_seconds = timeout_seconds
        self.rpc_urls = resolve_env_placeholders(rpc_urls)
        self.stats: dict[str, RPCStats] = {url: RPCStats(url=url) for url in self.rpc_urls}

        self._client = client
        self._owns_client = client is None
        self._request_id = 0

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                limits=httpx.Limits(max_connections=10),
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _attempt(self, url: str, method: str, params: list) -> RPCResponse:
        """
        One request against one endpoint.

        Raises:
            InfraError: INFRA_TIMEOUT or INFRA_RPC_ERROR; stats are updated
        """
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        stats = self.stats[url]
        started_ms = now_ms()

        try:
            resp = await self._http().post(url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.TimeoutException:
            waited_ms = elapsed_ms(started_ms)
            stats.record_failure(f"Timeout after {waited_ms}ms")
            raise InfraError(
                f"RPC timeout after {waited_ms}ms",
                code=ErrorCode.INFRA_TIMEOUT,
                details={"url": url, "method": method},
            )
        except (httpx.HTTPError, ValueError) as e:
            stats.record_failure(str(e))
            raise InfraError(f"RPC request failed: {e}", details={"url": url, "method": method})

        if not isinstance(body, dict) or "error" in body:
            message = _rpc_error_message(body.get("error") if isinstance(body, dict) else body)
            stats.record_failure(message)
            raise InfraError(f"RPC error: {message}", details={"url": url, "method": method})

        latency_ms = elapsed_ms(started_ms)
        stats.record_success(latency_ms)
        return RPCResponse(result=body.get("result"), latency_ms=latency_ms, endpoint_used=url)

    async def call(self, method: str, params: list | None = None) -> RPCResponse:
        """
        JSON-RPC call with failover across endpoints.

        Raises:
            InfraError: No endpoint configured, or every endpoint failed.
                The code of the last failure (timeout or RPC error) is kept.
        """
        if not self.rpc_urls:
            raise InfraError("No RPC endpoints configured", details={"chain": self.chain})

        failures: list[InfraError] = []
        for url in self.rpc_urls:
            try:
                return await self._attempt(url, method, params or [])
            except InfraError as e:
                failures.append(e)
                logger.debug(
                    f"RPC endpoint failed, trying next: {e.message}",
                    extra={"context": {"chain": self.chain, "url": url, "method": method}},
                )

        last = failures[-1]
        raise InfraError(
            f"All RPC endpoints failed for chain {self.chain}",
            code=last.code,
            details={
                "chain": self.chain,
                "method": method,
                "endpoints_tried": len(failures),
                "last_error": last.message,
            },
        )

    async def eth_call(self, to: str, data: str, block: str = "latest") -> RPCResponse:
        """Read-only contract call."""
        return await self.call("eth_call", [{"to": to, "data": data}, block])

    def get_stats_summary(self) -> dict:
        """Per-endpoint counters keyed by URL."""
        return {url: stats.to_dict() for url, stats in self.stats.items()}


class ProviderRegistry:
    """Chain name -> RPCProvider, built once per process by the caller."""

    def __init__(self):
        self._providers: dict[str, RPCProvider] = {}

    def register(
        self,
        chain: str,
        rpc_urls: list[str],
        timeout_seconds: int = 10,
        client: httpx.AsyncClient | None = None,
    ) -> RPCProvider:
        provider = RPCProvider(chain, rpc_urls, timeout_seconds, client)
        self._providers[chain] = provider
        return provider

    def get(self, chain: str) -> RPCProvider | None:
        return self._providers.get(chain)

    async def close_all(self) -> None:
        for provider in self._providers.values():
            await provider.close()
        self._providers.clear()

    @property
    def chains(self) -> list[str]:
        return list(self._providers)
