"""
chains/providers.py - JSON-RPC provider with failover.

Read-only access (eth_call) for the quote sources:
- endpoints tried in configured order, one shared httpx.AsyncClient
- per-endpoint counters for the session summary

Error mapping:
- transport failure / timeout / HTTP error / non-JSON body -> try next endpoint,
  NetworkError once every endpoint failed
- execution reverted -> ContractRevertedError immediately (no failover,
  every honest node would answer the same)
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

import httpx

from core.constants import DEFAULT_RPC_TIMEOUT_SECONDS
from core.exceptions import ContractRevertedError, NetworkError
from core.logging import get_logger
from core.time import elapsed_ms, now_ms

logger = get_logger(__name__)

# JSON-RPC error code used by geth-compatible nodes for reverts
EXECUTION_REVERTED_CODE = 3


@dataclass
class RPCStats:
    """Per-endpoint counters, reported in the session summary."""
    url: str
    requests: int = 0
    successes: int = 0
    failures: int = 0
    latency_sum_ms: int = 0
    last_error: str | None = None
    last_ok_ms: int | None = None

    def record_success(self, latency_ms: int) -> None:
        self.successes += 1
        self.latency_sum_ms += latency_ms
        self.last_ok_ms = now_ms()

    @property
    def avg_latency_ms(self) -> int:
        return self.latency_sum_ms // self.successes if self.successes else 0

    @property
    def success_rate(self) -> float:
        return self.successes / self.requests if self.requests else 0.0


@dataclass
class RPCResponse:
    """Result of a JSON-RPC call and the endpoint that answered it."""
    result: Any
    latency_ms: int
    endpoint_used: str


def is_revert_error(error: dict) -> bool:
    """True when a JSON-RPC error object describes a reverted call."""
    if error.get("code") == EXECUTION_REVERTED_CODE:
        return True
    message = str(error.get("message", "")).lower()
    return "revert" in message


def redact_url(url: str) -> str:
    """Drop the path (often an API key) from an RPC URL for logging."""
    parsed = httpx.URL(url)
    return f"{parsed.scheme}://{parsed.host}"


class RPCProvider:
    """
    JSON-RPC client for one chain.

    transport is for tests (httpx.MockTransport); production uses the
    default network transport. timeout_seconds bounds each attempt, so it
    must leave room for the remaining endpoints inside a caller's own
    deadline.
    """

    def __init__(
        self,
        chain_id: int,
        rpc_urls: list[str],
        timeout_seconds: float = DEFAULT_RPC_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.chain_id = chain_id
        self.rpc_urls = list(rpc_urls)
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._request_id = 0

        self.stats = {url: RPCStats(url=url) for url in self.rpc_urls}

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazily open the shared client."""
        if self._client is None:
            # Two quote calls per cycle at most
            self._client = httpx.AsyncClient(
                timeout=self.timeout_seconds,
                limits=httpx.Limits(max_connections=4),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Release the shared client; safe to call twice."""
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    def _request_id_next(self) -> int:
        self._request_id += 1
        return self._request_id

    async def call(
        self,
        method: str,
        params: list | None = None,
    ) -> RPCResponse:
        """
        Make an RPC call, failing over through the endpoints in order.

        Raises:
            ContractRevertedError: If the node reports the call reverted
            NetworkError: If all endpoints fail
        """
        if not self.rpc_urls:
            raise NetworkError(
                "No RPC endpoints configured",
                details={"chain_id": self.chain_id},
            )

        client = await self._get_client()
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._request_id_next(),
        }

        for url in self.rpc_urls:
            response = await self._attempt(client, url, payload)
            if response is not None:
                return response

        raise NetworkError(
            f"All RPC endpoints failed for chain {self.chain_id}",
            details={
                "chain_id": self.chain_id,
                "method": method,
                "endpoints_tried": len(self.rpc_urls),
                "last_error": self.stats[self.rpc_urls[-1]].last_error,
            },
        )

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        payload: dict,
    ) -> RPCResponse | None:
        """
        Send one request to one endpoint.

        Returns None when the endpoint could not answer (reason kept in its
        stats). A revert is an answer, so it raises instead.
        """
        stats = self.stats[url]
        stats.requests += 1
        started = time.monotonic()

        try:
            # httpx times each phase separately; this bounds the whole attempt
            resp = await asyncio.wait_for(client.post(url, json=payload), timeout=self.timeout_seconds)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return self._endpoint_failed(url, f"Timeout after {elapsed_ms(started)}ms")
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers a body that is not JSON
            return self._endpoint_failed(url, f"{type(e).__name__}: {e}")

        latency_ms = elapsed_ms(started)

        if not isinstance(body, dict):
            return self._endpoint_failed(url, "Malformed JSON-RPC response")

        error = body.get("error")
        if error is not None:
            if not isinstance(error, dict):
                error = {"message": str(error)}

            if is_revert_error(error):
                stats.record_success(latency_ms)
                raise ContractRevertedError(
                    f"Call reverted: {error.get('message', 'execution reverted')}",
                    details={
                        "endpoint": redact_url(url),
                        "method": payload["method"],
                        "rpc_error_code": error.get("code"),
                        "revert_data": error.get("data"),
                    },
                )

            return self._endpoint_failed(url, f"RPC error: {error.get('message', error)}")

        stats.record_success(latency_ms)
        return RPCResponse(
            result=body.get("result"),
            latency_ms=latency_ms,
            endpoint_used=url,
        )

    def _endpoint_failed(self, url: str, reason: str) -> None:
        stats = self.stats[url]
        stats.failures += 1
        stats.last_error = reason
        logger.debug(
            f"RPC endpoint {redact_url(url)} failed: {reason}",
            extra={"context": {"chain_id": self.chain_id}},
        )
        return None

    async def eth_call(
        self,
        to: str,
        data: str,
        block: str = "latest",
    ) -> RPCResponse:
        """Read-only contract call; result is the raw 0x-prefixed return data."""
        call_object = {"to": to, "data": data}
        return await self.call("eth_call", [call_object, block])

    def get_stats_summary(self) -> dict:
        """Counters for every endpoint, keyed by redacted URL."""
        return {
            redact_url(url): {
                "requests": s.requests,
                "success_rate": round(s.success_rate, 3),
                "avg_latency_ms": s.avg_latency_ms,
                "last_error": s.last_error,
            }
            for url, s in self.stats.items()
        }
