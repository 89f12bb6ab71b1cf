import logging
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..core.errors import RpcError
from ..services.evm import wei_to_eth
from .base import RpcProvider


logger = logging.getLogger(__name__)


class SepoliaRpcProvider(RpcProvider):
    """JSON-RPC client for the Sepolia test network"""

    name = "sepolia"

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        chain_id: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = rpc_url or settings.sepolia_rpc_url
        self.chain_id = chain_id or settings.sepolia_chain_id
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=settings.rpc_connect_timeout_seconds,
                read=settings.rpc_read_timeout_seconds,
                write=settings.rpc_write_timeout_seconds,
                pool=settings.rpc_connect_timeout_seconds,
            )
        )
        self._request_id = 0
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def _rpc_call(self, method: str, params: List[Any]) -> Any:
        """Make a JSON-RPC call and return its ``result``."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        response = await self._client.post(
            self.rpc_url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        data = response.json()

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(
                    f"RPC error in {method}: {error.get('message', error)}",
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(f"RPC error in {method}: {error}")

        if "result" not in data:
            raise RpcError(f"RPC response for {method} has no result")
        return data["result"]

    @staticmethod
    def _quantity(method: str, value: Any) -> int:
        if not isinstance(value, str) or not value.startswith("0x"):
            raise RpcError(f"RPC {method} returned a non-quantity result: {value!r}")
        try:
            return int(value, 16)
        except ValueError as e:
            raise RpcError(f"RPC {method} returned a malformed quantity: {value!r}") from e

    async def get_gas_price(self) -> int:
        result = await self._rpc_call("eth_gasPrice", [])
        return self._quantity("eth_gasPrice", result)

    async def get_balance_wei(self, address: str) -> int:
        result = await self._rpc_call("eth_getBalance", [address, "latest"])
        return self._quantity("eth_getBalance", result)

    async def get_balance(self, address: str) -> Decimal:
        return wei_to_eth(await self.get_balance_wei(address))

    async def get_chain_id(self) -> int:
        result = await self._rpc_call("eth_chainId", [])
        return self._quantity("eth_chainId", result)

    async def health_check(self) -> Dict[str, Any]:
        """Probe the endpoint and confirm it serves the expected chain."""
        started = time.perf_counter()
        try:
            remote_chain_id = await self.get_chain_id()
        except Exception as e:
            logger.warning(f"Sepolia RPC health check failed: {e}")
            return {"status": "error", "reason": str(e)}

        latency_ms = int((time.perf_counter() - started) * 1000)
        if remote_chain_id != self.chain_id:
            return {
                "status": "error",
                "reason": f"endpoint serves chain {remote_chain_id}, expected {self.chain_id}",
                "latency_ms": latency_ms,
            }
        return {"status": "healthy", "chain_id": remote_chain_id, "latency_ms": latency_ms}

    async def close(self) -> None:
        """Close HTTP client. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()
