"""EVM JSON-RPC client with fallback support."""
import itertools
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import NetworkConfig
from ...errors import RpcError

logger = logging.getLogger(__name__)


class _Reverted(Exception):
    def __init__(self, message: str, data: str | None) -> None:
        super().__init__(message)
        self.data = data


def _revert_data(error: dict[str, Any]) -> str | None:
    """Pull the revert payload out of a JSON-RPC error object, if any."""
    data = error.get("data")
    if isinstance(data, dict):
        data = data.get("data") or data.get("result")
    if isinstance(data, str) and data.startswith("0x"):
        return data
    return None


class EvmClient:
    """EVM RPC client with automatic endpoint fallback.

    Transport failures move on to the next endpoint; a revert is the
    contract's answer and is raised straight away.
    """

    def __init__(self, config: NetworkConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0
        self._ids = itertools.count(1)

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request, walking the endpoint list on transport errors."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        if "error" in result:
                            error = result["error"] or {}
                            revert = _revert_data(error)
                            message = error.get("message", "")
                            if revert is not None or "revert" in message.lower():
                                raise _Reverted(message, revert)
                            raise RuntimeError(f"RPC Error: {error}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except _Reverted as e:
                raise RpcError(f"Call reverted: {e}", revert_data=e.data) from e
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RpcError(f"All RPC endpoints failed. Last error: {last_error}")

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        """Execute a read-only contract call and return the hex result."""
        result = await self.rpc_call("eth_call", [{"to": to, "data": data}, block])
        if not isinstance(result, str):
            raise RpcError(f"Unexpected eth_call result: {result!r}")
        return result
