"""Minimal EVM JSON-RPC client over httpx.

Covers the handful of calls the balance reader and the local wallet need,
plus ERC-20 calldata encoding.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

# ERC-20 function selectors
BALANCE_OF_SELECTOR = "0x70a08231"
ALLOWANCE_SELECTOR = "0xdd62ed3e"
APPROVE_SELECTOR = "0x095ea7b3"
TRANSFER_SELECTOR = "0xa9059cbb"


class RpcError(Exception):
    """Raised when a JSON-RPC call fails or returns an error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


def _pad_address(address: str) -> str:
    return address.lower().replace("0x", "").zfill(64)


def _pad_uint(value: int) -> str:
    return format(value, "x").zfill(64)


def encode_balance_of(owner: str) -> str:
    """Encode balanceOf(owner) calldata."""
    return f"{BALANCE_OF_SELECTOR}{_pad_address(owner)}"


def encode_allowance(owner: str, spender: str) -> str:
    """Encode allowance(owner, spender) calldata."""
    return f"{ALLOWANCE_SELECTOR}{_pad_address(owner)}{_pad_address(spender)}"


def encode_approve(spender: str, amount: int) -> str:
    """Encode approve(spender, amount) calldata."""
    return f"{APPROVE_SELECTOR}{_pad_address(spender)}{_pad_uint(amount)}"


def encode_transfer(to: str, amount: int) -> str:
    """Encode transfer(to, amount) calldata."""
    return f"{TRANSFER_SELECTOR}{_pad_address(to)}{_pad_uint(amount)}"


def decode_uint(result: str) -> int:
    """Decode a hex quantity or a 32-byte word."""
    if not result or result == "0x":
        return 0
    return int(result, 16)


class JsonRpcClient:
    """JSON-RPC client bound to one chain endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport
        self._request_id = 0

    async def call(self, method: str, params: list) -> Any:
        """Execute a JSON-RPC call and return its result.

        Raises:
            RpcError: On transport failure, non-200 status or RPC error
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise RpcError(f"{method} failed: network error: {e}") from e

        if response.status_code != 200:
            raise RpcError(f"{method} failed: HTTP {response.status_code}")

        data = response.json()
        if "error" in data and data["error"]:
            error = data["error"]
            raise RpcError(
                f"{method} failed: {error.get('message', error)}",
                code=error.get("code"),
            )

        return data.get("result")

    async def get_balance(self, address: str) -> int:
        """Native balance in wei."""
        return decode_uint(await self.call("eth_getBalance", [address, "latest"]))

    async def eth_call(self, to: str, data: str) -> str:
        return await self.call("eth_call", [{"to": to, "data": data}, "latest"])

    async def get_token_balance(self, token_address: str, owner: str) -> int:
        """ERC-20 balance in raw units."""
        return decode_uint(await self.eth_call(token_address, encode_balance_of(owner)))

    async def get_allowance(self, token_address: str, owner: str, spender: str) -> int:
        return decode_uint(await self.eth_call(token_address, encode_allowance(owner, spender)))

    async def get_transaction_count(self, address: str) -> int:
        return decode_uint(await self.call("eth_getTransactionCount", [address, "pending"]))

    async def get_gas_price(self) -> int:
        return decode_uint(await self.call("eth_gasPrice", []))

    async def estimate_gas(self, tx: dict) -> int:
        return decode_uint(await self.call("eth_estimateGas", [tx]))

    async def send_raw_transaction(self, raw_tx_hex: str) -> str:
        if not raw_tx_hex.startswith("0x"):
            raw_tx_hex = f"0x{raw_tx_hex}"
        return await self.call("eth_sendRawTransaction", [raw_tx_hex])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return await self.call("eth_getTransactionReceipt", [tx_hash])
