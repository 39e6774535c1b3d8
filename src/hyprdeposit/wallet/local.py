"""Hot-wallet signer backed by eth-account.

Signs locally with a private key from settings and broadcasts raw
transactions over each chain's JSON-RPC endpoint.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx
from eth_account import Account

from hyprdeposit.chains import is_native_token
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.exceptions import ExecutionError
from hyprdeposit.rpc import JsonRpcClient, RpcError
from hyprdeposit.wallet.base import TxReceipt, WalletSigner

logger = logging.getLogger(__name__)

# Headroom added on top of eth_estimateGas
GAS_LIMIT_MULTIPLIER = 1.2


class LocalWallet(WalletSigner):
    """Signs with a private key held in process memory."""

    def __init__(
        self,
        private_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        poll_interval: float = 3.0,
    ):
        self.settings = settings or get_settings()
        key = private_key or self.settings.wallet_private_key
        if not key:
            raise ValueError("No private key configured for the local wallet")

        self._account = Account.from_key(key)
        self._transport = transport
        self.poll_interval = poll_interval
        self._clients: dict[int, JsonRpcClient] = {}

    @property
    def address(self) -> str:
        return self._account.address

    def _client(self, chain_id: int) -> JsonRpcClient:
        if chain_id not in self._clients:
            rpc_url = self.settings.get_rpc_url(chain_id)
            if not rpc_url:
                raise ExecutionError(f"No RPC endpoint configured for chain {chain_id}")
            self._clients[chain_id] = JsonRpcClient(rpc_url, transport=self._transport)
        return self._clients[chain_id]

    async def send_transaction(
        self,
        chain_id: int,
        to: str,
        data: str = "0x",
        value: int = 0,
        gas_limit: Optional[int] = None,
    ) -> str:
        client = self._client(chain_id)

        try:
            nonce = await client.get_transaction_count(self.address)
            gas_price = await client.get_gas_price()

            if gas_limit is None:
                estimate = await client.estimate_gas(
                    {"from": self.address, "to": to, "data": data, "value": hex(value)}
                )
                gas_limit = int(estimate * GAS_LIMIT_MULTIPLIER)

            tx = {
                "nonce": nonce,
                "to": to,
                "value": value,
                "gas": gas_limit,
                "gasPrice": gas_price,
                "data": data,
                "chainId": chain_id,
            }

            signed_tx = self._account.sign_transaction(tx)
            tx_hash = await client.send_raw_transaction(signed_tx.raw_transaction.hex())
        except RpcError as e:
            raise ExecutionError(f"Transaction failed on chain {chain_id}: {e}") from e

        logger.info(f"Broadcast tx on chain {chain_id}: {tx_hash}")
        return tx_hash

    async def wait_for_receipt(
        self, chain_id: int, tx_hash: str, timeout: float = 180.0
    ) -> TxReceipt:
        client = self._client(chain_id)
        deadline = time.monotonic() + timeout

        while time.monotonic() < deadline:
            try:
                receipt = await client.get_transaction_receipt(tx_hash)
            except RpcError as e:
                logger.warning(f"Receipt lookup failed for {tx_hash}: {e}")
                receipt = None

            if receipt:
                block = receipt.get("blockNumber")
                return TxReceipt(
                    tx_hash=tx_hash,
                    chain_id=chain_id,
                    success=receipt.get("status") == "0x1",
                    block_number=int(block, 16) if block else None,
                )

            await asyncio.sleep(self.poll_interval)

        raise ExecutionError(f"Timed out waiting for {tx_hash}", tx_hash=tx_hash)

    async def get_balance(self, chain_id: int, token_address: str) -> int:
        client = self._client(chain_id)
        try:
            if is_native_token(token_address):
                return await client.get_balance(self.address)
            return await client.get_token_balance(token_address, self.address)
        except RpcError as e:
            raise ExecutionError(f"Balance lookup failed on chain {chain_id}: {e}") from e

    async def get_allowance(self, chain_id: int, token_address: str, spender: str) -> int:
        try:
            return await self._client(chain_id).get_allowance(token_address, self.address, spender)
        except RpcError as e:
            raise ExecutionError(f"Allowance lookup failed on chain {chain_id}: {e}") from e
