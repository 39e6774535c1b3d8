"""Simulated wallet for dry-run mode and tests."""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from hyprdeposit.wallet.base import TxReceipt, WalletSigner

logger = logging.getLogger(__name__)

DRY_RUN_ADDRESS = "0x000000000000000000000000000000000000dEaD"


@dataclass
class SentTransaction:
    chain_id: int
    to: str
    data: str
    value: int
    tx_hash: str


class DryRunWallet(WalletSigner):
    """Records transactions instead of broadcasting them.

    Balances are raw amounts keyed by (chain_id, lowercase token address).
    Bridge simulations credit the destination through ``credit``.
    """

    def __init__(
        self,
        address: str = DRY_RUN_ADDRESS,
        balances: Optional[dict[tuple[int, str], int]] = None,
    ):
        self._address = address
        self._balances: dict[tuple[int, str], int] = {}
        for (chain_id, token), amount in (balances or {}).items():
            self._balances[(chain_id, token.lower())] = amount
        self.sent: list[SentTransaction] = []

    @property
    def address(self) -> str:
        return self._address

    def credit(self, chain_id: int, token_address: str, amount: int) -> None:
        key = (chain_id, token_address.lower())
        self._balances[key] = self._balances.get(key, 0) + amount

    async def send_transaction(
        self,
        chain_id: int,
        to: str,
        data: str = "0x",
        value: int = 0,
        gas_limit: Optional[int] = None,
    ) -> str:
        tx_hash = f"0x{secrets.token_hex(32)}"
        self.sent.append(SentTransaction(chain_id, to, data, value, tx_hash))
        logger.info(f"[DRY RUN] Simulated tx on chain {chain_id} to {to}: {tx_hash}")
        return tx_hash

    async def wait_for_receipt(
        self, chain_id: int, tx_hash: str, timeout: float = 180.0
    ) -> TxReceipt:
        return TxReceipt(tx_hash=tx_hash, chain_id=chain_id, success=True)

    async def get_balance(self, chain_id: int, token_address: str) -> int:
        return self._balances.get((chain_id, token_address.lower()), 0)

    async def get_allowance(self, chain_id: int, token_address: str, spender: str) -> int:
        return 2**256 - 1

    async def transfer(
        self,
        chain_id: int,
        token_address: str,
        to: str,
        amount: int,
    ) -> TxReceipt:
        receipt = await super().transfer(chain_id, token_address, to, amount)
        self.credit(chain_id, token_address, -amount)
        return receipt
