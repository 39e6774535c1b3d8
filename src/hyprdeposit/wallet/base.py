"""Wallet signer interface.

The signer owns the user's key (or the connection to the user's wallet)
and is the only component allowed to submit transactions.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from hyprdeposit.chains import is_native_token
from hyprdeposit.exceptions import ExecutionError
from hyprdeposit.rpc import encode_transfer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TxReceipt:
    """Outcome of a mined transaction."""

    tx_hash: str
    chain_id: int
    success: bool
    block_number: Optional[int] = None


class WalletSigner(ABC):
    """Abstract base class for transaction signers."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Address funds are sent from."""
        pass

    @abstractmethod
    async def send_transaction(
        self,
        chain_id: int,
        to: str,
        data: str = "0x",
        value: int = 0,
        gas_limit: Optional[int] = None,
    ) -> str:
        """
        Sign and broadcast a transaction.

        Returns:
            Transaction hash

        Raises:
            UserRejectedError: If the signature was refused
            ExecutionError: If signing or broadcasting failed
        """
        pass

    @abstractmethod
    async def wait_for_receipt(
        self, chain_id: int, tx_hash: str, timeout: float = 180.0
    ) -> TxReceipt:
        """Wait until a transaction is mined."""
        pass

    @abstractmethod
    async def get_balance(self, chain_id: int, token_address: str) -> int:
        """Raw balance of an asset held by this wallet."""
        pass

    @abstractmethod
    async def get_allowance(self, chain_id: int, token_address: str, spender: str) -> int:
        """Raw ERC-20 allowance granted by this wallet to ``spender``."""
        pass

    async def transfer(
        self,
        chain_id: int,
        token_address: str,
        to: str,
        amount: int,
    ) -> TxReceipt:
        """Send ``amount`` raw units of an asset and wait for it to be mined.

        Raises:
            ExecutionError: If the transfer reverted
        """
        if is_native_token(token_address):
            tx_hash = await self.send_transaction(chain_id, to, value=amount)
        else:
            tx_hash = await self.send_transaction(
                chain_id, token_address, data=encode_transfer(to, amount)
            )

        logger.info(f"Transfer submitted on chain {chain_id}: {tx_hash}")
        receipt = await self.wait_for_receipt(chain_id, tx_hash)
        if not receipt.success:
            raise ExecutionError("Transfer transaction reverted", tx_hash=tx_hash)
        return receipt
