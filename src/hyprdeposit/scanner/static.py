"""Balance reader serving fixed balances.

Used in dry-run mode and for demos where no RPC access is wanted.
"""

from decimal import Decimal
from typing import Optional

from hyprdeposit.amounts import to_raw_amount
from hyprdeposit.chains import ChainInfo, TokenInfo
from hyprdeposit.scanner.base import BalanceFetchError, BalanceReader, RawBalance


class StaticBalanceReader(BalanceReader):
    """Serves balances from an in-memory table.

    Balances are keyed by (chain_id, lowercase token address) and given in
    human units. Chains listed in ``unreachable_chains`` raise
    BalanceFetchError like a dead RPC endpoint would.
    """

    def __init__(
        self,
        balances: Optional[dict[tuple[int, str], Decimal]] = None,
        unreachable_chains: Optional[set[int]] = None,
    ):
        self._balances: dict[tuple[int, str], Decimal] = {}
        for (chain_id, address), amount in (balances or {}).items():
            self.set_balance(chain_id, address, amount)
        self.unreachable_chains = set(unreachable_chains or ())

    def set_balance(self, chain_id: int, token_address: str, amount: Decimal) -> None:
        self._balances[(chain_id, token_address.lower())] = Decimal(amount)

    async def get_balance(
        self,
        wallet_address: str,
        chain: ChainInfo,
        token: TokenInfo,
    ) -> RawBalance:
        if chain.id in self.unreachable_chains:
            raise BalanceFetchError(chain.id, token.symbol, "chain unreachable")

        amount = self._balances.get((chain.id, token.address.lower()), Decimal("0"))
        return RawBalance(raw_amount=to_raw_amount(amount, token.decimals), decimals=token.decimals)
