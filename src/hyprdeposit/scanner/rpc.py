"""Balance reader backed by each chain's JSON-RPC endpoint."""

import logging
from typing import Optional

import httpx

from hyprdeposit.chains import ChainInfo, TokenInfo
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.rpc import JsonRpcClient, RpcError
from hyprdeposit.scanner.base import BalanceFetchError, BalanceReader, RawBalance

logger = logging.getLogger(__name__)


class RpcBalanceReader(BalanceReader):
    """Reads native balances via eth_getBalance and tokens via balanceOf."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._clients: dict[int, JsonRpcClient] = {}

    def _client(self, chain: ChainInfo) -> JsonRpcClient:
        if chain.id not in self._clients:
            rpc_url = self.settings.get_rpc_url(chain.id) or chain.rpc_url
            self._clients[chain.id] = JsonRpcClient(rpc_url, transport=self._transport)
        return self._clients[chain.id]

    async def get_balance(
        self,
        wallet_address: str,
        chain: ChainInfo,
        token: TokenInfo,
    ) -> RawBalance:
        client = self._client(chain)

        try:
            if token.is_native:
                raw = await client.get_balance(wallet_address)
            else:
                raw = await client.get_token_balance(token.address, wallet_address)
        except RpcError as e:
            raise BalanceFetchError(chain.id, token.symbol, str(e)) from e

        logger.debug(f"{token.symbol} on {chain.name}: {raw} raw units")
        return RawBalance(raw_amount=raw, decimals=token.decimals)
