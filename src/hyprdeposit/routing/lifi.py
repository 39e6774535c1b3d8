"""LI.FI bridge aggregator integration.

Quotes come from ``GET /quote``, prices from ``GET /token`` and transfer
status from ``GET /status``. Execution signs the quoted transaction
request through a wallet signer.
API docs: https://docs.li.fi/li.fi-api/li.fi-api
"""

import asyncio
import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Optional

import httpx

from hyprdeposit.chains import is_native_token
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.routing.base import (
    DEFAULT_EXECUTION_TIME_SECONDS,
    BridgeProvider,
    ExecutionCallback,
    ExecutionError,
    ExecutionPhase,
    ExecutionUpdate,
    NoRouteError,
    Quote,
    TransientQuoteError,
)
from hyprdeposit.rpc import encode_approve
from hyprdeposit.utils import notify
from hyprdeposit.wallet.base import WalletSigner

logger = logging.getLogger(__name__)

LIFI_EXPLORER_URL = "https://scan.li.fi/tx"

# HTTP statuses worth retrying later
TRANSIENT_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


def _sum_usd(costs: Optional[list]) -> Decimal:
    total = Decimal("0")
    for cost in costs or []:
        try:
            total += Decimal(str(cost.get("amountUSD") or "0"))
        except InvalidOperation:
            continue
    return total


def _to_int(value) -> int:
    if value is None:
        return 0
    if isinstance(value, str) and value.startswith("0x"):
        return int(value, 16)
    return int(value)


class LiFiProvider(BridgeProvider):
    """Cross-chain routes via the LI.FI aggregator."""

    def __init__(
        self,
        wallet: Optional[WalletSigner] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize LI.FI provider.

        Args:
            wallet: Signer used to execute routes (quotes work without one)
            settings: Application settings
            transport: Optional httpx transport (tests)
        """
        self.settings = settings or get_settings()
        self.wallet = wallet
        self.base_url = self.settings.lifi_api_url.rstrip("/")
        self._transport = transport

    @property
    def name(self) -> str:
        return "LI.FI"

    def _get_headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.settings.lifi_api_key:
            headers["x-lifi-api-key"] = self.settings.lifi_api_key
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.quote_timeout_seconds,
            transport=self._transport,
            headers=self._get_headers(),
        )

    async def get_quote(
        self,
        from_chain_id: int,
        to_chain_id: int,
        from_token: str,
        to_token: str,
        from_amount: int,
        from_address: str,
        slippage: Decimal,
    ) -> Quote:
        params = {
            "fromChain": str(from_chain_id),
            "toChain": str(to_chain_id),
            "fromToken": from_token,
            "toToken": to_token,
            "fromAmount": str(from_amount),
            "fromAddress": from_address,
            "slippage": str(slippage),
            "integrator": self.settings.lifi_integrator,
        }

        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/quote", params=params)
        except httpx.HTTPError as e:
            raise TransientQuoteError(f"LI.FI quote request failed: {e}") from e

        if response.status_code in TRANSIENT_STATUS_CODES:
            raise TransientQuoteError(f"LI.FI API error: {response.status_code}")

        if response.status_code != 200:
            message = response.text
            try:
                message = response.json().get("message", message)
            except (ValueError, AttributeError):
                pass
            raise NoRouteError(f"No route from chain {from_chain_id}: {message}")

        try:
            return self._parse_quote(
                response.json(), from_chain_id, to_chain_id, from_token, to_token, from_amount
            )
        except (ValueError, TypeError, AttributeError, InvalidOperation) as e:
            raise NoRouteError(f"Malformed LI.FI quote from chain {from_chain_id}: {e}") from e

    def _parse_quote(
        self,
        data: dict,
        from_chain_id: int,
        to_chain_id: int,
        from_token: str,
        to_token: str,
        from_amount: int,
    ) -> Quote:
        estimate = data.get("estimate") or {}
        if "toAmount" not in estimate:
            raise NoRouteError("LI.FI quote has no output estimate")

        to_amount = int(estimate["toAmount"])
        to_token_info = (data.get("action") or {}).get("toToken") or {}

        return Quote(
            provider=self.name,
            from_chain_id=from_chain_id,
            to_chain_id=to_chain_id,
            from_token=from_token,
            to_token=to_token,
            from_amount=int(estimate.get("fromAmount") or from_amount),
            to_amount=to_amount,
            to_amount_min=int(estimate.get("toAmountMin") or to_amount),
            to_token_decimals=int(
                to_token_info.get("decimals", self.settings.destination_token_decimals)
            ),
            execution_time_seconds=int(
                estimate.get("executionDuration") or DEFAULT_EXECUTION_TIME_SECONDS
            ),
            fee_costs_usd=_sum_usd(estimate.get("feeCosts")),
            gas_costs_usd=_sum_usd(estimate.get("gasCosts")),
            tool=data.get("tool"),
            route=data,
        )

    async def get_token_price(self, chain_id: int, token_address: str) -> Optional[Decimal]:
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/token",
                    params={"chain": str(chain_id), "token": token_address},
                )
        except httpx.HTTPError as e:
            logger.warning(f"LI.FI price lookup failed for {token_address} on {chain_id}: {e}")
            return None

        if response.status_code != 200:
            logger.debug(f"No LI.FI price for {token_address} on {chain_id}: {response.status_code}")
            return None

        try:
            price = response.json().get("priceUSD")
            if price in (None, ""):
                return None
            return Decimal(str(price))
        except (ValueError, AttributeError, InvalidOperation) as e:
            logger.warning(f"Unreadable LI.FI price for {token_address} on {chain_id}: {e}")
            return None

    async def execute_route(self, quote: Quote, on_progress: ExecutionCallback) -> None:
        if self.wallet is None:
            raise ExecutionError("LI.FI execution requires a wallet signer")

        tx_request = quote.route.get("transactionRequest")
        if not tx_request:
            raise ExecutionError("Quote has no transaction request")

        await notify(
            on_progress,
            ExecutionUpdate(ExecutionPhase.ACTION_REQUIRED, "Waiting for wallet signature"),
        )

        await self._ensure_allowance(quote)

        tx_hash = await self.wallet.send_transaction(
            chain_id=quote.from_chain_id,
            to=tx_request["to"],
            data=tx_request.get("data", "0x"),
            value=_to_int(tx_request.get("value")),
            gas_limit=_to_int(tx_request["gasLimit"]) if tx_request.get("gasLimit") else None,
        )
        tx_link = f"{LIFI_EXPLORER_URL}/{tx_hash}"

        await notify(
            on_progress,
            ExecutionUpdate(ExecutionPhase.STARTED, "Bridge transaction submitted", tx_hash, tx_link),
        )

        receipt = await self.wallet.wait_for_receipt(quote.from_chain_id, tx_hash)
        if not receipt.success:
            raise ExecutionError("Bridge transaction reverted", tx_hash=tx_hash)

        await self._wait_for_completion(quote, tx_hash, tx_link, on_progress)

    async def _ensure_allowance(self, quote: Quote) -> None:
        """Approve the route's spender when the current allowance is short."""
        approval_address = (quote.route.get("estimate") or {}).get("approvalAddress")
        if not approval_address or is_native_token(quote.from_token):
            return

        allowance = await self.wallet.get_allowance(
            quote.from_chain_id, quote.from_token, approval_address
        )
        if allowance >= quote.from_amount:
            return

        logger.info(f"Approving {approval_address} for {quote.from_amount} on chain {quote.from_chain_id}")
        tx_hash = await self.wallet.send_transaction(
            chain_id=quote.from_chain_id,
            to=quote.from_token,
            data=encode_approve(approval_address, quote.from_amount),
        )
        receipt = await self.wallet.wait_for_receipt(quote.from_chain_id, tx_hash)
        if not receipt.success:
            raise ExecutionError("Token approval reverted", tx_hash=tx_hash)

    async def _wait_for_completion(
        self,
        quote: Quote,
        tx_hash: str,
        tx_link: str,
        on_progress: ExecutionCallback,
    ) -> None:
        """Poll the status endpoint until the transfer is DONE or FAILED."""
        deadline = time.monotonic() + self.settings.status_poll_timeout_seconds
        params = {
            "txHash": tx_hash,
            "fromChain": str(quote.from_chain_id),
            "toChain": str(quote.to_chain_id),
        }
        if quote.tool:
            params["bridge"] = quote.tool

        reported_pending = False
        while time.monotonic() < deadline:
            try:
                async with self._client() as client:
                    response = await client.get(f"{self.base_url}/status", params=params)
                data = response.json() if response.status_code == 200 else {}
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"LI.FI status check failed for {tx_hash}: {e}")
                data = {}

            status = data.get("status")
            if status == "DONE":
                receiving = (data.get("receiving") or {}).get("txLink") or tx_link
                await notify(
                    on_progress,
                    ExecutionUpdate(ExecutionPhase.DONE, "Bridge complete", tx_hash, receiving),
                )
                return

            if status == "FAILED":
                reason = data.get("substatusMessage") or data.get("substatus") or "bridge failed"
                raise ExecutionError(f"Bridge transfer failed: {reason}", tx_hash=tx_hash)

            if status == "PENDING" and not reported_pending:
                reported_pending = True
                await notify(
                    on_progress,
                    ExecutionUpdate(ExecutionPhase.PENDING, "Bridging in progress", tx_hash, tx_link),
                )

            await asyncio.sleep(self.settings.status_poll_interval_seconds)

        raise ExecutionError("Timed out waiting for bridge completion", tx_hash=tx_hash)
