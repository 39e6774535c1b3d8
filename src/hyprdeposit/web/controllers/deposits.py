"""Deposit planning endpoints.

SECURITY: These endpoints only scan and quote. They never sign or
broadcast; the client executes the chosen strategy with its own wallet.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from hyprdeposit.web.contracts.deposits import (
    BalancesRequest,
    BalancesResponse,
    PlanRequest,
    PlanResponse,
)
from hyprdeposit.web.services.deposit_service import DepositService, UnknownChainError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/deposits", tags=["deposits"])

# Service instance
_deposit_service = DepositService()


def get_deposit_service() -> DepositService:
    return _deposit_service


@router.post("/balances", response_model=BalancesResponse)
async def scan_balances(
    request: BalancesRequest,
    service: DepositService = Depends(get_deposit_service),
) -> BalancesResponse:
    """Scan native and stable balances across chains.

    Balances below the configured USD floor are omitted. Unreachable
    chains are skipped.
    """
    try:
        return await service.get_balances(request)
    except UnknownChainError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/plan", response_model=PlanResponse)
async def plan_deposit(
    request: PlanRequest,
    service: DepositService = Depends(get_deposit_service),
) -> PlanResponse:
    """Build a deposit plan with fastest and cheapest strategies.

    ``status`` is ``insufficient_funds`` or ``no_routes`` when no strategy
    can be built; ``recommended`` names the single strategy to present,
    or is null when the two are a genuine trade-off.
    """
    logger.info(f"Planning ${request.target_usd} deposit for {request.address[:10]}...")
    try:
        return await service.get_plan(request)
    except UnknownChainError as e:
        raise HTTPException(status_code=400, detail=str(e))
