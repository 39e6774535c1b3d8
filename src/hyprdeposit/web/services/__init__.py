"""Services backing the web API."""

from hyprdeposit.web.services.deposit_service import DepositService

__all__ = ["DepositService"]
