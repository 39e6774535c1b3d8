"""Health check endpoints."""

from fastapi import APIRouter

from hyprdeposit import __version__
from hyprdeposit.chains import SUPPORTED_CHAINS
from hyprdeposit.config import get_settings

router = APIRouter()


def _mode() -> str:
    return "dry_run" if get_settings().dry_run else "live"


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "hyprdeposit", "mode": _mode()}


@router.get("/health/detailed")
async def detailed_health():
    """Health plus the deposit destination and the chains that get scanned."""
    settings = get_settings()
    destination = SUPPORTED_CHAINS.get(settings.destination_chain_id)
    return {
        "status": "healthy",
        "service": "hyprdeposit",
        "version": __version__,
        "mode": _mode(),
        "destination_chain": destination.name if destination else None,
        "chains": sorted(chain.name for chain in SUPPORTED_CHAINS.values()),
        "config": settings.get_safe_dict(),
    }
