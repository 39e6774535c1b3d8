"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hyprdeposit import __version__
from hyprdeposit.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    mode = "DRY RUN" if settings.dry_run else "LIVE"
    logger.info(f"Starting hyprdeposit API ({mode}, {settings.environment})")
    yield
    logger.info("hyprdeposit API stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="hyprdeposit API",
        description="Plans deposits from balances scattered across chains",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from hyprdeposit.api.routes import health
    from hyprdeposit.web.controllers import deposits_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(deposits_router, prefix="/api/v1", tags=["Deposits"])

    return app
