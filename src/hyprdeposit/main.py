"""Main entry point - runs the planning API."""

import asyncio
import logging
from typing import Optional

import uvicorn

from hyprdeposit.api.app import create_app
from hyprdeposit.config import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging once for the process."""
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run_api(settings: Settings) -> None:
    """Run the FastAPI server."""
    config = uvicorn.Config(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting API server on {settings.api_host}:{settings.api_port}")
    await server.serve()


def main():
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings)

    logger.info("Starting hyprdeposit...")
    logger.info(f"Environment: {settings.environment}")
    if settings.dry_run:
        logger.warning("DRY RUN mode: quotes and execution are simulated")

    try:
        asyncio.run(run_api(settings))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")


if __name__ == "__main__":
    main()
