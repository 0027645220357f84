"""Main entry point - runs the API server."""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import uvicorn

from walletrelay.api.app import create_app
from walletrelay.config import Settings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_RETENTION_DAYS = 14


def configure_logging(settings: Settings) -> None:
    """Configure console logging plus a daily rotating log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            TimedRotatingFileHandler(
                log_dir / "combined.log",
                when="midnight",
                backupCount=LOG_RETENTION_DAYS,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def main():
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings)

    logger.info("Starting Wallet Relay...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Chain provider: {settings.chain_provider}, auth provider: {settings.auth_provider}")

    app = create_app(settings)

    logger.info(f"Server running on port {settings.api_port}")
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
