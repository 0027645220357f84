"""Request rate limiting."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from walletrelay.config import Settings

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."
DEFAULT_WALLET_RATE_LIMIT = "100/15 minutes"

limiter = Limiter(key_func=get_remote_address)

# Set from the settings the app was created with
_wallet_rate_limit = DEFAULT_WALLET_RATE_LIMIT


def configure_rate_limits(settings: Settings) -> None:
    """Apply the limits configured for an application."""
    global _wallet_rate_limit
    _wallet_rate_limit = settings.rate_limit_wallet


def wallet_rate_limit() -> str:
    """Limit string for POST /wallet, read at request time."""
    return _wallet_rate_limit


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content={"error": RATE_LIMIT_MESSAGE})
