"""FastAPI dependency providers.

Services are built once by the app factory and kept on ``app.state``;
these providers hand them to route handlers so tests can override them.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from walletrelay.auth import IdentityVerifier, TokenVerificationError
from walletrelay.errors import UnauthorizedError
from walletrelay.services import BalanceQueryService, WalletProvisioningService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_provisioning_service(request: Request) -> WalletProvisioningService:
    return request.app.state.provisioning_service


def get_balance_service(request: Request) -> BalanceQueryService:
    return request.app.state.balance_service


async def get_current_user_id(
    authorization: Optional[str] = Header(None),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> str:
    """Verify the bearer credential and return the caller's user ID."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        logger.error("Missing or invalid authorization header")
        raise UnauthorizedError("Missing or invalid authorization header")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        logger.error("Missing or invalid authorization header")
        raise UnauthorizedError("Empty bearer token")

    try:
        return await verifier.verify(token)
    except TokenVerificationError as e:
        logger.error(f"Token verification failed: {e}")
        raise UnauthorizedError(str(e)) from e
