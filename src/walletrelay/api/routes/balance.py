"""Balance endpoint."""

import logging

from fastapi import APIRouter, Depends

from walletrelay.api.dependencies import get_balance_service, get_current_user_id
from walletrelay.api.schemas import BalanceResponse, ErrorResponse
from walletrelay.errors import UnauthorizedError
from walletrelay.routing import format_amount
from walletrelay.services import BalanceQueryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/balance/{user_id}/{symbol}",
    response_model=BalanceResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_balance(
    user_id: str,
    symbol: str,
    current_user_id: str = Depends(get_current_user_id),
    service: BalanceQueryService = Depends(get_balance_service),
) -> BalanceResponse:
    """
    Get the balance of the caller's deposit address for a symbol.

    The path user ID must match the authenticated caller.
    """
    if user_id != current_user_id:
        logger.error(f"Balance request for user {user_id} by user {current_user_id}")
        raise UnauthorizedError("Path user does not match token")

    balance = await service.get_balance(current_user_id, symbol)
    return BalanceResponse(balance=format_amount(balance))
