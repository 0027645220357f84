"""Deposit address endpoint."""

from fastapi import APIRouter, Depends, Request

from walletrelay.api.dependencies import get_current_user_id, get_provisioning_service
from walletrelay.api.rate_limit import limiter, wallet_rate_limit
from walletrelay.api.schemas import ErrorResponse, WalletRequest, WalletResponse
from walletrelay.errors import InvalidSymbolError
from walletrelay.services import WalletProvisioningService

router = APIRouter()


async def read_wallet_request(request: Request) -> WalletRequest:
    """Parse the request body once the caller is authenticated.

    Raises:
        InvalidSymbolError: Body is not a JSON object
    """
    try:
        return WalletRequest.model_validate(await request.json())
    except ValueError as e:
        raise InvalidSymbolError(f"Malformed request body: {e}") from e


@router.post(
    "/wallet",
    response_model=WalletResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": WalletRequest.model_json_schema()}},
        }
    },
)
@limiter.limit(wallet_rate_limit)
async def create_wallet(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: WalletProvisioningService = Depends(get_provisioning_service),
) -> WalletResponse:
    """
    Get the caller's deposit address for a symbol.

    The address is generated on the first call and returned unchanged on
    every later call.
    """
    payload = await read_wallet_request(request)
    address = await service.get_or_create_address(user_id, payload.symbol)
    return WalletResponse(address=address)
