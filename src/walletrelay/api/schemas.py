"""Request and response models."""

from typing import Any

from pydantic import BaseModel, Field


class WalletRequest(BaseModel):
    """Request to get or create a deposit address."""

    # Validated against the symbol registry by the service, not here
    symbol: Any = Field(default=None, description="Asset symbol (BTC, ETH, USDT TRC-20, ...)")


class WalletResponse(BaseModel):
    address: str = Field(..., description="Deposit address")


class BalanceResponse(BaseModel):
    balance: str = Field(..., description="Balance in whole units as a decimal string")


class ErrorResponse(BaseModel):
    error: str
