"""Caller-facing error conditions.

Each error carries the HTTP status and the flat message returned to the
client. Workflows raise these; the API layer renders them as
``{"error": message}``.
"""

from fastapi import status


class WalletRelayError(Exception):
    """Base class for request-scoped errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.message
        super().__init__(self.detail)


class InvalidSymbolError(WalletRelayError):
    """Symbol is missing or not in the symbol registry."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid symbol"


class UnauthorizedError(WalletRelayError):
    """Bearer credential missing, malformed or rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class AddressNotFoundError(WalletRelayError):
    """No address has been provisioned for the (user, symbol) pair."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Address not found"


class ProvisioningFailedError(WalletRelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to generate wallet address"


class BalanceFetchFailedError(WalletRelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to fetch balance"
