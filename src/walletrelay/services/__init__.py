"""Application services."""

from walletrelay.services.balance import BalanceQueryService
from walletrelay.services.provisioning import WalletProvisioningService

__all__ = ["BalanceQueryService", "WalletProvisioningService"]
