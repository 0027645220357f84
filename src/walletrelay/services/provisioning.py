"""Deposit address provisioning.

Addresses are create-if-absent per (user, symbol): the first request
generates a wallet through the chain provider and persists the derived
address, every later request returns the stored one without calling the
provider.
"""

import logging
from typing import Optional, Protocol

from walletrelay.errors import InvalidSymbolError, ProvisioningFailedError
from walletrelay.routing import ChainRoute
from walletrelay.utils.locks import LockTimeoutError, wallet_lock

logger = logging.getLogger(__name__)

# Single address per user per symbol
DERIVATION_INDEX = 0


class WalletStore(Protocol):
    async def get_wallets(self, user_id: str) -> Optional[dict[str, str]]: ...

    async def merge_wallets(
        self, user_id: str, wallets: dict[str, str], network: str = ""
    ) -> dict[str, str]: ...


class WalletProvisioningService:
    """Returns a user's deposit address for a symbol, creating it once."""

    def __init__(
        self,
        store: WalletStore,
        routes: dict[str, ChainRoute],
        lock_timeout: Optional[float] = 30.0,
    ):
        self.store = store
        self.routes = routes
        self.lock_timeout = lock_timeout

    def resolve_route(self, symbol: Optional[str]) -> ChainRoute:
        """Look up the route for a symbol.

        Raises:
            InvalidSymbolError: If symbol is empty or unsupported
        """
        route = self.routes.get(symbol) if isinstance(symbol, str) else None
        if route is None:
            raise InvalidSymbolError(f"Unsupported symbol: {symbol!r}")
        return route

    async def get_or_create_address(self, user_id: str, symbol: Optional[str]) -> str:
        """Get the deposit address for (user, symbol), provisioning it if absent.

        Args:
            user_id: Verified identity provider user ID
            symbol: Asset symbol from the symbol registry

        Returns:
            Deposit address

        Raises:
            InvalidSymbolError: Unsupported symbol (no store or provider calls)
            ProvisioningFailedError: Provider or store failure
        """
        try:
            route = self.resolve_route(symbol)
        except InvalidSymbolError:
            logger.error(f"Invalid request: userId={user_id}, symbol={symbol}")
            raise

        try:
            async with wallet_lock(user_id, route.symbol, timeout=self.lock_timeout):
                return await self._provision(user_id, route)
        except LockTimeoutError as e:
            logger.error(f"Error generating wallet for {route.symbol}: {e}")
            raise ProvisioningFailedError(str(e)) from e

    async def _provision(self, user_id: str, route: ChainRoute) -> str:
        symbol = route.symbol

        try:
            wallets = await self.store.get_wallets(user_id) or {}

            existing = wallets.get(symbol)
            if existing:
                logger.info(f"Wallet address for {symbol} already exists for user {user_id}")
                return existing

            material = await route.generate()
            logger.warning(
                "Wallet material discarded after derivation; private keys are not stored. "
                "Signing requires a separate key-management integration."
            )

            address = await route.derive(material.derivation_key, DERIVATION_INDEX)
            logger.info(f"Generated {symbol} address for user {user_id}: {address}")

            merged = await self.store.merge_wallets(
                user_id, {symbol: address}, network=route.network
            )
        except Exception as e:
            logger.error(f"Error generating wallet for {symbol}: {e}")
            raise ProvisioningFailedError(str(e)) from e

        stored = merged.get(symbol)
        if not stored:
            logger.error(f"Error generating wallet for {symbol}: address missing after write")
            raise ProvisioningFailedError(f"{symbol} address missing after write")
        return stored
