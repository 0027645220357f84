"""Balance lookup for provisioned deposit addresses."""

import logging
from decimal import Decimal
from typing import Optional, Protocol

from walletrelay.errors import AddressNotFoundError, BalanceFetchFailedError, InvalidSymbolError
from walletrelay.routing import ChainRoute

logger = logging.getLogger(__name__)


class WalletReader(Protocol):
    async def get_wallets(self, user_id: str) -> Optional[dict[str, str]]: ...


class BalanceQueryService:
    """Reads the on-chain balance of a user's stored address.

    Never provisions: a missing address is an error, not a trigger.
    """

    def __init__(self, store: WalletReader, routes: dict[str, ChainRoute]):
        self.store = store
        self.routes = routes

    async def get_balance(self, user_id: str, symbol: Optional[str]) -> Decimal:
        """Get the balance of (user, symbol)'s address in whole units.

        Raises:
            InvalidSymbolError: Unsupported symbol (no store or provider calls)
            AddressNotFoundError: No address provisioned yet
            BalanceFetchFailedError: Store or provider failure
        """
        route = self.routes.get(symbol) if isinstance(symbol, str) else None
        if route is None:
            logger.error(f"Invalid balance request: userId={user_id}, symbol={symbol}")
            raise InvalidSymbolError(f"Unsupported symbol: {symbol!r}")

        try:
            wallets = await self.store.get_wallets(user_id) or {}
        except Exception as e:
            logger.error(f"Error fetching balance for {symbol}: {e}")
            raise BalanceFetchFailedError(str(e)) from e

        address = wallets.get(route.symbol)
        if not address:
            logger.warning(f"No address found for {symbol} for user {user_id}")
            raise AddressNotFoundError(f"No {symbol} address for user {user_id}")

        try:
            raw = await route.balance(address)
        except Exception as e:
            logger.error(f"Error fetching balance for {symbol}: {e}")
            raise BalanceFetchFailedError(str(e)) from e

        return route.scale(raw)
