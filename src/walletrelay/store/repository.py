"""Repository for user wallet records."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from walletrelay.store.database import session_scope
from walletrelay.store.models import User, WalletAddress

logger = logging.getLogger(__name__)


class UserWalletRepository:
    """Repository for wallet-record database operations within one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert_ignore(self, model):
        """Build an INSERT that silently skips rows violating a unique key."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(model).on_conflict_do_nothing()
        if dialect == "postgresql":
            return postgresql.insert(model).on_conflict_do_nothing()
        if dialect in ("mysql", "mariadb"):
            return mysql.insert(model).prefix_with("IGNORE")
        raise NotImplementedError(f"Unsupported database dialect: {dialect}")

    # User operations
    async def get_user(self, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def ensure_user(self, user_id: str) -> None:
        """Create the user row if it does not exist yet."""
        await self.session.execute(self._insert_ignore(User).values(user_id=user_id))

    # Wallet address operations
    async def get_wallet_addresses(self, user_id: str) -> list[WalletAddress]:
        stmt = (
            select(WalletAddress)
            .where(WalletAddress.user_id == user_id)
            .order_by(WalletAddress.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_wallet_address(self, user_id: str, symbol: str) -> Optional[WalletAddress]:
        stmt = select(WalletAddress).where(
            WalletAddress.user_id == user_id,
            WalletAddress.symbol == symbol,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_wallet_address_if_absent(
        self, user_id: str, symbol: str, address: str, network: str = ""
    ) -> None:
        """Insert (user, symbol) -> address unless that pair already exists."""
        stmt = self._insert_ignore(WalletAddress).values(
            user_id=user_id,
            symbol=symbol,
            address=address,
            network=network,
        )
        await self.session.execute(stmt)


class UserWalletStore:
    """Document-style view of user wallet records.

    A record is a mapping of symbol to address. Writes merge at the symbol
    level and never replace an existing symbol's address.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_wallets(self, user_id: str) -> Optional[dict[str, str]]:
        """Read a user's wallet map.

        Returns:
            Mapping of symbol to address, or None if the user has no record
        """
        async with session_scope(self._session_factory) as session:
            repo = UserWalletRepository(session)
            if await repo.get_user(user_id) is None:
                return None
            rows = await repo.get_wallet_addresses(user_id)
            return {row.symbol: row.address for row in rows}

    async def merge_wallets(
        self, user_id: str, wallets: dict[str, str], network: str = ""
    ) -> dict[str, str]:
        """Merge symbol -> address entries into a user's record.

        Creates the record on first write. Symbols already present keep
        their stored address.

        Returns:
            The full wallet map after the merge
        """
        async with session_scope(self._session_factory) as session:
            repo = UserWalletRepository(session)
            await repo.ensure_user(user_id)
            for symbol, address in wallets.items():
                await repo.insert_wallet_address_if_absent(user_id, symbol, address, network)
            rows = await repo.get_wallet_addresses(user_id)
            merged = {row.symbol: row.address for row in rows}

        for symbol, address in wallets.items():
            if merged.get(symbol) != address:
                logger.warning(
                    f"Kept existing {symbol} address for user {user_id}; "
                    f"discarded concurrently generated {address}"
                )
        return merged
