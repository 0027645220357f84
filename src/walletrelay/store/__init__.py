"""User wallet record store."""

from walletrelay.store.database import close_db, get_engine, get_session_factory, init_db
from walletrelay.store.models import Base, User, WalletAddress
from walletrelay.store.repository import UserWalletRepository, UserWalletStore

__all__ = [
    "Base",
    "User",
    "UserWalletRepository",
    "UserWalletStore",
    "WalletAddress",
    "close_db",
    "get_engine",
    "get_session_factory",
    "init_db",
]
