"""SQLAlchemy models for user wallet records."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """User record keyed by the identity provider's stable user ID."""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    wallet_addresses: Mapped[list["WalletAddress"]] = relationship(
        back_populates="user", lazy="selectin"
    )


class WalletAddress(Base):
    """Deposit address per user per symbol.

    Rows are insert-only: an address is never regenerated or rotated.
    """

    __tablename__ = "wallet_addresses"
    __table_args__ = (
        Index("ix_wallet_addresses_user_symbol", "user_id", "symbol", unique=True),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)  # e.g., BTC, USDT TRC-20
    address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    network: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="wallet_addresses")
