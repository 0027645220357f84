"""Supported symbols and their provider networks.

Each ticker maps to a provider chain slug and a network identifier. The
network differs between production (mainnet) and every other environment
(testnet). Symbols are matched exactly, so ``"btc"`` is not ``"BTC"``.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SymbolEntry:
    """Static configuration for one supported symbol."""

    symbol: str
    chain: str  # Provider chain slug used in API paths
    network: str  # Environment-dependent network identifier
    decimals: int  # Smallest-unit exponent (satoshi, wei, sun)
    token_contract: Optional[str] = None  # Set for token assets only

    @property
    def is_token(self) -> bool:
        return self.token_contract is not None

    @property
    def divisor(self) -> int:
        return 10 ** self.decimals


# USDT TRC-20 contract addresses
USDT_TRC20_CONTRACT_MAINNET = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
USDT_TRC20_CONTRACT_TESTNET = "TXLAQ63Xg1NAzckPwKHvzw7CSEmLMEqcdj"


# ======================
# Symbol Configurations
# ======================

MAINNET_SYMBOLS: dict[str, SymbolEntry] = {
    "BTC": SymbolEntry(symbol="BTC", chain="bitcoin", network="bitcoin-mainnet", decimals=8),
    "BNB": SymbolEntry(symbol="BNB", chain="bsc", network="bsc-mainnet", decimals=18),
    "ETH": SymbolEntry(symbol="ETH", chain="ethereum", network="ethereum-mainnet", decimals=18),
    "LTC": SymbolEntry(symbol="LTC", chain="litecoin", network="litecoin-core-mainnet", decimals=8),
    "TRX": SymbolEntry(symbol="TRX", chain="tron", network="tron-mainnet", decimals=6),
    "USDT TRC-20": SymbolEntry(
        symbol="USDT TRC-20",
        chain="tron",
        network="tron-mainnet",
        decimals=6,
        token_contract=USDT_TRC20_CONTRACT_MAINNET,
    ),
}

TESTNET_SYMBOLS: dict[str, SymbolEntry] = {
    "BTC": SymbolEntry(symbol="BTC", chain="bitcoin", network="bitcoin-testnet", decimals=8),
    "BNB": SymbolEntry(symbol="BNB", chain="bsc", network="bsc-testnet", decimals=18),
    "ETH": SymbolEntry(symbol="ETH", chain="ethereum", network="ethereum-sepolia", decimals=18),
    "LTC": SymbolEntry(symbol="LTC", chain="litecoin", network="litecoin-core-testnet", decimals=8),
    "TRX": SymbolEntry(symbol="TRX", chain="tron", network="tron-testnet", decimals=6),
    "USDT TRC-20": SymbolEntry(
        symbol="USDT TRC-20",
        chain="tron",
        network="tron-testnet",
        decimals=6,
        token_contract=USDT_TRC20_CONTRACT_TESTNET,
    ),
}


def get_symbol_registry(is_production: bool) -> dict[str, SymbolEntry]:
    """Get the symbol registry for the runtime environment.

    Args:
        is_production: Select mainnet networks if True, testnets otherwise

    Returns:
        Mapping of symbol to SymbolEntry
    """
    return MAINNET_SYMBOLS if is_production else TESTNET_SYMBOLS


def get_supported_symbols(is_production: bool = False) -> list[str]:
    """Get list of supported symbols."""
    return list(get_symbol_registry(is_production).keys())
