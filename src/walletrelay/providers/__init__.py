"""Chain operations clients."""

from walletrelay.providers.base import ChainClient, ChainClientError, WalletMaterial
from walletrelay.providers.factory import create_chain_client

__all__ = ["ChainClient", "ChainClientError", "WalletMaterial", "create_chain_client"]
