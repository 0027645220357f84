"""Dry-run chain client for development (no real wallets)."""

import hashlib
import secrets

from walletrelay.providers.base import ChainClient, WalletMaterial


class DryRunClient(ChainClient):
    """Simulated provider that generates fake wallets and zero balances."""

    @property
    def name(self) -> str:
        return "dryrun"

    async def generate_wallet(self, chain: str, network: str) -> WalletMaterial:
        """Generate a random fake xpub for the network."""
        return WalletMaterial(xpub=f"sim-xpub:{network}:{secrets.token_hex(16)}")

    async def derive_address(self, chain: str, network: str, key: str, index: int) -> str:
        """Deterministic fake address for (key, index)."""
        digest = hashlib.sha256(f"{key}/{index}".encode()).hexdigest()[:32]
        return f"sim:{chain}:{digest}"

    async def get_balance(self, chain: str, network: str, address: str) -> int:
        return 0

    async def get_token_balance(
        self, chain: str, network: str, address: str, contract: str
    ) -> int:
        return 0
