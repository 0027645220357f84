"""Chain operations client base interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class ChainClientError(Exception):
    """Raised when the chain provider rejects a call or returns bad data."""

    pass


@dataclass(frozen=True)
class WalletMaterial:
    """Wallet generation output used for address derivation.

    Held only for the duration of one provisioning call. Secret material
    (mnemonic, private key) is never carried here.
    """

    xpub: Optional[str] = None
    address: Optional[str] = None

    @property
    def derivation_key(self) -> str:
        """Key passed to address derivation: xpub when present, else address."""
        key = self.xpub or self.address
        if not key:
            raise ChainClientError("Wallet material has neither xpub nor address")
        return key


class ChainClient(ABC):
    """Abstract base class for wallet-as-a-service providers.

    Balances are returned as raw integers in the chain's smallest unit.
    """

    @abstractmethod
    async def generate_wallet(self, chain: str, network: str) -> WalletMaterial:
        """Generate a new wallet.

        Args:
            chain: Provider chain slug (bitcoin, ethereum, tron, ...)
            network: Network identifier (bitcoin-mainnet, tron-testnet, ...)

        Returns:
            WalletMaterial with an xpub and/or address
        """
        raise NotImplementedError()

    @abstractmethod
    async def derive_address(self, chain: str, network: str, key: str, index: int) -> str:
        """Derive a deposit address from an xpub (or pass through an address).

        Args:
            chain: Provider chain slug
            network: Network identifier
            key: Extended public key or raw address
            index: Derivation index

        Returns:
            Address string
        """
        raise NotImplementedError()

    @abstractmethod
    async def get_balance(self, chain: str, network: str, address: str) -> int:
        """Get native balance of an address in smallest units."""
        raise NotImplementedError()

    @abstractmethod
    async def get_token_balance(
        self, chain: str, network: str, address: str, contract: str
    ) -> int:
        """Get token-contract balance of an address in smallest units."""
        raise NotImplementedError()

    async def close(self) -> None:
        """Release any held connections."""
        return None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        raise NotImplementedError()
