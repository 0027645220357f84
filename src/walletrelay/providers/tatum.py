"""Tatum wallet-as-a-service client.

Uses the Tatum v3 REST API for wallet generation, address derivation and
balance lookups.
API Docs: https://apidoc.tatum.io/
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from walletrelay.providers.base import ChainClient, ChainClientError, WalletMaterial

logger = logging.getLogger(__name__)

TATUM_BASE_URL = "https://api.tatum.io"

# Native balance endpoints that answer in coin units rather than smallest units
UTXO_CHAINS = {"bitcoin", "litecoin"}
EVM_CHAINS = {"ethereum", "bsc"}
COIN_DECIMALS = {
    "bitcoin": 8,
    "litecoin": 8,
    "ethereum": 18,
    "bsc": 18,
}

# Testnets selected by header rather than by API key
TESTNET_TYPE_HEADERS = {
    "ethereum-sepolia": "ethereum-sepolia",
}


def to_base_units(value: Any, decimals: int) -> int:
    """Convert a coin-unit amount (e.g. "0.5" BTC) to smallest units."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ChainClientError(f"Invalid amount in provider response: {value!r}")
    return int(amount.scaleb(decimals).to_integral_value())


class TatumClient(ChainClient):
    """Tatum provider for generating wallets and reading balances.

    Mnemonics returned by wallet generation are dropped here and never
    leave the client.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Tatum client.

        Args:
            api_key: Tatum API key (mainnet or testnet key)
            base_url: Optional base URL override
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.base_url = (base_url or TATUM_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "tatum"

    def _headers(self, network: str) -> dict[str, str]:
        headers = {
            "x-api-key": self.api_key,
            "Accept": "application/json",
        }
        testnet_type = TESTNET_TYPE_HEADERS.get(network)
        if testnet_type:
            headers["x-testnet-type"] = testnet_type
        return headers

    async def _get(self, path: str, network: str) -> dict:
        """GET a Tatum endpoint and return the decoded JSON object."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, headers=self._headers(network))
        except httpx.HTTPError as e:
            raise ChainClientError(f"Tatum request failed: {path}: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Tatum API error {response.status_code} for {path}")
            raise ChainClientError(f"Tatum API error {response.status_code} for {path}")

        try:
            data = response.json()
        except ValueError as e:
            raise ChainClientError(f"Tatum returned invalid JSON for {path}") from e

        if not isinstance(data, dict):
            raise ChainClientError(f"Unexpected Tatum response for {path}")
        return data

    async def generate_wallet(self, chain: str, network: str) -> WalletMaterial:
        data = await self._get(f"/v3/{chain}/wallet", network)

        xpub = data.get("xpub")
        address = data.get("address")
        if not xpub and not address:
            raise ChainClientError(f"Tatum {chain} wallet response has no xpub or address")

        return WalletMaterial(xpub=xpub, address=address)

    async def derive_address(self, chain: str, network: str, key: str, index: int) -> str:
        data = await self._get(f"/v3/{chain}/address/{key}/{index}", network)

        address = data.get("address")
        if not address:
            raise ChainClientError(f"Tatum {chain} derivation response has no address")
        return address

    async def get_balance(self, chain: str, network: str, address: str) -> int:
        if chain in UTXO_CHAINS:
            data = await self._get(f"/v3/{chain}/address/balance/{address}", network)
            decimals = COIN_DECIMALS[chain]
            incoming = to_base_units(data.get("incoming", "0"), decimals)
            outgoing = to_base_units(data.get("outgoing", "0"), decimals)
            return incoming - outgoing

        if chain in EVM_CHAINS:
            data = await self._get(f"/v3/{chain}/account/balance/{address}", network)
            return to_base_units(data.get("balance", "0"), COIN_DECIMALS[chain])

        if chain == "tron":
            data = await self._get(f"/v3/tron/account/{address}", network)
            # Already in SUN
            return to_base_units(data.get("balance", 0), 0)

        raise ChainClientError(f"Unsupported chain for balance: {chain}")

    async def get_token_balance(
        self, chain: str, network: str, address: str, contract: str
    ) -> int:
        if chain != "tron":
            raise ChainClientError(f"Unsupported chain for token balance: {chain}")

        data = await self._get(f"/v3/tron/account/{address}", network)

        # trc20 is a list of single-entry {contract: raw_amount} objects
        for entry in data.get("trc20") or []:
            if isinstance(entry, dict) and contract in entry:
                return to_base_units(entry[contract], 0)
        return 0
