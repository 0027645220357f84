"""Symbol to chain-operation routing table.

Every supported symbol resolves to one ChainRoute holding the generate,
derive and balance operations bound to its chain and network, plus the
smallest-unit exponent used to scale balances. Token assets reuse their
host chain's generate/derive operations with a contract-bound balance call.
"""

from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from typing import Awaitable, Callable

from walletrelay.providers.base import ChainClient, WalletMaterial
from walletrelay.symbols import SymbolEntry

GenerateFn = Callable[[], Awaitable[WalletMaterial]]
DeriveFn = Callable[[str, int], Awaitable[str]]
BalanceFn = Callable[[str], Awaitable[int]]


@dataclass(frozen=True)
class ChainRoute:
    """Operations available for one symbol."""

    entry: SymbolEntry
    generate: GenerateFn
    derive: DeriveFn
    balance: BalanceFn

    @property
    def symbol(self) -> str:
        return self.entry.symbol

    @property
    def network(self) -> str:
        return self.entry.network

    @property
    def decimals(self) -> int:
        return self.entry.decimals

    def scale(self, raw: int) -> Decimal:
        """Convert a raw smallest-unit amount to a decimal amount."""
        return Decimal(raw).scaleb(-self.decimals)


def build_route(client: ChainClient, entry: SymbolEntry) -> ChainRoute:
    """Bind the client's operations to one symbol entry."""
    if entry.token_contract:
        balance = partial(
            client.get_token_balance, entry.chain, entry.network, contract=entry.token_contract
        )
    else:
        balance = partial(client.get_balance, entry.chain, entry.network)

    return ChainRoute(
        entry=entry,
        generate=partial(client.generate_wallet, entry.chain, entry.network),
        derive=partial(client.derive_address, entry.chain, entry.network),
        balance=balance,
    )


def build_routes(client: ChainClient, registry: dict[str, SymbolEntry]) -> dict[str, ChainRoute]:
    """Build the routing table for every symbol in the registry."""
    return {symbol: build_route(client, entry) for symbol, entry in registry.items()}


def format_amount(amount: Decimal) -> str:
    """Render an amount as a plain decimal string ("0", "1.5", "0.00000001")."""
    normalized = amount.normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")
