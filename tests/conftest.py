"""Pytest configuration and fixtures."""

import asyncio
import os
import time
from typing import AsyncGenerator, Optional

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CHAIN_PROVIDER"] = "dryrun"
os.environ["AUTH_PROVIDER"] = "shared_secret"
os.environ["AUTH_SHARED_SECRET"] = "test-secret-0123456789abcdefghijk"
os.environ["LOG_DIR"] = ""
os.environ["DEBUG"] = "false"

from walletrelay.api.app import create_app
from walletrelay.api.rate_limit import limiter
from walletrelay.auth import SharedSecretVerifier
from walletrelay.providers.base import ChainClient, ChainClientError, WalletMaterial
from walletrelay.routing import build_routes
from walletrelay.services import BalanceQueryService, WalletProvisioningService
from walletrelay.store import Base, UserWalletStore
from walletrelay.symbols import get_symbol_registry
from walletrelay.utils.locks import clear_wallet_locks

TEST_SECRET = "test-secret-0123456789abcdefghijk"


class FakeChainClient(ChainClient):
    """In-memory chain client that records every call."""

    def __init__(self, with_xpub: bool = True, generate_delay: float = 0.0):
        self.with_xpub = with_xpub
        self.generate_delay = generate_delay
        self.calls: list[tuple] = []
        self.balances: dict[str, int] = {}
        self.token_balances: dict[tuple[str, str], int] = {}
        self.fail_on: set[str] = set()
        self._counter = 0

    @property
    def name(self) -> str:
        return "fake"

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise ChainClientError(f"{operation} failed")

    async def generate_wallet(self, chain: str, network: str) -> WalletMaterial:
        self.calls.append(("generate_wallet", chain, network))
        if self.generate_delay:
            await asyncio.sleep(self.generate_delay)
        self._maybe_fail("generate_wallet")
        self._counter += 1
        if self.with_xpub:
            return WalletMaterial(xpub=f"xpub-{chain}-{self._counter}")
        return WalletMaterial(address=f"raw-{chain}-{self._counter}")

    async def derive_address(self, chain: str, network: str, key: str, index: int) -> str:
        self.calls.append(("derive_address", chain, network, key, index))
        self._maybe_fail("derive_address")
        return f"{chain}-address-of-{key}-{index}"

    async def get_balance(self, chain: str, network: str, address: str) -> int:
        self.calls.append(("get_balance", chain, network, address))
        self._maybe_fail("get_balance")
        return self.balances.get(address, 0)

    async def get_token_balance(
        self, chain: str, network: str, address: str, contract: str
    ) -> int:
        self.calls.append(("get_token_balance", chain, network, address, contract))
        self._maybe_fail("get_token_balance")
        return self.token_balances.get((address, contract), 0)


class InMemoryWalletStore:
    """Dict-backed wallet store with call counters."""

    def __init__(self):
        self.records: dict[str, dict[str, str]] = {}
        self.reads = 0
        self.writes = 0
        self.fail_writes = False

    async def get_wallets(self, user_id: str) -> Optional[dict[str, str]]:
        self.reads += 1
        record = self.records.get(user_id)
        return dict(record) if record is not None else None

    async def merge_wallets(
        self, user_id: str, wallets: dict[str, str], network: str = ""
    ) -> dict[str, str]:
        self.writes += 1
        if self.fail_writes:
            raise RuntimeError("store unavailable")
        record = self.records.setdefault(user_id, {})
        for symbol, address in wallets.items():
            record.setdefault(symbol, address)
        return dict(record)


def make_token(user_id: str, secret: str = TEST_SECRET, expires_in: int = 3600) -> str:
    """Create an HS256 bearer token for a user."""
    now = int(time.time())
    return jwt.encode({"sub": user_id, "iat": now, "exp": now + expires_in}, secret, algorithm="HS256")


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture(autouse=True)
def reset_global_state():
    """Clear locks and rate-limit counters before each test."""
    clear_wallet_locks()
    limiter.reset()
    yield
    clear_wallet_locks()


@pytest.fixture
def chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def memory_store() -> InMemoryWalletStore:
    return InMemoryWalletStore()


@pytest.fixture
def routes(chain_client):
    return build_routes(chain_client, get_symbol_registry(is_production=False))


@pytest.fixture
def provisioning_service(memory_store, routes) -> WalletProvisioningService:
    return WalletProvisioningService(memory_store, routes, lock_timeout=5.0)


@pytest.fixture
def balance_service(memory_store, routes) -> BalanceQueryService:
    return BalanceQueryService(memory_store, routes)


@pytest_asyncio.fixture
async def db_engine():
    """Create in-memory database engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_store(db_engine) -> UserWalletStore:
    """Create SQL-backed wallet store for testing."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return UserWalletStore(session_factory)


@pytest_asyncio.fixture
async def test_app(db_store, chain_client):
    """Create test application with fresh database and fake provider."""
    return create_app(
        store=db_store,
        chain_client=chain_client,
        identity_verifier=SharedSecretVerifier(TEST_SECRET),
    )


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
