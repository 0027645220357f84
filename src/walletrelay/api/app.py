"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from walletrelay import __version__
from walletrelay.api.rate_limit import configure_rate_limits, limiter, rate_limit_exceeded_handler
from walletrelay.auth import IdentityVerifier, create_identity_verifier
from walletrelay.config import Settings, get_settings
from walletrelay.errors import WalletRelayError
from walletrelay.providers import ChainClient, create_chain_client
from walletrelay.routing import build_routes
from walletrelay.services import BalanceQueryService, WalletProvisioningService
from walletrelay.services.provisioning import WalletStore
from walletrelay.store import UserWalletStore, close_db, get_session_factory, init_db
from walletrelay.symbols import get_symbol_registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    if app.state.manage_db:
        await init_db()
    yield
    # Shutdown
    await app.state.chain_client.close()
    if app.state.manage_db:
        await close_db()


async def wallet_relay_error_handler(request: Request, exc: WalletRelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[WalletStore] = None,
    chain_client: Optional[ChainClient] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Collaborators not passed in are built from settings. When no store is
    given the app owns the database engine and creates tables on startup.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Wallet Relay API",
        description="Per-user deposit address provisioning and balance lookup",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Services
    app.state.manage_db = store is None
    store = store or UserWalletStore(get_session_factory())
    chain_client = chain_client or create_chain_client(settings)
    routes = build_routes(chain_client, get_symbol_registry(settings.is_production))

    app.state.settings = settings
    app.state.chain_client = chain_client
    app.state.routes = routes
    app.state.identity_verifier = identity_verifier or create_identity_verifier(settings)
    app.state.provisioning_service = WalletProvisioningService(
        store, routes, lock_timeout=settings.lock_timeout_seconds
    )
    app.state.balance_service = BalanceQueryService(store, routes)

    # Rate limiting
    app.state.limiter = limiter
    configure_rate_limits(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Error mapping
    app.add_exception_handler(WalletRelayError, wallet_relay_error_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from walletrelay.api.routes import balance, health, wallet

    app.include_router(health.router, tags=["Health"])
    app.include_router(wallet.router, tags=["Wallet"])
    app.include_router(balance.router, tags=["Balance"])

    return app
