"""Chain client factory."""

from walletrelay.config import Settings, get_settings
from walletrelay.providers.base import ChainClient
from walletrelay.providers.dryrun import DryRunClient
from walletrelay.providers.tatum import TatumClient


def create_chain_client(settings: Settings | None = None) -> ChainClient:
    """Create the configured chain operations client.

    Provider is selected based on CHAIN_PROVIDER environment variable:
    - dryrun (default): Simulated wallets for development
    - tatum: Tatum wallet-as-a-service

    Returns:
        Configured ChainClient instance
    """
    settings = settings or get_settings()
    provider_name = settings.chain_provider.lower()

    if provider_name == "tatum":
        if not settings.tatum_api_key:
            raise ValueError("TATUM_API_KEY is required when CHAIN_PROVIDER=tatum")
        return TatumClient(
            api_key=settings.tatum_api_key,
            base_url=settings.tatum_base_url,
            timeout=settings.tatum_timeout_seconds,
        )

    return DryRunClient()
