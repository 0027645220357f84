"""Application configuration using pydantic-settings.

Network selection (mainnet vs testnet), provider credentials and identity
provider settings are all read from the environment or a local .env file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=3000, description="API server port")
    cors_origins: str = Field(default="*", description="Comma-separated allowed CORS origins")
    rate_limit_wallet: str = Field(
        default="100/15 minutes", description="Request limit per client for POST /wallet"
    )

    # ======================
    # Database
    # ======================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/walletrelay.db",
        description="Database connection URL",
    )

    # ======================
    # Chain provider
    # ======================
    chain_provider: str = Field(default="dryrun", description="Chain provider (tatum, dryrun)")
    tatum_api_key: str = Field(default="", description="Tatum API key")
    tatum_base_url: str = Field(default="https://api.tatum.io", description="Tatum API base URL")
    tatum_timeout_seconds: float = Field(default=15.0, description="Tatum request timeout")

    # ======================
    # Identity
    # ======================
    auth_provider: str = Field(
        default="firebase", description="Identity provider (firebase, shared_secret)"
    )
    firebase_project_id: str = Field(default="", description="Firebase project ID (token audience)")
    auth_shared_secret: str = Field(default="", description="HS256 secret for shared_secret auth")

    # ======================
    # Concurrency
    # ======================
    lock_timeout_seconds: float = Field(
        default=30.0, description="Maximum wait for a per-wallet provisioning lock"
    )

    # ======================
    # Logging
    # ======================
    log_dir: str = Field(default="logs", description="Directory for rotating log files (empty = off)")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "network": "mainnet" if self.is_production else "testnet",
            "api_host": self.api_host,
            "api_port": self.api_port,
            "database_url": self._redact_url(self.database_url),
            "chain_provider": self.chain_provider,
            "tatum_api_key": "***" if self.tatum_api_key else "(not set)",
            "auth_provider": self.auth_provider,
            "firebase_project_id": self.firebase_project_id or "(not set)",
            "auth_shared_secret": "***" if self.auth_shared_secret else "(not set)",
            "rate_limit_wallet": self.rate_limit_wallet,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact sensitive parts of database URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
