"""Wallet relay: per-user deposit address provisioning backed by a wallet-as-a-service provider."""

__version__ = "0.1.0"
