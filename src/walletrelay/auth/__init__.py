"""Identity verification."""

from walletrelay.auth.verifiers import (
    FirebaseTokenVerifier,
    IdentityVerifier,
    SharedSecretVerifier,
    TokenVerificationError,
    create_identity_verifier,
)

__all__ = [
    "FirebaseTokenVerifier",
    "IdentityVerifier",
    "SharedSecretVerifier",
    "TokenVerificationError",
    "create_identity_verifier",
]
