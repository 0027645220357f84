"""Bearer token verification.

Maps an identity-provider token to the stable user ID used as the key of
wallet records.
"""

import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import jwt

from walletrelay.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Google's signing keys for Firebase ID tokens
FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/"
    "securetoken@system.gserviceaccount.com"
)
FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"
DEFAULT_JWKS_MAX_AGE = 3600

_MAX_AGE_RE = re.compile(r"max-age=(\d+)")


class TokenVerificationError(Exception):
    """Raised when a bearer token is invalid, expired or unverifiable."""

    pass


class IdentityVerifier(ABC):
    """Abstract base class for bearer token verifiers."""

    @abstractmethod
    async def verify(self, token: str) -> str:
        """Verify a bearer token.

        Args:
            token: Raw token (without the "Bearer " prefix)

        Returns:
            Stable user ID

        Raises:
            TokenVerificationError: If the token is not valid
        """
        raise NotImplementedError()


def _subject(claims: dict[str, Any]) -> str:
    user_id = claims.get("sub") or claims.get("uid")
    if not user_id or not isinstance(user_id, str):
        raise TokenVerificationError("Token has no subject")
    return user_id


class SharedSecretVerifier(IdentityVerifier):
    """Verifies HS256 tokens signed with a shared secret (dev/test)."""

    def __init__(self, secret: str, audience: Optional[str] = None):
        self.secret = secret
        self.audience = audience

    async def verify(self, token: str) -> str:
        if not self.secret:
            raise TokenVerificationError("AUTH_SHARED_SECRET is not configured")
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=["HS256"],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.PyJWTError as e:
            raise TokenVerificationError(str(e)) from e
        return _subject(claims)


class FirebaseTokenVerifier(IdentityVerifier):
    """Verifies Firebase ID tokens against Google's published JWKS.

    Checks the RS256 signature, audience (project ID), issuer and expiry.
    Signing keys are cached for the max-age Google advertises.
    """

    def __init__(
        self,
        project_id: str,
        jwks_url: str = FIREBASE_JWKS_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.project_id = project_id
        self.issuer = f"{FIREBASE_ISSUER_PREFIX}{project_id}"
        self.jwks_url = jwks_url
        self._transport = transport
        self._keys: dict[str, Any] = {}
        self._keys_expire_at = 0.0

    async def _fetch_keys(self) -> None:
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.get(self.jwks_url)
                response.raise_for_status()
                jwks = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TokenVerificationError(f"Could not fetch signing keys: {e}") from e

        if not isinstance(jwks, dict) or not isinstance(jwks.get("keys", []), list):
            raise TokenVerificationError("Signing key response is not a JWKS document")

        keys = {}
        for jwk in jwks.get("keys", []):
            kid = jwk.get("kid") if isinstance(jwk, dict) else None
            if not kid:
                continue
            try:
                keys[kid] = jwt.PyJWK(jwk, algorithm="RS256").key
            except jwt.PyJWTError as e:
                logger.warning(f"Skipping unusable signing key {kid}: {e}")

        match = _MAX_AGE_RE.search(response.headers.get("cache-control", ""))
        max_age = int(match.group(1)) if match else DEFAULT_JWKS_MAX_AGE

        self._keys = keys
        self._keys_expire_at = time.monotonic() + max_age
        logger.debug(f"Loaded {len(keys)} Firebase signing keys (max-age {max_age}s)")

    async def _get_key(self, kid: str) -> Any:
        if not self._keys or time.monotonic() >= self._keys_expire_at:
            await self._fetch_keys()
        key = self._keys.get(kid)
        if key is None:
            # Keys may have rotated before our cache expired
            await self._fetch_keys()
            key = self._keys.get(kid)
        if key is None:
            raise TokenVerificationError(f"Unknown signing key: {kid}")
        return key

    async def verify(self, token: str) -> str:
        if not self.project_id:
            raise TokenVerificationError("FIREBASE_PROJECT_ID is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise TokenVerificationError(str(e)) from e

        if header.get("alg") != "RS256" or not header.get("kid"):
            raise TokenVerificationError("Token is not an RS256 Firebase ID token")

        key = await self._get_key(header["kid"])

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.PyJWTError as e:
            raise TokenVerificationError(str(e)) from e

        return _subject(claims)


def create_identity_verifier(settings: Settings | None = None) -> IdentityVerifier:
    """Create the configured identity verifier.

    Verifier is selected based on AUTH_PROVIDER environment variable:
    - firebase (default): Firebase ID tokens for FIREBASE_PROJECT_ID
    - shared_secret: HS256 tokens signed with AUTH_SHARED_SECRET
    """
    settings = settings or get_settings()
    provider_name = settings.auth_provider.lower()

    if provider_name == "shared_secret":
        return SharedSecretVerifier(settings.auth_shared_secret)

    return FirebaseTokenVerifier(settings.firebase_project_id)
