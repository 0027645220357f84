"""Tests for bearer token verification."""

import json
import time

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from walletrelay.auth import (
    FirebaseTokenVerifier,
    SharedSecretVerifier,
    TokenVerificationError,
    create_identity_verifier,
)
from walletrelay.config import Settings

PROJECT_ID = "wallet-relay-test"
KID = "test-key-1"


@pytest.fixture(scope="module")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def jwks_requests():
    return []


@pytest.fixture
def firebase_verifier(rsa_key, jwks_requests):
    jwk = json.loads(RSAAlgorithm.to_jwk(rsa_key.public_key()))
    jwk.update({"kid": KID, "alg": "RS256", "use": "sig"})

    def handler(request: httpx.Request) -> httpx.Response:
        jwks_requests.append(request)
        return httpx.Response(
            200,
            json={"keys": [jwk]},
            headers={"Cache-Control": "public, max-age=600"},
        )

    return FirebaseTokenVerifier(PROJECT_ID, transport=httpx.MockTransport(handler))


def firebase_token(key, **overrides) -> str:
    now = int(time.time())
    claims = {
        "iss": f"https://securetoken.google.com/{PROJECT_ID}",
        "aud": PROJECT_ID,
        "sub": "firebase-uid-1",
        "iat": now,
        "exp": now + 3600,
    }
    headers = {"kid": overrides.pop("kid", KID)}
    claims.update(overrides)
    return jwt.encode(claims, key, algorithm="RS256", headers=headers)


class TestFirebaseTokenVerifier:
    """Firebase ID tokens checked against the published JWKS."""

    @pytest.mark.asyncio
    async def test_valid_token(self, firebase_verifier, rsa_key):
        assert await firebase_verifier.verify(firebase_token(rsa_key)) == "firebase-uid-1"

    @pytest.mark.asyncio
    async def test_keys_are_cached(self, firebase_verifier, rsa_key, jwks_requests):
        await firebase_verifier.verify(firebase_token(rsa_key))
        await firebase_verifier.verify(firebase_token(rsa_key, sub="firebase-uid-2"))

        assert len(jwks_requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"aud": "other-project"},
            {"iss": "https://securetoken.google.com/other-project"},
            {"exp": int(time.time()) - 600},
            {"sub": ""},
        ],
    )
    async def test_rejected_claims(self, firebase_verifier, rsa_key, overrides):
        with pytest.raises(TokenVerificationError):
            await firebase_verifier.verify(firebase_token(rsa_key, **overrides))

    @pytest.mark.asyncio
    async def test_unknown_key_id(self, firebase_verifier, rsa_key, jwks_requests):
        with pytest.raises(TokenVerificationError):
            await firebase_verifier.verify(firebase_token(rsa_key, kid="rotated-away"))

        # Initial load plus one refresh for the unknown kid
        assert len(jwks_requests) == 2

    @pytest.mark.asyncio
    async def test_wrong_signing_key(self, firebase_verifier):
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

        with pytest.raises(TokenVerificationError):
            await firebase_verifier.verify(firebase_token(other_key))

    @pytest.mark.asyncio
    async def test_hs256_token_rejected(self, firebase_verifier):
        token = jwt.encode(
            {"sub": "u1"}, "hs256-secret-0123456789abcdefghij", algorithm="HS256", headers={"kid": KID}
        )

        with pytest.raises(TokenVerificationError):
            await firebase_verifier.verify(token)

    @pytest.mark.asyncio
    async def test_garbage_token(self, firebase_verifier):
        with pytest.raises(TokenVerificationError):
            await firebase_verifier.verify("garbage")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["not", "a", "jwks"], "keys", {"keys": "none"}])
    async def test_malformed_jwks_response(self, rsa_key, body):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
        verifier = FirebaseTokenVerifier(PROJECT_ID, transport=transport)

        with pytest.raises(TokenVerificationError):
            await verifier.verify(firebase_token(rsa_key))

    @pytest.mark.asyncio
    async def test_unconfigured_project(self, rsa_key):
        verifier = FirebaseTokenVerifier("")

        with pytest.raises(TokenVerificationError):
            await verifier.verify(firebase_token(rsa_key))


class TestSharedSecretVerifier:
    """HS256 tokens for development."""

    @pytest.mark.asyncio
    async def test_valid_token(self):
        verifier = SharedSecretVerifier("dev-shared-secret-0123456789abcdef")
        token = jwt.encode({"sub": "u1"}, "dev-shared-secret-0123456789abcdef", algorithm="HS256")

        assert await verifier.verify(token) == "u1"

    @pytest.mark.asyncio
    async def test_uid_claim(self):
        verifier = SharedSecretVerifier("dev-shared-secret-0123456789abcdef")
        token = jwt.encode({"uid": "u2"}, "dev-shared-secret-0123456789abcdef", algorithm="HS256")

        assert await verifier.verify(token) == "u2"

    @pytest.mark.asyncio
    async def test_missing_subject(self):
        verifier = SharedSecretVerifier("dev-shared-secret-0123456789abcdef")
        token = jwt.encode({"role": "admin"}, "dev-shared-secret-0123456789abcdef", algorithm="HS256")

        with pytest.raises(TokenVerificationError):
            await verifier.verify(token)

    @pytest.mark.asyncio
    async def test_wrong_secret(self):
        verifier = SharedSecretVerifier("dev-shared-secret-0123456789abcdef")
        token = jwt.encode({"sub": "u1"}, "another-secret-0123456789abcdefgh", algorithm="HS256")

        with pytest.raises(TokenVerificationError):
            await verifier.verify(token)

    @pytest.mark.asyncio
    async def test_unconfigured_secret(self):
        verifier = SharedSecretVerifier("")

        with pytest.raises(TokenVerificationError):
            await verifier.verify(
                jwt.encode({"sub": "u1"}, "unused-secret-0123456789abcdefgh", algorithm="HS256")
            )


class TestVerifierFactory:
    def test_shared_secret(self):
        settings = Settings(auth_provider="shared_secret", auth_shared_secret="abc")

        assert isinstance(create_identity_verifier(settings), SharedSecretVerifier)

    def test_firebase_default(self):
        settings = Settings(auth_provider="firebase", firebase_project_id=PROJECT_ID)

        verifier = create_identity_verifier(settings)

        assert isinstance(verifier, FirebaseTokenVerifier)
        assert verifier.issuer == f"https://securetoken.google.com/{PROJECT_ID}"
