"""Unit tests for JWT decoding and authentication utilities."""

import json
import time
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt, get_signing_key

USER_ID = "550e8400-e29b-41d4-a716-446655440000"

SIGNING_KEY = ec.generate_private_key(ec.SECP256R1())
OTHER_KEY = ec.generate_private_key(ec.SECP256R1())


def public_jwk(private_key: ec.EllipticCurvePrivateKey) -> str:
    """Serialize the public half of a key the way Supabase publishes it."""
    jwk = json.loads(ECAlgorithm.to_jwk(private_key.public_key()))
    jwk["alg"] = "ES256"
    return json.dumps(jwk)


def create_test_token(
    sub: str | None = USER_ID,
    email: str | None = "test@example.com",
    exp_offset: int = 3600,
    key: ec.EllipticCurvePrivateKey = SIGNING_KEY,
) -> str:
    """Create a test ES256 token.

    Args:
        sub: Subject (user ID); omitted from the claims when None.
        email: User email.
        exp_offset: Seconds from now for expiration (negative for expired).
        key: Private key used to sign.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {
        "email": email,
        "role": "authenticated",
        "exp": now + exp_offset,
        "iat": now,
        "aud": "authenticated",
        "iss": "https://test.supabase.co/auth/v1",
    }
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, key, algorithm="ES256")


@pytest.fixture
def mock_settings() -> Generator[MagicMock, None, None]:
    """Point the verifier at the test public key."""
    get_signing_key.cache_clear()
    with patch("src.api.middleware.auth.get_settings") as mock:
        mock.return_value.supabase_signing_key_jwk = public_jwk(SIGNING_KEY)
        yield mock
    get_signing_key.cache_clear()


class TestDecodeJWT:
    """Tests for decode_jwt function."""

    def test_decode_jwt_with_valid_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt successfully decodes a valid token."""
        payload = decode_jwt(create_test_token())

        assert payload.sub == USER_ID
        assert payload.email == "test@example.com"
        assert payload.role == "authenticated"
        assert payload.to_user_context().user_id.hex == USER_ID.replace("-", "")

    def test_decode_jwt_with_expired_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt raises AuthError for expired token."""
        with pytest.raises(AuthError) as exc_info:
            decode_jwt(create_test_token(exp_offset=-3600))

        assert exc_info.value.code == AuthErrorCode.TOKEN_EXPIRED
        assert "expired" in exc_info.value.message.lower()

    def test_decode_jwt_with_invalid_signature(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt raises AuthError for a token signed with another key."""
        with pytest.raises(AuthError) as exc_info:
            decode_jwt(create_test_token(key=OTHER_KEY))

        assert exc_info.value.code == AuthErrorCode.INVALID_SIGNATURE

    def test_decode_jwt_with_malformed_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt raises AuthError for malformed token."""
        with pytest.raises(AuthError) as exc_info:
            decode_jwt("not-a-valid-jwt-token")

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN

    def test_decode_jwt_with_empty_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt raises AuthError for empty token."""
        with pytest.raises(AuthError) as exc_info:
            decode_jwt("")

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN

    def test_decode_jwt_missing_sub_claim(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt raises AuthError when sub claim is missing."""
        with pytest.raises(AuthError) as exc_info:
            decode_jwt(create_test_token(sub=None))

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN
        assert "sub" in exc_info.value.message

    def test_decode_jwt_rejects_hs256_token(self, mock_settings: MagicMock) -> None:
        """Test symmetric tokens are not accepted."""
        now = int(time.time())
        token = jwt.encode({"sub": USER_ID, "exp": now + 60, "iat": now}, "shared-secret-of-32-bytes-or-more!", algorithm="HS256")

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN


class TestSigningKey:
    """Tests for get_signing_key."""

    def test_invalid_jwk_json(self) -> None:
        """Test a JWK that is not JSON is reported as an auth error."""
        get_signing_key.cache_clear()
        with patch("src.api.middleware.auth.get_settings") as mock:
            mock.return_value.supabase_signing_key_jwk = "not-json"

            with pytest.raises(AuthError) as exc_info:
                get_signing_key()

        get_signing_key.cache_clear()
        assert "JWK" in exc_info.value.message

    def test_missing_jwk(self) -> None:
        """Test an empty JWK is reported as not configured."""
        get_signing_key.cache_clear()
        with patch("src.api.middleware.auth.get_settings") as mock:
            mock.return_value.supabase_signing_key_jwk = ""

            with pytest.raises(AuthError) as exc_info:
                get_signing_key()

        get_signing_key.cache_clear()
        assert exc_info.value.message == "Signing key not configured"
