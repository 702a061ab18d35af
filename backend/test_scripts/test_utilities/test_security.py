"""
Tests for password hashing and JWT helpers.

Reference: backend/app/utils/security.py
"""
from datetime import timedelta

import pytest
from jose import jwt

from backend.app.config import get_settings
from backend.app.utils.datetime_utils import utcnow
from backend.app.utils.security import (
    TokenError,
    compare_password,
    extract_token_from_header,
    generate_token,
    hash_password,
    verify_token,
    )

USER = {"id": 7, "email": "jane@example.com"}


# ============================================================================
# PASSWORDS
# ============================================================================

class TestPasswordHashing:
    """bcrypt hashing and comparison."""

    def test_hash_and_compare(self):
        """SEC-P-001: A hash verifies its own password only."""
        hashed = hash_password("Password123")
        assert hashed != "Password123"
        assert hashed.startswith("$2")
        assert compare_password("Password123", hashed) is True
        assert compare_password("Password124", hashed) is False

    def test_hash_is_salted(self):
        """SEC-P-002: Two hashes of the same password differ."""
        assert hash_password("Password123") != hash_password("Password123")

    @pytest.mark.parametrize("password", ["short", "x" * 129])
    def test_hash_rejects_bad_length(self, password):
        """SEC-P-003: Outside 6..128 characters raises ValueError."""
        with pytest.raises(ValueError, match="Password must be between 6 and 128 characters"):
            hash_password(password)

    @pytest.mark.parametrize("plain, hashed", [
        ("", "$2b$04$abcdefghijklmnopqrstuu"),
        ("Password123", ""),
        ("Password123", "not-a-bcrypt-hash"),
        ])
    def test_compare_never_raises(self, plain, hashed):
        """SEC-P-004: Empty or malformed input compares as False."""
        assert compare_password(plain, hashed) is False


# ============================================================================
# TOKENS
# ============================================================================

class TestTokens:
    """Signing, verification and header parsing."""

    def test_round_trip_claims(self):
        """SEC-T-001: Verified payload carries id and email."""
        payload = verify_token(generate_token(USER))
        assert payload is not None
        assert payload.id == 7
        assert payload.email == "jane@example.com"
        assert payload.exp > payload.iat

    def test_token_claims_issuer_and_audience(self):
        """SEC-T-002: iss/aud are set from settings."""
        settings = get_settings()
        claims = jwt.get_unverified_claims(generate_token(USER))
        assert claims["iss"] == settings.JWT_ISSUER
        assert claims["aud"] == settings.JWT_AUDIENCE

    def test_accepts_objects(self):
        """SEC-T-003: Any object with id/email attributes can be signed."""
        class Account:
            id = 3
            email = "obj@example.com"

        assert verify_token(generate_token(Account())).id == 3

    @pytest.mark.parametrize("user", [{}, {"id": 0, "email": "a@b.co"}, {"id": 1}, {"id": "1", "email": "a@b.co"}])
    def test_invalid_user_data(self, user):
        """SEC-T-004: Missing or malformed user data raises TokenError."""
        with pytest.raises(TokenError):
            generate_token(user)

    def test_expired_token(self):
        """SEC-T-005: Expired tokens verify as None."""
        settings = get_settings()
        past = utcnow() - timedelta(hours=2)
        token = jwt.encode(
            {
                "id": 7,
                "email": "jane@example.com",
                "iat": int(past.timestamp()),
                "exp": int((past + timedelta(hours=1)).timestamp()),
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
                },
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            )
        assert verify_token(token) is None

    def test_wrong_secret_and_audience(self):
        """SEC-T-006: Foreign signatures and audiences are rejected."""
        settings = get_settings()
        claims = {
            "id": 7,
            "email": "jane@example.com",
            "exp": int((utcnow() + timedelta(hours=1)).timestamp()),
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            }
        assert verify_token(jwt.encode(claims, "another-secret", algorithm="HS256")) is None
        other_audience = {**claims, "aud": "someone-else"}
        assert verify_token(jwt.encode(other_audience, settings.JWT_SECRET, algorithm="HS256")) is None

    def test_missing_identity_claims(self):
        """SEC-T-007: A valid signature without id/email is still rejected."""
        settings = get_settings()
        claims = {
            "sub": "7",
            "exp": int((utcnow() + timedelta(hours=1)).timestamp()),
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            }
        assert verify_token(jwt.encode(claims, settings.JWT_SECRET, algorithm="HS256")) is None

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_garbage(self, token):
        """SEC-T-008: Garbage never raises."""
        assert verify_token(token) is None

    def test_custom_lifetime(self):
        """SEC-T-009: expires_in overrides the configured lifetime."""
        payload = verify_token(generate_token(USER, expires_in="1h"))
        assert payload.exp - payload.iat == 3600


class TestBearerHeader:
    """extract_token_from_header."""

    def test_valid_header(self):
        """SEC-H-001: Bearer followed by a three-part token."""
        assert extract_token_from_header("Bearer abc.def-_.ghi") == "abc.def-_.ghi"

    @pytest.mark.parametrize("header", [
        None,
        "",
        "Bearer",
        "Bearer ",
        "bearer abc.def.ghi",
        "Basic abc.def.ghi",
        "Bearer abc.def",
        "Bearer abc.def.ghi extra",
        ])
    def test_invalid_headers(self, header):
        """SEC-H-002: Anything else yields None."""
        assert extract_token_from_header(header) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
