"""Tests for session tokens and password hashing."""
from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from planmap.auth import create_access_token, decode_access_token, hash_password, verify_password
from planmap.config import settings
from planmap.domain.errors import UnauthorizedError


class TestAccessTokens:
    """Test JWT issue and verification."""

    def test_round_trip(self):
        payload = decode_access_token(create_access_token("user-1"))
        assert payload["sub"] == "user-1"
        assert payload["iss"] == "planmap"

    def test_expired(self):
        token = create_access_token("user-1", expires_in=timedelta(seconds=-1))
        with pytest.raises(UnauthorizedError, match="Token has expired"):
            decode_access_token(token)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "user-1", "iss": "planmap", "exp": 9999999999}, "other-secret", algorithm="HS256")
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_access_token(token)

    def test_missing_subject(self):
        token = jwt.encode({"iss": "planmap", "exp": 9999999999}, settings.JWT_SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            decode_access_token(token)

    @pytest.mark.parametrize("token", ["", "abc", "a.b"])
    def test_bad_format(self, token):
        with pytest.raises(UnauthorizedError, match="Invalid token format"):
            decode_access_token(token)


class TestPasswords:
    """Test PBKDF2 hashing."""

    def test_verify(self):
        encoded = hash_password("secret123")
        assert encoded.startswith("pbkdf2_sha256$")
        assert verify_password("secret123", encoded)
        assert not verify_password("secret124", encoded)

    def test_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_malformed_hash(self):
        assert not verify_password("secret123", "plain-text")
