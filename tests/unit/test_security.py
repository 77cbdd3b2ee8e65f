"""Tests for auth.security password and token helpers."""

import jwt
import pytest

from auth import security


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = security.hash_password("hunter22")
        assert hashed != "hunter22"
        assert security.verify_password("hunter22", hashed)
        assert not security.verify_password("hunter23", hashed)

    def test_hashes_are_salted(self) -> None:
        assert security.hash_password("same-password") != security.hash_password("same-password")

    def test_empty_password_rejected(self) -> None:
        with pytest.raises(security.AuthSecurityError):
            security.hash_password("")

    def test_verify_against_garbage_hash(self) -> None:
        assert not security.verify_password("anything", "not-a-bcrypt-hash")
        assert not security.verify_password("anything", "")


class TestAccessTokens:
    def test_round_trip_claims(self) -> None:
        token = security.build_access_token(user_id=7, email="a@b.org", role="ADMIN")
        payload = security.decode_access_token(token)
        assert payload["sub"] == "7"
        assert payload["role"] == "ADMIN"
        assert payload["type"] == "access"
        assert payload["exp"] > payload["iat"]

    def test_expired_token(self) -> None:
        now = security.now_epoch_s()
        token = jwt.encode(
            {"sub": "1", "type": "access", "iat": now - 120, "exp": now - 60},
            security.jwt_secret(),
            algorithm=security.jwt_algorithm(),
        )
        with pytest.raises(security.TokenExpiredError):
            security.decode_access_token(token)

    def test_wrong_signature(self) -> None:
        token = jwt.encode({"sub": "1", "type": "access"}, "another-secret", algorithm="HS256")
        with pytest.raises(security.AuthSecurityError) as exc_info:
            security.decode_access_token(token)
        assert not isinstance(exc_info.value, security.TokenExpiredError)

    def test_garbage_token(self) -> None:
        with pytest.raises(security.AuthSecurityError):
            security.decode_access_token("not.a.jwt")

    def test_non_access_token_type(self) -> None:
        token = jwt.encode({"sub": "1", "type": "refresh"}, security.jwt_secret(), algorithm="HS256")
        with pytest.raises(security.AuthSecurityError):
            security.decode_access_token(token)
