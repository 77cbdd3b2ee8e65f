"""
Password hashing and access tokens for contributor and admin accounts.

Tokens are short JWTs carrying the account id, email and role. Expiry is
reported separately from every other decode failure so the verifier can
answer "Token expired" instead of "Invalid token".
"""

from __future__ import annotations

import time
from typing import Any

import bcrypt
import jwt

from core import config

BCRYPT_ROUNDS = 10
TOKEN_TYPE = "access"


class AuthSecurityError(RuntimeError):
    pass


class TokenExpiredError(AuthSecurityError):
    pass


def jwt_secret() -> str:
    # Override in every deployed environment.
    return config.env_str("JWT_SECRET", "wildlife-dev-secret")


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    return config.env_int("ACCESS_TOKEN_EXPIRE_MIN", 24 * 60)


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise AuthSecurityError("Cannot hash an empty password.")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def build_access_token(*, user_id: int, email: str, role: str) -> str:
    issued_at = now_epoch_s()
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + access_token_expire_minutes() * 60,
    }
    return jwt.encode(claims, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises TokenExpiredError for an expired token and AuthSecurityError for
    anything else that does not check out (bad signature, garbage, wrong type).
    """
    token = (token or "").strip()
    if not token:
        raise AuthSecurityError("Access token is empty.")

    try:
        claims = jwt.decode(token, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid token") from exc

    if str(claims.get("type") or "").lower() != TOKEN_TYPE:
        raise AuthSecurityError("Not an access token.")
    return claims
