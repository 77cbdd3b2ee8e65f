"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core.db import UniqueViolation
from core.errors import Conflict, ExpiredCredential, Forbidden, InvalidCredential, Unauthenticated

from . import policy, schemas, security
from .repository import AuthRepository

logger = logging.getLogger(__name__)

CONTEXT_FIELDS = ("id", "email", "name", "role", "approved", "enabled")


def to_account_response(user_row: dict) -> schemas.AccountResponse:
    return schemas.AccountResponse(
        id=int(user_row["id"]),
        email=str(user_row["email"]),
        name=str(user_row["name"]),
        role=user_row["role"],
        approved=bool(user_row["approved"]),
        enabled=bool(user_row["enabled"]),
        created_at=user_row.get("created_at"),
        updated_at=user_row.get("updated_at"),
    )


def is_active(user_row: dict) -> bool:
    return bool(user_row.get("enabled", False)) and bool(user_row.get("approved", False))


async def register(repo: AuthRepository, payload: schemas.RegisterRequest) -> schemas.AccountResponse:
    existing = await repo.get_credentials_by_email(payload.email)
    if existing is not None:
        raise Conflict("User already exists with this email")

    try:
        user_row = await repo.create_user(
            email=payload.email,
            name=payload.name,
            password_hash=security.hash_password(payload.password),
            role=policy.CONTRIBUTOR,
            approved=False,
        )
    except UniqueViolation as exc:
        raise Conflict("User already exists with this email") from exc

    logger.info("account_registered user_id=%s", user_row["id"])
    return to_account_response(user_row)


async def login(repo: AuthRepository, payload: schemas.LoginRequest) -> schemas.TokenResponse:
    user_row = await repo.get_credentials_by_email(payload.email.strip())
    if user_row is None:
        raise InvalidCredential("Invalid email or password")

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise InvalidCredential("Invalid email or password")

    if not is_active(user_row):
        raise Forbidden("Account not approved or disabled")

    token = security.build_access_token(
        user_id=int(user_row["id"]),
        email=str(user_row["email"]),
        role=str(user_row["role"]),
    )
    return schemas.TokenResponse(token=token, user=to_account_response(user_row))


async def get_user_from_access_token(repo: AuthRepository, access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.TokenExpiredError as exc:
        raise ExpiredCredential() from exc
    except security.AuthSecurityError as exc:
        raise InvalidCredential() from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise InvalidCredential("Invalid access token subject")

    user_row = await repo.get_user_by_id(int(subject))
    if user_row is None:
        raise Unauthenticated("User not found")
    if not is_active(user_row):
        raise Forbidden("Account not approved or disabled")

    return {field: user_row[field] for field in CONTEXT_FIELDS}
