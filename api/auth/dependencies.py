"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.errors import Forbidden, InvalidCredential, Unauthenticated

from . import policy, service
from .repository import AuthRepository, get_repository


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise Unauthenticated("Access token required")

    parts = raw.split(None, 1)
    scheme = parts[0].lower()
    token = parts[1].strip() if len(parts) == 2 else ""
    if scheme != "bearer":
        raise InvalidCredential("Authorization must be: Bearer <token>")
    if not token:
        raise Unauthenticated("Access token required")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(
    access_token: str = Depends(get_bearer_token),
    repo: AuthRepository = Depends(get_repository),
) -> dict:
    return await service.get_user_from_access_token(repo, access_token)


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if not policy.is_admin(current_user):
        raise Forbidden("Admin access required")
    return current_user


async def require_contributor(current_user: dict = Depends(get_current_user)) -> dict:
    if not policy.is_contributor_or_above(current_user):
        raise Forbidden("Contributor access required")
    return current_user
