"""
Account directory business logic.

Every operation here is admin-only; the router enforces that with
`auth.dependencies.require_admin` before any of these run.
"""

from __future__ import annotations

import logging

from auth import policy, security
from auth.repository import AuthRepository
from auth.service import to_account_response
from core.db import UniqueViolation
from core.errors import Conflict, InvalidRequest, NotFound
from core.pagination import PageParams, pagination_block

from . import schemas
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _to_list_item(row: dict) -> schemas.UserListItem:
    base = to_account_response(row)
    return schemas.UserListItem(**base.model_dump(), article_count=int(row.get("article_count") or 0))


async def list_users(
    repo: UserRepository,
    *,
    role: str | None,
    approved: bool | None,
    params: PageParams,
) -> dict:
    rows = await repo.list_users(role=role, approved=approved, limit=params.limit, offset=params.offset)
    total = await repo.count_users(role=role, approved=approved)
    return {
        "users": [_to_list_item(row) for row in rows],
        "pagination": pagination_block(params, total),
    }


async def stats(repo: UserRepository) -> dict:
    row = await repo.stats()
    total_articles = int(row["total_articles"])
    published_articles = int(row["published_articles"])
    return {
        "users": {
            "total": int(row["total_users"]),
            "pending": int(row["pending_users"]),
            "admins": int(row["admin_users"]),
            "contributors": int(row["contributor_users"]),
        },
        "articles": {
            "total": total_articles,
            "published": published_articles,
            "drafts": total_articles - published_articles,
        },
    }


async def get_user(repo: UserRepository, user_id: int) -> schemas.UserDetail:
    row = await repo.get_user(user_id)
    if row is None:
        raise NotFound("User not found")

    articles = await repo.list_user_articles(user_id)
    base = to_account_response(row)
    return schemas.UserDetail(
        **base.model_dump(),
        article_count=len(articles),
        articles=[schemas.ArticleSummary(**article) for article in articles],
    )


async def create_user(auth_repo: AuthRepository, payload: schemas.CreateUserRequest) -> dict:
    existing = await auth_repo.get_credentials_by_email(payload.email)
    if existing is not None:
        raise Conflict("User already exists with this email")

    try:
        row = await auth_repo.create_user(
            email=payload.email,
            name=payload.name,
            password_hash=security.hash_password(payload.password),
            role=payload.role,
            # Admin-created accounts skip the approval queue.
            approved=True,
            enabled=True,
        )
    except UniqueViolation as exc:
        raise Conflict("User already exists with this email") from exc

    logger.info("account_created user_id=%s role=%s", row["id"], row["role"])
    return row


async def update_user(
    repo: UserRepository,
    user_id: int,
    payload: schemas.UpdateUserRequest,
    *,
    current_user: dict,
) -> dict:
    existing = await repo.get_user(user_id)
    if existing is None:
        raise NotFound("User not found")

    fields = payload.model_dump(exclude_unset=True)
    if int(current_user["id"]) == user_id and fields.get("enabled") is False:
        raise InvalidRequest("You cannot disable your own account")

    try:
        row = await repo.update_user(user_id, fields)
    except UniqueViolation as exc:
        raise Conflict("Email already exists") from exc

    if row is None:
        raise NotFound("User not found")
    logger.info("account_updated user_id=%s fields=%s", user_id, sorted(fields))
    return row


async def set_approval(repo: UserRepository, user_id: int, approved: bool) -> dict:
    row = await repo.set_approved(user_id, approved)
    if row is None:
        raise NotFound("User not found")
    logger.info("account_approval user_id=%s approved=%s", user_id, approved)
    return row


async def reset_password(repo: UserRepository, user_id: int, new_password: str) -> None:
    updated = await repo.set_password_hash(user_id, security.hash_password(new_password))
    if not updated:
        raise NotFound("User not found")
    logger.info("account_password_reset user_id=%s", user_id)


async def delete_user(repo: UserRepository, user_id: int, *, current_user: dict) -> None:
    if int(current_user["id"]) == user_id:
        raise InvalidRequest("You cannot delete your own account")

    deleted = await repo.delete_user(user_id)
    if not deleted:
        raise NotFound("User not found")
    logger.info("account_deleted user_id=%s", user_id)


async def ensure_bootstrap_admin(auth_repo: AuthRepository, *, email: str, password: str, name: str) -> None:
    """
    Create the configured admin account unless one with that email exists.
    """
    if await auth_repo.get_credentials_by_email(email) is not None:
        return None
    try:
        row = await auth_repo.create_user(
            email=email,
            name=name,
            password_hash=security.hash_password(password),
            role=policy.ADMIN,
            approved=True,
            enabled=True,
        )
    except UniqueViolation:
        # Another worker created it first.
        return None
    logger.info("bootstrap_admin_created user_id=%s", row["id"])
