"""
Account directory persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends

from auth.repository import ACCOUNT_COLUMNS
from core.db import Database, get_database

# Whitelisted columns for partial updates: field name -> SQL column.
UPDATABLE_COLUMNS = {
    "name": "name",
    "email": "email",
    "role": "role",
    "approved": "approved",
    "enabled": "enabled",
}


class UserRepository:
    def __init__(self, db: Database):
        self.db = db

    async def list_users(
        self,
        *,
        role: str | None,
        approved: bool | None,
        limit: int,
        offset: int,
    ) -> list[dict]:
        return await self.db.fetch_all(
            """
            SELECT u.id, u.email, u.name, u.role, u.approved, u.enabled,
                   u.created_at, u.updated_at,
                   (SELECT count(*) FROM articles a WHERE a.author_id = u.id) AS article_count
            FROM users u
            WHERE ($1::text IS NULL OR u.role = $1)
              AND ($2::boolean IS NULL OR u.approved = $2)
            ORDER BY u.created_at DESC, u.id DESC
            LIMIT $3 OFFSET $4
            """,
            role,
            approved,
            limit,
            offset,
        )

    async def count_users(self, *, role: str | None, approved: bool | None) -> int:
        total = await self.db.fetch_val(
            """
            SELECT count(*)
            FROM users
            WHERE ($1::text IS NULL OR role = $1)
              AND ($2::boolean IS NULL OR approved = $2)
            """,
            role,
            approved,
        )
        return int(total or 0)

    async def stats(self) -> dict:
        row = await self.db.fetch_one(
            """
            SELECT
              (SELECT count(*) FROM users) AS total_users,
              (SELECT count(*) FROM users WHERE approved = false) AS pending_users,
              (SELECT count(*) FROM users WHERE role = 'ADMIN') AS admin_users,
              (SELECT count(*) FROM users WHERE role = 'CONTRIBUTOR') AS contributor_users,
              (SELECT count(*) FROM articles) AS total_articles,
              (SELECT count(*) FROM articles WHERE published = true) AS published_articles
            """
        )
        if row is None:
            raise RuntimeError("Failed to compute stats.")
        return row

    async def get_user(self, user_id: int) -> dict | None:
        return await self.db.fetch_one(
            f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM users
            WHERE id = $1
            """,
            user_id,
        )

    async def list_user_articles(self, user_id: int) -> list[dict]:
        return await self.db.fetch_all(
            """
            SELECT id, title, published, views, created_at
            FROM articles
            WHERE author_id = $1
            ORDER BY created_at DESC, id DESC
            """,
            user_id,
        )

    async def update_user(self, user_id: int, fields: dict[str, Any]) -> dict | None:
        if not fields:
            return await self.get_user(user_id)

        assignments: list[str] = []
        args: list[Any] = [user_id]
        for key, value in fields.items():
            args.append(value)
            assignments.append(f"{UPDATABLE_COLUMNS[key]} = ${len(args)}")

        return await self.db.fetch_one(
            f"""
            UPDATE users
            SET {", ".join(assignments)},
                updated_at = now()
            WHERE id = $1
            RETURNING {ACCOUNT_COLUMNS}
            """,
            *args,
        )

    async def set_approved(self, user_id: int, approved: bool) -> dict | None:
        return await self.db.fetch_one(
            f"""
            UPDATE users
            SET approved = $2,
                updated_at = now()
            WHERE id = $1
            RETURNING {ACCOUNT_COLUMNS}
            """,
            user_id,
            approved,
        )

    async def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        row = await self.db.fetch_one(
            """
            UPDATE users
            SET password_hash = $2,
                updated_at = now()
            WHERE id = $1
            RETURNING id
            """,
            user_id,
            password_hash,
        )
        return row is not None

    async def delete_user(self, user_id: int) -> bool:
        # articles.author_id cascades.
        row = await self.db.fetch_one(
            """
            DELETE FROM users
            WHERE id = $1
            RETURNING id
            """,
            user_id,
        )
        return row is not None


def get_repository(db: Database = Depends(get_database)) -> UserRepository:
    return UserRepository(db)
