"""
Auth persistence helpers.
"""

from __future__ import annotations

from fastapi import Depends

from core.db import Database, get_database

# Never includes password_hash.
ACCOUNT_COLUMNS = "id, email, name, role, approved, enabled, created_at, updated_at"


class AuthRepository:
    def __init__(self, db: Database):
        self.db = db

    async def create_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str,
        approved: bool,
        enabled: bool = True,
    ) -> dict:
        row = await self.db.fetch_one(
            f"""
            INSERT INTO users (email, name, password_hash, role, approved, enabled)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {ACCOUNT_COLUMNS}
            """,
            email,
            name,
            password_hash,
            role,
            approved,
            enabled,
        )
        if row is None:
            raise RuntimeError("Failed to create user.")
        return row

    async def get_credentials_by_email(self, email: str) -> dict | None:
        return await self.db.fetch_one(
            f"""
            SELECT {ACCOUNT_COLUMNS}, password_hash
            FROM users
            WHERE email = $1
            """,
            email,
        )

    async def get_user_by_id(self, user_id: int) -> dict | None:
        return await self.db.fetch_one(
            f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM users
            WHERE id = $1
            """,
            user_id,
        )


def get_repository(db: Database = Depends(get_database)) -> AuthRepository:
    return AuthRepository(db)
